"""Platform Risk Calculator.

Starts from the owner-reported reliability score (0-10, scaled to 0-100) and
subtracts a penalty per matching recall and per owner-issue category.
"""

from collections.abc import Iterable

from evrisk.core.enums import Frequency, Severity
from evrisk.models.reference import OwnerIssue, OwnerIssueCluster, RecallRecord
from evrisk.models.scoring import PlatformRiskScore, ScoringInput
from evrisk.services.resolver import EntityResolver
from evrisk.utils.converters import clamp_score

# Neutral reliability when a model has no owner-issue data
DEFAULT_RELIABILITY = 7.0

RECALL_PENALTY: dict[Severity, int] = {
    Severity.CRITICAL: 20,
    Severity.HIGH: 10,
    Severity.MEDIUM: 5,
    Severity.LOW: 2,
}

# Recalls at these severities are reported as "critical"
CRITICAL_SEVERITIES = (Severity.CRITICAL, Severity.HIGH)


def recall_penalty(recalls: Iterable[RecallRecord]) -> int:
    return sum(RECALL_PENALTY[recall.severity] for recall in recalls)


def owner_issue_penalty(issue: OwnerIssue) -> int:
    """Penalty for one issue category from its severity × frequency.

    First matching row wins:
        Critical severity and High frequency      15
        Critical severity or High frequency       10
        High severity and Medium frequency         7
        High severity or Medium frequency          5
        anything else                              2
    """
    critical = issue.severity is Severity.CRITICAL
    high_severity = issue.severity is Severity.HIGH
    high_frequency = issue.frequency is Frequency.HIGH
    medium_frequency = issue.frequency is Frequency.MEDIUM

    if critical and high_frequency:
        return 15
    if critical or high_frequency:
        return 10
    if high_severity and medium_frequency:
        return 7
    if high_severity or medium_frequency:
        return 5
    return 2


def cluster_penalty(cluster: OwnerIssueCluster | None) -> int:
    if cluster is None:
        return 0
    return sum(owner_issue_penalty(issue) for issue in cluster.common_issues)


def calculate_platform_risk(
    scoring_input: ScoringInput, resolver: EntityResolver
) -> PlatformRiskScore:
    """Platform sub-score (30% of the overall score)."""
    recalls = resolver.resolve_recalls(scoring_input.model, scoring_input.year)
    cluster = resolver.resolve_owner_issues(scoring_input.model)

    total_recalls = len(recalls)
    critical_recalls = sum(1 for r in recalls if r.severity in CRITICAL_SEVERITIES)
    reliability = cluster.reliability_score if cluster is not None else DEFAULT_RELIABILITY

    raw_score = reliability * 10 - recall_penalty(recalls) - cluster_penalty(cluster)

    details = (
        f"{total_recalls} recall(s) ({critical_recalls} critical), "
        f"reliability score {reliability:g}/10"
    )
    issue_categories = None
    if cluster is not None:
        issue_categories = len(cluster.common_issues)
        details += f", {issue_categories} known issue categories"

    return PlatformRiskScore(
        score=clamp_score(raw_score),
        critical_recalls=critical_recalls,
        total_recalls=total_recalls,
        reliability_score=reliability,
        issue_categories=issue_categories,
        details=details,
    )
