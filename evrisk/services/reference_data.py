"""Reference Data Store - loads and indexes the six static reference tables.

Two tables are JSON objects keyed by id/model (battery chemistry, owner issue
clusters); four are flat CSV files with a header row naming every field
(range deltas, recalls, climate zones, charger density).

Tables are loaded once and never mutated afterwards, so a ``ReferenceData``
snapshot can be shared by any number of concurrent scoring calls. A malformed
file raises ``ReferenceDataError`` at load time; there is no partial snapshot.
"""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, TypeVar

import pandas as pd
from pydantic import BaseModel, ValidationError

from evrisk.core.config import get_settings
from evrisk.core.exceptions import ReferenceDataError
from evrisk.core.logging import log_table_load, logger
from evrisk.models.reference import (
    BatteryChemistryProfile,
    ChargerDensityRecord,
    ClimateZoneRecord,
    DegradationThresholds,
    OwnerIssueCluster,
    RangeDeltaRecord,
    RecallRecord,
    ReplacementCostTier,
    WarrantyReference,
)

RowT = TypeVar("RowT", bound=BaseModel)

# =============================================================================
# FILE LAYOUT
# =============================================================================

FILES: dict[str, str] = {
    "battery_degradation": "battery_degradation.json",
    "range_delta": "range_delta.csv",
    "recalls": "recalls.csv",
    "owner_issues": "owner_issue_clusters.json",
    "climate_zones": "climate_zones.csv",
    "charger_density": "charger_density.csv",
}

# Size buckets every battery_degradation.json must price
REPLACEMENT_COST_TIERS: tuple[str, ...] = ("compact", "midsize", "large", "premium")


# =============================================================================
# SNAPSHOT
# =============================================================================


@dataclass(frozen=True)
class ReferenceData:
    """Immutable, indexed snapshot of all reference tables.

    Construct with ``ReferenceData.build`` (synthetic tables, e.g. in tests)
    or ``load_reference_data`` (files on disk).
    """

    chemistry_profiles: Mapping[str, BatteryChemistryProfile]
    replacement_costs: Mapping[str, ReplacementCostTier]
    range_deltas: tuple[RangeDeltaRecord, ...]
    recalls: tuple[RecallRecord, ...]
    owner_issues: Mapping[str, OwnerIssueCluster]
    climate_zones: Mapping[str, ClimateZoneRecord]
    charger_density: Mapping[str, ChargerDensityRecord]
    thresholds: DegradationThresholds | None = None
    warranty: WarrantyReference | None = None

    @classmethod
    def build(
        cls,
        *,
        chemistry_profiles: Iterable[BatteryChemistryProfile],
        replacement_costs: Iterable[ReplacementCostTier],
        range_deltas: Iterable[RangeDeltaRecord] = (),
        recalls: Iterable[RecallRecord] = (),
        owner_issues: Iterable[OwnerIssueCluster] = (),
        climate_zones: Iterable[ClimateZoneRecord] = (),
        charger_density: Iterable[ChargerDensityRecord] = (),
        thresholds: DegradationThresholds | None = None,
        warranty: WarrantyReference | None = None,
    ) -> ReferenceData:
        """Index row collections into a read-only snapshot.

        ZIP-keyed tables keep the first row seen for a prefix. Owner issue
        clusters keep file order so the resolver can document its tie-break.
        """
        return cls(
            chemistry_profiles=MappingProxyType(
                {p.id: p for p in chemistry_profiles}
            ),
            replacement_costs=MappingProxyType(
                {t.name: t for t in replacement_costs}
            ),
            range_deltas=tuple(range_deltas),
            recalls=tuple(recalls),
            owner_issues=MappingProxyType({c.model: c for c in owner_issues}),
            climate_zones=MappingProxyType(_index_by_prefix(climate_zones)),
            charger_density=MappingProxyType(_index_by_prefix(charger_density)),
            thresholds=thresholds,
            warranty=warranty,
        )

    def table_sizes(self) -> dict[str, int]:
        """Row count per table (used by /health and the check script)."""
        return {
            "chemistry_profiles": len(self.chemistry_profiles),
            "replacement_costs": len(self.replacement_costs),
            "range_deltas": len(self.range_deltas),
            "recalls": len(self.recalls),
            "owner_issues": len(self.owner_issues),
            "climate_zones": len(self.climate_zones),
            "charger_density": len(self.charger_density),
        }


def _index_by_prefix(rows: Iterable[Any]) -> dict[str, Any]:
    index: dict[str, Any] = {}
    for row in rows:
        index.setdefault(row.zip_prefix, row)
    return index


# =============================================================================
# LOADERS
# =============================================================================


def _read_json(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ReferenceDataError(path, "file not found")
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ReferenceDataError(path, f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ReferenceDataError(path, "top-level value must be an object")
    return data


def _read_csv(path: Path, row_model: type[RowT], table: str) -> tuple[RowT, ...]:
    """Read a headered CSV and coerce every row through ``row_model``.

    All cells are read as strings; pydantic does the numeric coercion so a
    non-numeric value in an integer column fails the load instead of
    becoming NaN.
    """
    if not path.is_file():
        raise ReferenceDataError(path, "file not found")

    start = time.time()
    try:
        df = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ReferenceDataError(path, f"invalid CSV: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]
    missing = [name for name in row_model.model_fields if name not in df.columns]
    if missing:
        raise ReferenceDataError(path, f"missing columns: {', '.join(missing)}")

    rows: list[RowT] = []
    # Line 1 is the header
    for line_no, record in enumerate(df.to_dict(orient="records"), start=2):
        try:
            rows.append(row_model.model_validate(record))
        except ValidationError as e:
            raise ReferenceDataError(path, f"line {line_no}: {e}") from e

    log_table_load(table, len(rows), (time.time() - start) * 1000)
    return tuple(rows)


def load_battery_degradation(path: Path) -> dict[str, Any]:
    """Load battery_degradation.json.

    Returns:
        Dict with ``chemistry_profiles``, ``replacement_costs``, ``thresholds``
        and ``warranty`` ready to pass to ``ReferenceData.build``.
    """
    data = _read_json(path)
    for key in ("chemistry_map", "replacement_cost_estimates"):
        if not isinstance(data.get(key), dict):
            raise ReferenceDataError(path, f"missing object '{key}'")

    costs = data["replacement_cost_estimates"]
    missing_tiers = [t for t in REPLACEMENT_COST_TIERS if t not in costs]
    if missing_tiers:
        raise ReferenceDataError(
            path, f"missing replacement cost tiers: {', '.join(missing_tiers)}"
        )

    try:
        profiles = [
            BatteryChemistryProfile.model_validate({**body, "id": chem_id})
            for chem_id, body in data["chemistry_map"].items()
        ]
        tiers = [
            ReplacementCostTier.model_validate({**body, "name": name})
            for name, body in costs.items()
        ]
        thresholds = (
            DegradationThresholds.model_validate(data["thresholds"])
            if "thresholds" in data
            else None
        )
        warranty = (
            WarrantyReference.model_validate(data["warranty_reference"])
            if "warranty_reference" in data
            else None
        )
    except (ValidationError, TypeError) as e:
        raise ReferenceDataError(path, str(e)) from e

    log_table_load("battery_degradation", len(profiles))
    return {
        "chemistry_profiles": profiles,
        "replacement_costs": tiers,
        "thresholds": thresholds,
        "warranty": warranty,
    }


def load_owner_issues(path: Path) -> list[OwnerIssueCluster]:
    """Load owner_issue_clusters.json, preserving file order."""
    data = _read_json(path)
    try:
        clusters = [
            OwnerIssueCluster.model_validate({**body, "model": model})
            for model, body in data.items()
        ]
    except (ValidationError, TypeError) as e:
        raise ReferenceDataError(path, str(e)) from e
    log_table_load("owner_issues", len(clusters))
    return clusters


def load_reference_data(data_dir: Path | str) -> ReferenceData:
    """Load and index all six tables from ``data_dir``.

    Raises:
        ReferenceDataError: if any file is missing or malformed.
    """
    data_dir = Path(data_dir)
    start = time.time()

    battery = load_battery_degradation(data_dir / FILES["battery_degradation"])
    snapshot = ReferenceData.build(
        **battery,
        range_deltas=_read_csv(
            data_dir / FILES["range_delta"], RangeDeltaRecord, "range_delta"
        ),
        recalls=_read_csv(data_dir / FILES["recalls"], RecallRecord, "recalls"),
        owner_issues=load_owner_issues(data_dir / FILES["owner_issues"]),
        climate_zones=_read_csv(
            data_dir / FILES["climate_zones"], ClimateZoneRecord, "climate_zones"
        ),
        charger_density=_read_csv(
            data_dir / FILES["charger_density"],
            ChargerDensityRecord,
            "charger_density",
        ),
    )

    _warn_unresolvable_chemistries(snapshot)
    logger.info(
        f"Reference data loaded from {data_dir} "
        f"duration_ms={(time.time() - start) * 1000:.2f} {snapshot.table_sizes()}"
    )
    return snapshot


def _warn_unresolvable_chemistries(snapshot: ReferenceData) -> None:
    unknown = sorted(
        {
            row.chemistry
            for row in snapshot.range_deltas
            if row.chemistry and row.chemistry not in snapshot.chemistry_profiles
        }
    )
    if unknown:
        logger.warning(
            f"range_delta references chemistries missing from chemistry_map: {unknown}"
        )


# =============================================================================
# PROCESS-WIDE PROVIDER
# =============================================================================

_reference_data: ReferenceData | None = None
_load_lock = threading.Lock()


def get_reference_data() -> ReferenceData:
    """Get or load the shared reference snapshot (thread-safe, loaded once)."""
    global _reference_data
    if _reference_data is None:
        with _load_lock:
            if _reference_data is None:
                _reference_data = load_reference_data(get_settings().data_dir)
    return _reference_data


def reset_reference_data() -> None:
    """Drop the cached snapshot so the next call reloads from disk."""
    global _reference_data
    with _load_lock:
        _reference_data = None
