"""Tests for loading the reference tables from disk."""

import json
import shutil
from pathlib import Path

import pytest
from conftest import build_reference, climate_zones

from evrisk.core.exceptions import ReferenceDataError
from evrisk.models.reference import ClimateZoneRecord
from evrisk.services.reference_data import (
    FILES,
    get_reference_data,
    load_reference_data,
    reset_reference_data,
)

SHIPPED_DATA_DIR = Path(__file__).resolve().parent.parent / "data_v1.0"


@pytest.fixture
def data_dir(tmp_path):
    """Writable copy of the shipped data directory."""
    target = tmp_path / "data"
    shutil.copytree(SHIPPED_DATA_DIR, target)
    return target


def _rewrite(path: Path, old: str, new: str) -> None:
    text = path.read_text(encoding="utf-8")
    assert old in text
    path.write_text(text.replace(old, new, 1), encoding="utf-8")


# ---------------------------------------------------------------------------
# Shipped data
# ---------------------------------------------------------------------------


class TestShippedData:
    def test_loads_every_table(self):
        sizes = load_reference_data(SHIPPED_DATA_DIR).table_sizes()
        assert sizes["chemistry_profiles"] == 5
        assert sizes["replacement_costs"] == 4
        assert sizes["range_deltas"] > 0
        assert sizes["recalls"] > 0
        assert sizes["owner_issues"] > 0
        assert sizes["climate_zones"] == sizes["charger_density"]

    def test_zip_prefix_keeps_leading_zero(self):
        reference = load_reference_data(SHIPPED_DATA_DIR)
        assert "021" in reference.climate_zones
        assert reference.climate_zones["021"].city == "Boston"

    def test_cluster_model_filled_from_key(self):
        reference = load_reference_data(SHIPPED_DATA_DIR)
        cluster = reference.owner_issues["Tesla Model 3"]
        assert cluster.model == "Tesla Model 3"
        assert cluster.reliability_score == 8.0

    def test_thresholds_and_warranty(self):
        reference = load_reference_data(SHIPPED_DATA_DIR)
        assert reference.thresholds.green.max_degradation_percent == 10
        assert reference.thresholds.red.min_degradation_percent == 20
        assert reference.warranty is not None

    def test_tables_are_read_only(self):
        reference = load_reference_data(SHIPPED_DATA_DIR)
        with pytest.raises(TypeError):
            reference.climate_zones["000"] = None


# ---------------------------------------------------------------------------
# Malformed data
# ---------------------------------------------------------------------------


class TestMalformedData:
    def test_missing_file(self, data_dir):
        (data_dir / FILES["recalls"]).unlink()
        with pytest.raises(ReferenceDataError) as exc:
            load_reference_data(data_dir)
        assert exc.value.path.name == "recalls.csv"

    def test_invalid_json(self, data_dir):
        (data_dir / FILES["owner_issues"]).write_text("{not json", encoding="utf-8")
        with pytest.raises(ReferenceDataError, match="invalid JSON"):
            load_reference_data(data_dir)

    def test_json_must_be_object(self, data_dir):
        (data_dir / FILES["owner_issues"]).write_text("[]", encoding="utf-8")
        with pytest.raises(ReferenceDataError, match="must be an object"):
            load_reference_data(data_dir)

    def test_missing_chemistry_map(self, data_dir):
        path = data_dir / FILES["battery_degradation"]
        data = json.loads(path.read_text(encoding="utf-8"))
        del data["chemistry_map"]
        path.write_text(json.dumps(data), encoding="utf-8")
        with pytest.raises(ReferenceDataError, match="chemistry_map"):
            load_reference_data(data_dir)

    def test_missing_cost_tier(self, data_dir):
        path = data_dir / FILES["battery_degradation"]
        data = json.loads(path.read_text(encoding="utf-8"))
        del data["replacement_cost_estimates"]["premium"]
        path.write_text(json.dumps(data), encoding="utf-8")
        with pytest.raises(ReferenceDataError, match="premium"):
            load_reference_data(data_dir)

    def test_reliability_out_of_range(self, data_dir):
        _rewrite(
            data_dir / FILES["owner_issues"],
            '"reliability_score": 8.0',
            '"reliability_score": 12.0',
        )
        with pytest.raises(ReferenceDataError):
            load_reference_data(data_dir)

    def test_missing_csv_column(self, data_dir):
        _rewrite(
            data_dir / FILES["range_delta"],
            "model,year,epa_range_mi,",
            "model,year,epa_range,",
        )
        with pytest.raises(ReferenceDataError, match="missing columns: epa_range_mi"):
            load_reference_data(data_dir)

    def test_non_numeric_cell_reports_line(self, data_dir):
        _rewrite(
            data_dir / FILES["range_delta"],
            "Tesla Model 3 Long Range,2019,",
            "Tesla Model 3 Long Range,twenty,",
        )
        with pytest.raises(ReferenceDataError, match="line 2"):
            load_reference_data(data_dir)

    def test_unknown_severity(self, data_dir):
        _rewrite(data_dir / FILES["recalls"], ",Critical,", ",Catastrophic,")
        with pytest.raises(ReferenceDataError):
            load_reference_data(data_dir)

    def test_error_message_names_file(self, data_dir):
        (data_dir / FILES["climate_zones"]).unlink()
        with pytest.raises(ReferenceDataError) as exc:
            load_reference_data(data_dir)
        assert str(exc.value).startswith("climate_zones.csv:")


# ---------------------------------------------------------------------------
# Snapshot construction and the shared provider
# ---------------------------------------------------------------------------


class TestSnapshot:
    def test_duplicate_zip_prefix_keeps_first_row(self):
        rows = climate_zones() + [
            ClimateZoneRecord(zip_prefix="100", zone="Extreme Cold", avg_temp_f=10)
        ]
        reference = build_reference(climate_zones=rows)
        assert reference.climate_zones["100"].zone.value == "Moderate"

    def test_table_sizes_keys(self, reference):
        assert set(reference.table_sizes()) == {
            "chemistry_profiles",
            "replacement_costs",
            "range_deltas",
            "recalls",
            "owner_issues",
            "climate_zones",
            "charger_density",
        }


class TestSharedProvider:
    def test_loaded_once(self):
        reset_reference_data()
        try:
            first = get_reference_data()
            assert get_reference_data() is first
        finally:
            reset_reference_data()

    def test_reset_reloads(self):
        reset_reference_data()
        try:
            first = get_reference_data()
            reset_reference_data()
            assert get_reference_data() is not first
        finally:
            reset_reference_data()
