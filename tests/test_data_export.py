"""Tests for Hazen dataset interchange and CSV exports."""
import csv
import io
import json
from datetime import date

import pytest

from pfas_gac.exceptions import InputValidationError
from pfas_gac.models.schemas import BreakthroughPoint, MonteCarloResult, ValidationMetrics
from pfas_gac.services.data_export import (
    hazen_import_template,
    export_hazen_dataset,
    parse_hazen_dataset,
    breakthrough_curve_csv,
    validation_comparison_csv,
    monte_carlo_csv,
    export_filename,
)
from pfas_gac.services.kinetics import simulate_breakthrough


@pytest.fixture
def curve(sample_breakthrough_request):
    return simulate_breakthrough(**dict(sample_breakthrough_request, n_points=20))


class TestHazenTemplate:
    """Tests for the empty import template."""

    def test_sections(self):
        template = hazen_import_template()
        for section in (
            "metadata",
            "site_information",
            "system_configuration",
            "water_quality",
            "pfas_concentrations_ngL",
            "gac_properties",
            "economic_parameters",
            "operational_parameters",
            "observed_breakthrough_data",
        ):
            assert section in template

    def test_defaults(self):
        template = hazen_import_template()
        assert template["system_configuration"]["system_type"] == "Fixed Bed"
        assert template["system_configuration"]["ebct_minutes"] is None
        assert template["economic_parameters"]["operating_days_per_year"] == 365
        assert template["operational_parameters"]["safety_factor"] == 1.5
        assert template["pfas_concentrations_ngL"]["PFDoA"] is None
        assert template["pfas_concentrations_ngL"]["total_PFAS"] is None

    def test_json_serializable(self):
        json.dumps(hazen_import_template())


class TestHazenRoundTrip:
    """Tests for export then parse."""

    def test_configuration_round_trip(self, flint_config):
        exported = json.loads(json.dumps(export_hazen_dataset(flint_config)))
        parsed = parse_hazen_dataset(exported)
        assert parsed.configuration.model_dump() == flint_config.model_dump()

    def test_curve_round_trip(self, flint_config, curve):
        exported = export_hazen_dataset(flint_config, curve=curve, site_information={"project_name": "Flint"})
        parsed = parse_hazen_dataset(exported)
        assert parsed.site_information["project_name"] == "Flint"
        assert len(parsed.observed_breakthrough) == len(curve.points)
        for sampled, restored in zip(curve.points, parsed.observed_breakthrough):
            assert restored.time_days == pytest.approx(sampled.time_days)
            assert restored.concentration_ng_l == pytest.approx(sampled.concentration_ng_l)
            assert restored.bed_volumes == pytest.approx(sampled.bed_volumes)

    def test_export_includes_ebct(self, flint_config):
        exported = export_hazen_dataset(flint_config)
        assert exported["system_configuration"]["ebct_minutes"] == pytest.approx(
            flint_config.bed_volume_m3 / 1000 * 60
        )
        assert exported["pfas_concentrations_ngL"]["PFOS"] == 0.12


class TestHazenParse:
    """Tests for parsing partial datasets."""

    @pytest.fixture
    def minimal_dataset(self):
        return {
            "system_configuration": {
                "system_type": "",
                "vessel_diameter_m": 2.0,
                "vessel_height_m": 5.0,
                "flow_rate_m3h": 50.0,
                "bed_height_m": 1.5,
            },
            "pfas_concentrations_ngL": {"PFOA": 20.0, "total_PFAS": 40.0},
            "economic_parameters": {"operating_days_per_year": 0},
            "observed_breakthrough_data": [
                {"time_days": 30, "bed_volumes": 500, "effluent_concentration_ngL": 4.0},
                {"time_days": 60, "effluent_concentration_ngL": None},
            ],
        }

    def test_defaults_applied(self, minimal_dataset):
        config = parse_hazen_dataset(minimal_dataset).configuration
        assert config.system_type.value == "Fixed Bed"
        assert config.operating_days_per_year == 365
        assert config.operating_hours_per_day == 24
        assert config.target_removal_efficiency == 99
        assert config.safety_factor == 1.5

    def test_missing_congeners_zero(self, minimal_dataset):
        config = parse_hazen_dataset(minimal_dataset).configuration
        assert config.pfoa_ng_l == 20.0
        assert config.pfos_ng_l == 0.0
        assert config.pfdoa_ng_l == 0.0

    def test_observed_percent_breakthrough(self, minimal_dataset):
        observed = parse_hazen_dataset(minimal_dataset).observed_breakthrough
        assert observed[0].percent_breakthrough == pytest.approx(10.0)
        assert observed[0].bed_volumes == 500
        assert observed[1].concentration_ng_l == 0
        assert observed[1].percent_breakthrough == 0

    def test_missing_required_fields(self):
        with pytest.raises(InputValidationError) as exc_info:
            parse_hazen_dataset({"pfas_concentrations_ngL": {"total_PFAS": 10}})
        assert "vessel_diameter_m" in exc_info.value.details["fields"]
        assert exc_info.value.details["units"]["vessel_diameter_m"] == "m"

    def test_negative_observed_time(self, minimal_dataset):
        minimal_dataset["observed_breakthrough_data"][1]["time_days"] = -5
        with pytest.raises(InputValidationError) as exc_info:
            parse_hazen_dataset(minimal_dataset)
        assert "observed_breakthrough_data.1.time_days" in exc_info.value.details["fields"]
        assert exc_info.value.details["units"]["observed_breakthrough_data.1.time_days"] == "days"

    def test_non_numeric_effluent(self, minimal_dataset):
        minimal_dataset["observed_breakthrough_data"][0]["effluent_concentration_ngL"] = "high"
        with pytest.raises(InputValidationError):
            parse_hazen_dataset(minimal_dataset)

    def test_non_numeric_total(self, minimal_dataset):
        minimal_dataset["pfas_concentrations_ngL"]["total_PFAS"] = "n/a"
        with pytest.raises(InputValidationError) as exc_info:
            parse_hazen_dataset(minimal_dataset)
        assert exc_info.value.details["units"]["total_pfas_ng_l"] == "ng/L"


class TestCsvExports:
    """Tests for CSV renderers."""

    def test_breakthrough_csv(self, curve):
        rows = list(csv.DictReader(io.StringIO(breakthrough_curve_csv(curve))))
        assert len(rows) == 20
        assert list(rows[0].keys()) == [
            "Time_days", "Bed_Volumes", "Concentration_ngL", "Percent_Breakthrough",
        ]
        assert rows[0]["Time_days"] == "0.00"

    def test_validation_csv(self):
        predicted = [BreakthroughPoint(time_days=t, concentration_ng_l=c) for t, c in [(0, 1.0), (10, 2.0)]]
        observed = [BreakthroughPoint(time_days=t, concentration_ng_l=c) for t, c in [(0, 0.0), (10, 4.0)]]
        metrics = ValidationMetrics(rmse=1.5, r2=0.5, mae=1.5, mape=50.0, max_error=2.0, avg_percent_diff=75.0)

        lines = validation_comparison_csv(predicted, observed, metrics).splitlines()
        assert lines[0] == "Validation Metrics for Total_PFAS"
        assert lines[1] == "R-squared,0.5000"
        assert lines[7] == ""
        assert lines[8].startswith("Time_days,Bed_Volumes,Predicted_ngL,Observed_ngL")
        # Percent error left empty where observed is zero
        assert lines[9].endswith("1.0000,")
        assert lines[10].endswith("2.0000,50.00")

    def test_monte_carlo_csv(self):
        result = MonteCarloResult(
            mean=20, p5=16, p10=17, p90=23, p95=24, std_dev=2, iterations=100, distribution="uniform",
        )
        rows = list(csv.DictReader(io.StringIO(monte_carlo_csv(result))))
        assert [r["Metric"] for r in rows][0] == "Mean"
        assert rows[4]["Value"] == "24.00"
        assert len(rows) == 6

    def test_export_filename(self):
        name = export_filename("breakthrough_curve", "Total PFAS", "csv", day=date(2024, 5, 1))
        assert name == "breakthrough_curve_Total_PFAS_2024-05-01.csv"
