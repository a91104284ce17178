"""Tests for the Thomas breakthrough model and BDST estimate."""
import numpy as np
import pytest

from pfas_gac.models.schemas import BreakthroughPoint
from pfas_gac.services.kinetics import (
    thomas_model,
    estimate_thomas_rate_constant,
    simulate_breakthrough,
    simulate_multi_compound_breakthrough,
    get_chain_length_factor,
    find_limiting_compound,
    fit_thomas,
    estimate_bdst_service_time,
    calculate_bed_depth_service_time,
)


def _percents(curve):
    return np.array([p.percent_breakthrough for p in curve.points])


class TestThomasModel:
    """Tests for single-compound Thomas breakthrough curves."""

    def test_default_sample_count(self, sample_breakthrough_request):
        """Curve should have 200 points spanning 0 to the duration."""
        curve = simulate_breakthrough(**sample_breakthrough_request)
        assert len(curve.points) == 200
        assert curve.points[0].time_days == 0
        assert curve.points[-1].time_days == pytest.approx(365.0)

    def test_curve_monotonic_random_configs(self):
        """Percent breakthrough never decreases, for any configuration."""
        rng = np.random.default_rng(7)
        for _ in range(40):
            curve = simulate_breakthrough(
                influent_ng_l=rng.uniform(0.1, 5000),
                flow_rate_m3_h=rng.uniform(0.5, 2000),
                bed_volume_m3=rng.uniform(0.5, 60),
                gac_density_kg_m3=rng.uniform(300, 650),
                capacity_mg_g=rng.uniform(0.1, 20),
                ebct_min=rng.uniform(1, 30),
                duration_days=rng.uniform(30, 1000),
            )
            percents = _percents(curve)
            assert np.all(np.diff(percents) >= -1e-12)
            assert np.all((percents >= 0) & (percents <= 100))

    def test_fifty_percent_at_stoichiometric_time(self, sample_breakthrough_request):
        """With ng/L → µg/L and m³/h → L/day, C/C0 = 0.5 at q0·M/(Q·C0)."""
        # q0·M/(Q·C0) = 10 × 480000 / (24000 × 1) = 200 days
        curve = simulate_breakthrough(**sample_breakthrough_request, interpolate=True)
        assert curve.fifty_percent_time_days == pytest.approx(200.0, abs=0.5)

    def test_threshold_ordering(self, sample_breakthrough_request):
        """10% before 50% before 95%."""
        curve = simulate_breakthrough(**sample_breakthrough_request)
        assert curve.breakthrough_time_days < curve.fifty_percent_time_days
        assert curve.fifty_percent_time_days < curve.exhaustion_time_days

    def test_first_sample_meeting_threshold(self, sample_breakthrough_request):
        """Linear scan reports the first sample at or above each threshold."""
        curve = simulate_breakthrough(**sample_breakthrough_request)
        times = np.array([p.time_days for p in curve.points])
        percents = _percents(curve)
        idx = int(np.argmax(percents >= 10))
        assert curve.breakthrough_time_days == times[idx]
        assert percents[idx - 1] < 10

    def test_interpolation_not_later_than_scan(self, sample_breakthrough_request):
        """Interpolated crossings fall at or before the sampled crossing."""
        scan = simulate_breakthrough(**sample_breakthrough_request)
        interp = simulate_breakthrough(**sample_breakthrough_request, interpolate=True)
        assert interp.breakthrough_time_days <= scan.breakthrough_time_days
        assert interp.exhaustion_time_days <= scan.exhaustion_time_days

    def test_exhaustion_defaults_to_duration(self):
        """A bed that never reaches 95% reports the full horizon."""
        curve = simulate_breakthrough(
            influent_ng_l=10.0,
            flow_rate_m3_h=1.0,
            bed_volume_m3=10.0,
            gac_density_kg_m3=480.0,
            capacity_mg_g=100.0,
            ebct_min=600.0,
            duration_days=365.0,
        )
        assert curve.exhaustion_time_days == 365.0
        assert _percents(curve).max() < 95
        assert curve.exhaustion_reached is False

    def test_unreached_breakthrough_flagged(self, sample_breakthrough_request):
        """A bed that never breaks through reports the horizon with the flags cleared."""
        curve = simulate_breakthrough(**dict(sample_breakthrough_request, duration_days=1.0))
        assert _percents(curve).max() < 10
        assert curve.breakthrough_time_days == 1.0
        assert curve.fifty_percent_time_days == 1.0
        assert curve.breakthrough_reached is False
        assert curve.fifty_percent_reached is False
        assert curve.exhaustion_reached is False

    def test_reached_thresholds_flagged(self, sample_breakthrough_request):
        curve = simulate_breakthrough(**sample_breakthrough_request)
        assert curve.breakthrough_reached
        assert curve.fifty_percent_reached
        assert curve.exhaustion_reached

    def test_total_bed_volumes(self, sample_breakthrough_request):
        """Bed volumes at exhaustion = Q·t/(V·1000)."""
        curve = simulate_breakthrough(**sample_breakthrough_request)
        # 1 m³/h = 24000 L/day through a 1000 L bed
        assert curve.total_bed_volumes == pytest.approx(24.0 * curve.exhaustion_time_days)
        assert curve.points[-1].bed_volumes == pytest.approx(24.0 * 365.0)

    def test_concentration_matches_percent(self, sample_breakthrough_request):
        curve = simulate_breakthrough(**sample_breakthrough_request)
        for p in curve.points[::20]:
            assert p.concentration_ng_l == pytest.approx(p.percent_breakthrough * 10.0)

    def test_default_r2_reported(self, sample_breakthrough_request):
        curve = simulate_breakthrough(**sample_breakthrough_request)
        assert curve.thomas_parameters.r2 == 0.95
        assert curve.thomas_parameters.q0_mg_g == 10.0

    def test_rate_constant_scaled_by_ebct(self):
        """k_Th = 0.005 at the 15 min reference EBCT, proportional to EBCT."""
        assert estimate_thomas_rate_constant(15.0) == pytest.approx(0.005)
        assert estimate_thomas_rate_constant(30.0) == pytest.approx(0.010)
        assert estimate_thomas_rate_constant(10.0, rate_base=0.01, reference_ebct=20.0) == pytest.approx(0.005)

    def test_rate_constant_estimated_when_missing(self, sample_breakthrough_request):
        request = dict(sample_breakthrough_request, k_th=None, ebct_min=15.0)
        curve = simulate_breakthrough(**request)
        assert curve.thomas_parameters.k_th == pytest.approx(0.005)

    def test_no_overflow_for_extreme_inputs(self):
        """Exponent is clipped so huge capacities do not overflow."""
        t = np.linspace(0, 365, 50)
        ratio = thomas_model(t, k_Th=10.0, q0=1e6, M=1e9, Q=1.0, C0=1.0)
        assert np.all(np.isfinite(ratio))
        assert np.all(ratio < 1e-20)


class TestMultiCompound:
    """Tests for competitive multi-compound breakthrough."""

    @pytest.fixture
    def mixture_kwargs(self):
        return {
            "flow_rate_m3_h": 1.0,
            "bed_volume_m3": 1.0,
            "gac_density_kg_m3": 480.0,
            "base_capacity_mg_g": 11.5,
            "ebct_min": 60.0,
            "duration_days": 365.0,
            "k_th": 0.1,
        }

    def test_pfos_exhausts_after_pfbs(self, mixture_kwargs):
        """Long-chain PFOS is retained longer than short-chain PFBS."""
        curves = simulate_multi_compound_breakthrough(
            {"PFOS": 1000.0, "PFBS": 1000.0}, **mixture_kwargs
        )
        assert curves["PFOS"].exhaustion_time_days > curves["PFBS"].exhaustion_time_days
        assert curves["PFBS"].exhaustion_time_days < 365.0

    def test_capacity_shared_by_concentration_and_chain_length(self, mixture_kwargs):
        curves = simulate_multi_compound_breakthrough(
            {"PFOA": 300.0, "PFHxA": 100.0}, **mixture_kwargs
        )
        assert curves["PFOA"].thomas_parameters.q0_mg_g == pytest.approx(11.5 * 0.75 * 1.2)
        assert curves["PFHxA"].thomas_parameters.q0_mg_g == pytest.approx(11.5 * 0.25 * 0.8)

    def test_zero_concentrations_skipped(self, mixture_kwargs):
        curves = simulate_multi_compound_breakthrough(
            {"PFOA": 50.0, "PFOS": 0.0, "PFNA": 0.0}, **mixture_kwargs
        )
        assert list(curves) == ["PFOA"]

    def test_limiting_compound(self, mixture_kwargs):
        curves = simulate_multi_compound_breakthrough(
            {"PFOS": 1000.0, "PFBS": 1000.0}, **mixture_kwargs
        )
        assert find_limiting_compound(curves) == "PFBS"
        assert find_limiting_compound({}) is None

    def test_chain_length_factors(self):
        assert get_chain_length_factor("PFOS") == 1.3
        assert get_chain_length_factor("PFBS") == 0.6
        assert get_chain_length_factor("pfdoa") == 1.7
        assert get_chain_length_factor("GenX") == 1.0


class TestThomasFit:
    """Tests for fitting Thomas parameters to observed data."""

    def test_recovers_parameters(self):
        """Fit to noise-free synthetic data returns the generating parameters."""
        M, Q, C0 = 480000.0, 24000.0, 1.0
        t = np.linspace(0, 400, 30)
        ratio = thomas_model(t, 0.05, 11.5, M, Q, C0)
        observed = [
            BreakthroughPoint(time_days=float(ti), concentration_ng_l=float(r * 1000))
            for ti, r in zip(t, ratio)
        ]

        fitted = fit_thomas(
            observed,
            influent_ng_l=1000.0,
            flow_rate_m3_h=1.0,
            bed_volume_m3=1.0,
            gac_density_kg_m3=480.0,
            k_th_initial=0.03,
            q0_initial=10.0,
        )

        assert fitted is not None
        assert fitted.k_th == pytest.approx(0.05, rel=0.05)
        assert fitted.q0_mg_g == pytest.approx(11.5, rel=0.05)
        assert fitted.r2 > 0.99

    def test_too_few_points(self):
        observed = [BreakthroughPoint(time_days=1.0, concentration_ng_l=1.0)]
        assert fit_thomas(observed, 1000.0, 1.0, 1.0, 480.0, 0.01, 1.0) is None

    def test_zero_influent(self):
        observed = [BreakthroughPoint(time_days=float(i), concentration_ng_l=0.0) for i in range(5)]
        assert fit_thomas(observed, 0.0, 1.0, 1.0, 480.0, 0.01, 1.0) is None


class TestBDST:
    """Tests for the Bed Depth Service Time estimate."""

    def test_stoichiometric_service_time(self):
        """t = N0·Z/(C0·v) with N0 = q·ρ·1000."""
        # N0 = 1 × 500 × 1000 = 5e5 mg/m³; C0 = 1 µg/L; v = 1 m/h → 5e5 h
        days = estimate_bdst_service_time(1000.0, 1.0, 1.0, 1.0, 500.0)
        assert days == pytest.approx(5e5 / 24)

    def test_service_time_scales_with_depth(self):
        t1 = estimate_bdst_service_time(100.0, 1.0, 10.0, 0.5, 480.0)
        t2 = estimate_bdst_service_time(100.0, 2.0, 10.0, 0.5, 480.0)
        assert t2 == pytest.approx(2 * t1)

    def test_rate_constant_shortens_service_time(self):
        ideal = estimate_bdst_service_time(1000.0, 1.0, 1.0, 1.0, 500.0)
        kinetic = estimate_bdst_service_time(1000.0, 1.0, 1.0, 1.0, 500.0, k_BA=0.001)
        assert kinetic < ideal

    def test_zero_concentration(self):
        assert estimate_bdst_service_time(0.0, 1.0, 1.0, 1.0, 500.0) == 0.0

    def test_design_line(self):
        result = calculate_bed_depth_service_time(1000.0, 1.0, 1.0, 500.0, bed_heights=[1.0, 2.0])
        assert len(result["data"]) == 2
        assert result["slope_days_per_m"] == pytest.approx(5e5 / 24)
        assert result["z_critical_m"] == 0.0
