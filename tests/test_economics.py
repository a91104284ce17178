"""Tests for change-out cost and capital avoidance."""
import math

import pytest

from pfas_gac.services.economics import (
    calculate_annual_cost,
    calculate_annual_flow_mg,
    calculate_capital_avoidance,
    calculate_cost_breakdown,
)


class TestAnnualCost:
    """Tests for cost per million gallons."""

    def test_annual_flow(self):
        # 1000 m³/h × 24 h × 365 d × 0.000264172 MG/m³
        assert calculate_annual_flow_mg(1000, 24, 365) == pytest.approx(2314.147, rel=1e-4)

    def test_flint_cost(self, flint_config):
        """One change-out per year costs (GAC + services) / annual flow."""
        breakdown = calculate_cost_breakdown(flint_config, 12.0)
        gac_cost = flint_config.gac_mass_kg * 2.5
        assert breakdown.gac_cost_usd == pytest.approx(gac_cost)
        assert breakdown.service_cost_usd == pytest.approx(23000.0)
        assert breakdown.change_outs_per_year == pytest.approx(1.0)
        assert breakdown.cost_per_million_gallons == pytest.approx(
            (gac_cost + 23000.0) / calculate_annual_flow_mg(1000, 24, 365)
        )

    def test_longer_life_lowers_cost(self, flint_config):
        assert calculate_annual_cost(flint_config, 24.0) == pytest.approx(
            calculate_annual_cost(flint_config, 12.0) / 2
        )

    def test_zero_lifespan_floored(self, flint_config):
        cost = calculate_annual_cost(flint_config, 0.0)
        assert math.isfinite(cost)
        assert cost == pytest.approx(calculate_annual_cost(flint_config, 0.1))


class TestCapitalAvoidance:
    """Tests for the annuity approximation."""

    def test_capital_avoidance(self):
        assert calculate_capital_avoidance(15000, 5000, 24.0) == pytest.approx(40000.0)

    def test_zero_lifespan(self):
        assert calculate_capital_avoidance(15000, 5000, 0.0) == 0.0
