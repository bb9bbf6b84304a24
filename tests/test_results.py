"""Tests for the results overview."""

import pytest

from roi_first.results import build_overview, format_currency, format_percentage
from roi_first.schemas import CalculationResult


@pytest.fixture
def result(calculation_payload) -> CalculationResult:
    return CalculationResult.model_validate(calculation_payload)


class TestBuildOverview:
    def test_current_projection(self, result) -> None:
        overview = build_overview(result, "current")

        assert overview.global_tco == 1000000.0
        assert overview.global_tco_display == "$1,000,000"
        assert [d.share_percentage for d in overview.dimensions] == [75.0, 25.0]
        assert overview.dimensions[0].share_display == "75.0%"
        assert overview.net_savings is None

    def test_future_projection_keeps_scale(self, result) -> None:
        current = build_overview(result, "current")
        future = build_overview(result, "future")

        assert future.global_tco == 600000.0
        assert [d.tco for d in future.dimensions] == [450000.0, 150000.0]
        assert future.max_scale_value == current.max_scale_value == 750000.0

    def test_future_savings_figures(self, calculation_payload) -> None:
        calculation_payload["tco_global"].update(ahorro_neto_cliente_total=250000.0, fee_servicio_total=150000.0)
        result = CalculationResult.model_validate(calculation_payload)

        future = build_overview(result, "future")

        assert future.net_savings == 250000.0
        assert future.ai_investment == 150000.0
        assert build_overview(result, "current").ai_investment is None

    def test_zero_global_tco(self, calculation_payload) -> None:
        calculation_payload["tco_global"]["current_tco"] = 0
        overview = build_overview(CalculationResult.model_validate(calculation_payload))

        assert all(d.share_percentage == 0.0 for d in overview.dimensions)

    def test_requires_global_tco(self) -> None:
        with pytest.raises(ValueError):
            build_overview(CalculationResult(success=True))


class TestFormatting:
    def test_currency(self) -> None:
        assert format_currency(1234567.8) == "$1,234,568"
        assert format_currency(-500) == "-$500"

    def test_percentage(self) -> None:
        assert format_percentage(33.333) == "33.3%"
