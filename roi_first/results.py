"""Read-side shaping of a persisted calculation result for the overview screen."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .schemas import CalculationResult


Projection = Literal["current", "future"]


class DimensionShare(BaseModel):
    dimension_id: str
    name: str
    tco: float
    share_percentage: float
    tco_display: str
    share_display: str


class ResultsOverview(BaseModel):
    system: str
    projection: Projection
    summary_text: str = ""
    global_tco: float
    global_tco_display: str
    roi_total: float
    roi_percentage: float
    payback_months: Optional[float] = None
    max_scale_value: float
    dimensions: List[DimensionShare] = Field(default_factory=list)
    net_savings: Optional[float] = None
    ai_investment: Optional[float] = None


def format_currency(value: float) -> str:
    """USD, no decimals: 1234567.8 -> $1,234,568."""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"


def build_overview(result: CalculationResult, projection: Projection = "current") -> ResultsOverview:
    if result.tco_global is None:
        raise ValueError("calculation result has no global TCO")

    future = projection == "future"
    tco = result.tco_global
    global_tco = tco.future_tco if future else tco.current_tco

    dimensions = []
    for dimension in result.dimensions:
        value = dimension.future_tco if future else dimension.current_tco
        share = (value / global_tco) * 100 if global_tco else 0.0
        dimensions.append(
            DimensionShare(
                dimension_id=dimension.dimension_id,
                name=dimension.dimension_name,
                tco=value,
                share_percentage=share,
                tco_display=format_currency(value),
                share_display=format_percentage(share),
            )
        )

    # Same scale for both projections so the chart does not jump when toggling
    scale_values = [v for d in result.dimensions for v in (d.current_tco, d.future_tco)]

    return ResultsOverview(
        system=result.system,
        projection=projection,
        summary_text=result.summary_text,
        global_tco=global_tco,
        global_tco_display=format_currency(global_tco),
        roi_total=tco.roi_total,
        roi_percentage=tco.roi_percentage,
        payback_months=tco.payback_months,
        max_scale_value=max(scale_values) if scale_values else 0.0,
        dimensions=dimensions,
        net_savings=tco.ahorro_neto_cliente_total if future else None,
        ai_investment=tco.fee_servicio_total if future and tco.ahorro_neto_cliente_total is not None else None,
    )
