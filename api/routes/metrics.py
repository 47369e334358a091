"""
Fiscal metric endpoints.

GET /national-debt  → Table 7, federal debt (accumulated deficit)
GET /deficit        → Table 1, budgetary balance
GET /interest       → Table 1, public debt charges
GET /payroll        → Table 4, personnel expenses
GET /procurement    → Table 4, sum of five operating-expense categories

Each returns ``{"asOf": str, "value": float}``.  Pipeline failures propagate
to the exception handlers in api.app and come back as ``500 {"error": ...}``.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_extractor, get_registry
from api.models import ErrorResponse, MetricOut
from opendata.tables import TableExtractor
from resolver.registry import MetricSpec
from resolver.resolve import resolve_metric

router = APIRouter(
    tags=["metrics"],
    responses={500: {"model": ErrorResponse, "description": "Metric could not be resolved"}},
)


def _resolve(name: str, extractor: TableExtractor,
             registry: dict[str, MetricSpec]) -> MetricOut:
    return MetricOut(**resolve_metric(name, extractor, registry).to_dict())


@router.get("/national-debt", response_model=MetricOut, summary="Federal debt")
def national_debt(
    extractor: TableExtractor = Depends(get_extractor),
    registry: dict[str, MetricSpec] = Depends(get_registry),
) -> MetricOut:
    """Federal debt (accumulated deficit) from Fiscal Monitor Table 7."""
    return _resolve("nationalDebt", extractor, registry)


@router.get("/deficit", response_model=MetricOut, summary="Budgetary deficit")
def deficit(
    extractor: TableExtractor = Depends(get_extractor),
    registry: dict[str, MetricSpec] = Depends(get_registry),
) -> MetricOut:
    """Budgetary balance (deficit/surplus) magnitude from Table 1."""
    return _resolve("deficit", extractor, registry)


@router.get("/interest", response_model=MetricOut, summary="Interest on debt")
def interest(
    extractor: TableExtractor = Depends(get_extractor),
    registry: dict[str, MetricSpec] = Depends(get_registry),
) -> MetricOut:
    """Public debt charges from Table 1."""
    return _resolve("interest", extractor, registry)


@router.get("/payroll", response_model=MetricOut, summary="Federal payroll")
def payroll(
    extractor: TableExtractor = Depends(get_extractor),
    registry: dict[str, MetricSpec] = Depends(get_registry),
) -> MetricOut:
    """Personnel expenses excluding net actuarial losses, Table 4."""
    return _resolve("payroll", extractor, registry)


@router.get("/procurement", response_model=MetricOut, summary="Procurement spend")
def procurement(
    extractor: TableExtractor = Depends(get_extractor),
    registry: dict[str, MetricSpec] = Depends(get_registry),
) -> MetricOut:
    """Sum of the five procurement-like expense categories in Table 4.

    Categories: professional and special services, rentals, repair and
    maintenance, utilities/materials/supplies, transportation and
    communications.
    """
    return _resolve("procurement", extractor, registry)
