"""API routes for quantity normalization."""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from pantrywise.logging_config import get_logger
from pantrywise.normalize.units import (
    IncompatibleUnitsError,
    NormalizedQuantity,
    UnitType,
    add,
    normalize_name,
    normalize_quantity,
    to_display_string,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/quantities", tags=["quantities"])


# Request/Response schemas
class NormalizeRequest(BaseModel):
    """Raw quantity strings to normalize."""

    quantities: list[str] = Field(min_length=1, max_length=200)
    names: list[str] = Field(default_factory=list, max_length=200)


class QuantityResponse(BaseModel):
    """A quantity in canonical base units."""

    value: float
    unit: str
    unit_type: UnitType
    original_value: str
    display: str

    @classmethod
    def from_quantity(cls, quantity: NormalizedQuantity) -> "QuantityResponse":
        return cls(
            value=quantity.value,
            unit=quantity.unit,
            unit_type=quantity.unit_type,
            original_value=quantity.original_value,
            display=to_display_string(quantity),
        )


class NormalizeResponse(BaseModel):
    quantities: list[QuantityResponse]
    names: list[str]


class SumRequest(BaseModel):
    """Raw quantities to add together."""

    quantities: list[str] = Field(min_length=1, max_length=200)


@router.post("/normalize", response_model=NormalizeResponse)
async def normalize(request: NormalizeRequest) -> NormalizeResponse:
    """Normalize quantity strings (and optionally names) without persisting anything."""
    return NormalizeResponse(
        quantities=[
            QuantityResponse.from_quantity(normalize_quantity(q)) for q in request.quantities
        ],
        names=[normalize_name(name) for name in request.names],
    )


@router.post("/sum", response_model=QuantityResponse)
async def sum_quantities(request: SumRequest) -> QuantityResponse:
    """Add quantities of the same unit type."""
    normalized = [normalize_quantity(q) for q in request.quantities]
    total = normalized[0]
    try:
        for quantity in normalized[1:]:
            total = add(total, quantity)
    except IncompatibleUnitsError as e:
        logger.warning(f"Rejected sum of {request.quantities}: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e
    return QuantityResponse.from_quantity(total)
