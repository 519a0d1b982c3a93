"""
Stock movement endpoints.

Creating, correcting and listing entries, exits and losses.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_correct_movement_use_case,
    get_movement_queries,
    get_record_movement_use_case,
)
from src.application.dto.mappers import to_movement_response
from src.application.dto.requests import (
    EditMovementRequest,
    EntryRequest,
    ExitRequest,
    ExitReturnRequest,
    LossRequest,
)
from src.application.dto.responses import (
    DeleteMovementResponse,
    EditMovementResponse,
    EntryResponse,
    ErrorResponse,
    ExitReturnResponse,
    MovementListResponse,
    MovementResponse,
    StockMovementResponse,
)
from src.application.use_cases import CorrectMovementUseCase, RecordMovementUseCase
from src.core.entities.movement import MovementFilter, MovementPeriod, MovementType
from src.core.exceptions import InvalidInputError
from src.core.services import MovementQueryService

router = APIRouter(prefix="/api/movements", tags=["movements"])

_REJECTIONS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


@router.post(
    "/entry",
    response_model=EntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_REJECTIONS,
)
async def record_entry(
    request: EntryRequest,
    use_case: RecordMovementUseCase = Depends(get_record_movement_use_case),
) -> EntryResponse:
    """Stock in. Recomputes the product's weighted-average cost."""
    result = await use_case.entry(request)
    return use_case.to_entry_response(result)


@router.post(
    "/exit",
    response_model=StockMovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_REJECTIONS,
)
async def record_exit(
    request: ExitRequest,
    use_case: RecordMovementUseCase = Depends(get_record_movement_use_case),
) -> StockMovementResponse:
    """Stock out for use. Rejected when stock on hand is short."""
    result = await use_case.exit(request)
    return use_case.to_stock_response(result)


@router.post(
    "/loss",
    response_model=StockMovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_REJECTIONS,
)
async def record_loss(
    request: LossRequest,
    use_case: RecordMovementUseCase = Depends(get_record_movement_use_case),
) -> StockMovementResponse:
    """Stock lost or damaged."""
    result = await use_case.loss(request)
    return use_case.to_stock_response(result)


@router.post(
    "/exit-return",
    response_model=ExitReturnResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_REJECTIONS,
)
async def record_exit_with_return(
    request: ExitReturnRequest,
    use_case: RecordMovementUseCase = Depends(get_record_movement_use_case),
) -> ExitReturnResponse:
    """Stock out with part of it returned; only the consumed part is drawn."""
    result = await use_case.exit_with_return(request)
    return use_case.to_exit_return_response(result)


@router.get("", response_model=MovementListResponse, responses={400: {"model": ErrorResponse}})
async def list_movements(
    product_id: int | None = Query(default=None),
    type: MovementType | None = Query(default=None, description="entry, exit or loss"),
    vendor_id: int | None = Query(default=None),
    period: str | None = Query(
        default=None,
        description="today, 7d, 14d or 30d (daily/weekly/biweekly/monthly also accepted)",
    ),
    start_date: date | None = Query(default=None, description="Inclusive, YYYY-MM-DD"),
    end_date: date | None = Query(default=None, description="Inclusive, YYYY-MM-DD"),
    limit: int | None = Query(default=None, ge=1, le=1000),
    service: MovementQueryService = Depends(get_movement_queries),
) -> MovementListResponse:
    """List movements, newest first. A period takes precedence over dates."""
    filters = MovementFilter(
        product_id=product_id,
        type=type,
        vendor_id=vendor_id,
        period=_parse_period(period),
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    )
    records = await service.list_movements(filters)
    return MovementListResponse(
        movements=[to_movement_response(r) for r in records],
        total=len(records),
    )


@router.get("/{movement_id}", response_model=MovementResponse, responses={404: {"model": ErrorResponse}})
async def get_movement(
    movement_id: int,
    service: MovementQueryService = Depends(get_movement_queries),
) -> MovementResponse:
    """Get a single movement with product and vendor names."""
    return to_movement_response(await service.get_movement(movement_id))


@router.put("/{movement_id}", response_model=EditMovementResponse, responses=_REJECTIONS)
async def edit_movement(
    movement_id: int,
    request: EditMovementRequest,
    use_case: CorrectMovementUseCase = Depends(get_correct_movement_use_case),
) -> EditMovementResponse:
    """
    Correct quantity, unit cost or notes of a past movement.

    The product balance absorbs the difference; cost_price is left as is.
    """
    result = await use_case.edit(movement_id, request)
    return use_case.to_edit_response(result)


@router.delete("/{movement_id}", response_model=DeleteMovementResponse, responses=_REJECTIONS)
async def delete_movement(
    movement_id: int,
    use_case: CorrectMovementUseCase = Depends(get_correct_movement_use_case),
) -> DeleteMovementResponse:
    """Delete a movement and reverse its effect on the product balance."""
    result = await use_case.delete(movement_id)
    return use_case.to_delete_response(result)


def _parse_period(value: str | None) -> MovementPeriod | None:
    if not value:
        return None
    try:
        return MovementPeriod.parse(value)
    except ValueError:
        raise InvalidInputError("period", "must be one of today, 7d, 14d, 30d", value) from None
