"""Record movement use case: entry, exit, loss and exit-with-return."""

from src.application.dto.mappers import to_movement_response, to_product_response
from src.application.dto.requests import (
    EntryRequest,
    ExitRequest,
    ExitReturnRequest,
    LossRequest,
)
from src.application.dto.responses import (
    EntryResponse,
    ExitReturnResponse,
    StockMovementResponse,
)
from src.config import get_logger
from src.core.services.movement_processor import (
    EntryResult,
    ExitReturnResult,
    MovementProcessor,
    StockResult,
)

logger = get_logger(__name__)


class RecordMovementUseCase:
    """Create stock movements through the MovementProcessor."""

    def __init__(self, processor: MovementProcessor | None = None):
        self._processor = processor

    async def _get_processor(self) -> MovementProcessor:
        if self._processor is None:
            from src.application.services import get_movement_processor

            self._processor = await get_movement_processor()
        return self._processor

    async def entry(self, request: EntryRequest) -> EntryResult:
        """Stock in, recomputing the weighted-average cost."""
        processor = await self._get_processor()
        return await processor.record_entry(
            product_id=request.product_id,
            quantity=request.quantity,
            unit_cost=request.unit_cost,
            vendor_id=request.vendor_id,
            notes=request.notes,
        )

    async def exit(self, request: ExitRequest) -> StockResult:
        processor = await self._get_processor()
        return await processor.record_exit(request.product_id, request.quantity, request.notes)

    async def loss(self, request: LossRequest) -> StockResult:
        processor = await self._get_processor()
        return await processor.record_loss(request.product_id, request.quantity, request.notes)

    async def exit_with_return(self, request: ExitReturnRequest) -> ExitReturnResult:
        """Draw only the consumed part of what went out."""
        processor = await self._get_processor()
        return await processor.record_exit_with_return(
            product_id=request.product_id,
            quantity_out=request.quantity_out,
            quantity_return=request.quantity_return,
            notes=request.notes,
        )

    @staticmethod
    def to_entry_response(result: EntryResult) -> EntryResponse:
        return EntryResponse(
            product=to_product_response(result.product),
            movement=to_movement_response(result.movement),
            previous_cost=result.previous_cost,
            new_average_cost=result.new_average_cost,
        )

    @staticmethod
    def to_stock_response(result: StockResult) -> StockMovementResponse:
        return StockMovementResponse(
            product=to_product_response(result.product),
            movement=to_movement_response(result.movement),
        )

    @staticmethod
    def to_exit_return_response(result: ExitReturnResult) -> ExitReturnResponse:
        return ExitReturnResponse(
            product=to_product_response(result.product),
            movement=to_movement_response(result.movement),
            consumed=result.consumed,
        )
