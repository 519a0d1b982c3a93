"""Correct movement use case: edit or delete a past movement."""

from src.application.dto.mappers import to_movement_response
from src.application.dto.requests import EditMovementRequest
from src.application.dto.responses import DeleteMovementResponse, EditMovementResponse
from src.config import get_logger
from src.core.services.movement_processor import DeleteResult, EditResult, MovementProcessor

logger = get_logger(__name__)


class CorrectMovementUseCase:
    """Edit or delete a movement, reconciling the product balance."""

    def __init__(self, processor: MovementProcessor | None = None):
        self._processor = processor

    async def _get_processor(self) -> MovementProcessor:
        if self._processor is None:
            from src.application.services import get_movement_processor

            self._processor = await get_movement_processor()
        return self._processor

    async def edit(self, movement_id: int, request: EditMovementRequest) -> EditResult:
        processor = await self._get_processor()
        logger.debug(
            "movement_edit_requested",
            movement_id=movement_id,
            fields=sorted(request.model_dump(exclude_unset=True)),
        )
        return await processor.edit_movement(
            movement_id,
            quantity=request.quantity,
            unit_cost=request.unit_cost,
            notes=request.notes,
        )

    async def delete(self, movement_id: int) -> DeleteResult:
        processor = await self._get_processor()
        return await processor.delete_movement(movement_id)

    @staticmethod
    def to_edit_response(result: EditResult) -> EditMovementResponse:
        return EditMovementResponse(
            movement=to_movement_response(result.movement),
            inventory_change=result.inventory_change,
            new_inventory=result.new_inventory,
        )

    @staticmethod
    def to_delete_response(result: DeleteResult) -> DeleteMovementResponse:
        return DeleteMovementResponse(
            movement_id=result.movement_id,
            inventory_change=result.inventory_change,
            new_inventory=result.new_inventory,
        )
