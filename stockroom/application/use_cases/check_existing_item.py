"""Check Existing Item Use Case: pre-fill lookup by item name."""

from stockroom.application.dto.responses import CheckExistingResponse, ExistingItemInfo
from stockroom.core.services.existence_probe import ExistenceProbe, ExistenceResult


class CheckExistingItemUseCase:
    """Tell a client whether an item name is registered and with what metadata."""

    def __init__(self, probe: ExistenceProbe):
        self._probe = probe

    async def execute(self, item_name: str | None) -> ExistenceResult:
        return await self._probe.check(item_name)

    def to_response(self, result: ExistenceResult) -> CheckExistingResponse:
        if not result.exists:
            return CheckExistingResponse(exists=False)
        return CheckExistingResponse(
            exists=True,
            item=ExistingItemInfo(
                category_name=result.category_name or "",
                category_id=result.category_id or "",
                reorder_level=result.reorder_level or 0,
                unit_measure=result.unit_measure,
            ),
        )
