"""Ingest Stock Use Case: bulk entry reconciliation with per-entry outcomes."""

from stockroom.application.dto.mappers import item_to_response
from stockroom.application.dto.requests import IngestStockRequest
from stockroom.application.dto.responses import (
    IngestStockResponse,
    IngestSummary,
    StockEntryResult,
)
from stockroom.config import get_logger
from stockroom.core.services.stock_reconciliation import (
    EntryAction,
    ReconciliationReport,
    StockReconciliationEngine,
)

logger = get_logger(__name__)


class IngestStockUseCase:
    """Run a submitted list of stock entries through the reconciliation engine."""

    def __init__(self, engine: StockReconciliationEngine):
        self._engine = engine

    async def execute(self, request: IngestStockRequest) -> ReconciliationReport:
        """Execute ingest stock use case."""
        report = await self._engine.reconcile(request.stock_items)
        if report.failed:
            logger.warning(
                "stock_ingestion_partial",
                failed=report.failed,
                total=len(report.outcomes),
            )
        return report

    def to_response(self, report: ReconciliationReport) -> IngestStockResponse:
        """Convert report to API response."""
        results = []
        for outcome in report.outcomes:
            if outcome.action is EntryAction.FAILED:
                results.append(
                    StockEntryResult(
                        success=False,
                        action=outcome.action.value,
                        item=outcome.entry_name,
                        error=outcome.error,
                    )
                )
            else:
                results.append(
                    StockEntryResult(
                        success=True,
                        action=outcome.action.value,
                        item=item_to_response(outcome.item),  # type: ignore[arg-type]
                    )
                )

        return IngestStockResponse(
            success=report.success,
            results=results,
            summary=IngestSummary(
                total=len(report.outcomes),
                created=report.created,
                updated=report.updated,
                failed=report.failed,
            ),
        )
