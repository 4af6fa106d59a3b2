"""Batch classification service.

Classifies many transactions through the rule/AI pipeline. Transactions are
processed in fixed-size groups: every item of a group is dispatched
concurrently and the whole group settles before the next one starts, which
caps the number of outstanding model calls. Failures are recorded per item
and never abort sibling items.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING

from cardclass.application.dtos import (
    BatchClassificationCompletedEvent,
    BatchClassificationProgressEvent,
    BatchClassificationResult,
    BatchClassificationStartedEvent,
    BatchItemResult,
)
from cardclass.domain.shared.exceptions import DomainException, ErrorCode

if TYPE_CHECKING:
    from cardclass.domain.classification.services import (
        TransactionClassificationService,
    )
    from cardclass.domain.classification.value_objects import (
        CardTransaction,
        ClassificationContext,
    )

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 5


class BatchClassificationService:
    """Service for classifying batches of card transactions."""

    def __init__(
        self,
        classification_service: TransactionClassificationService,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        if chunk_size < 1:
            msg = "chunk_size must be at least 1"
            raise ValueError(msg)
        self._classification_service = classification_service
        self._chunk_size = chunk_size

    async def classify_batch(
        self,
        transactions: Sequence[CardTransaction],
        context: ClassificationContext,
    ) -> BatchClassificationResult:
        result = BatchClassificationResult(total=len(transactions))
        async for event in self.classify_batch_streaming(transactions, context):
            if isinstance(event, BatchClassificationCompletedEvent):
                result = event.result or result
        return result

    async def classify_batch_streaming(
        self,
        transactions: Sequence[CardTransaction],
        context: ClassificationContext,
    ) -> AsyncIterator[
        BatchClassificationStartedEvent
        | BatchClassificationProgressEvent
        | BatchClassificationCompletedEvent
    ]:
        """Classify a batch of transactions with streaming progress.

        Parameters
        ----------
        transactions
            Transactions to classify, in row order
        context
            Shared snapshot of rules, accounts, examples and model settings

        Yields
        ------
        BatchClassificationStartedEvent
            When classification begins
        BatchClassificationProgressEvent
            After each group of concurrent classifications settles
        BatchClassificationCompletedEvent
            When all groups are done; carries the BatchClassificationResult
        """
        total = len(transactions)
        start_time = time.monotonic()
        result = BatchClassificationResult(total=total)

        yield BatchClassificationStartedEvent(total=total)

        for chunk_start in range(0, total, self._chunk_size):
            chunk = transactions[chunk_start : chunk_start + self._chunk_size]

            items = await asyncio.gather(
                *(
                    self._classify_item(chunk_start + offset + 1, tx, context)
                    for offset, tx in enumerate(chunk)
                ),
            )
            for item in items:
                result.add_item(item)

            yield BatchClassificationProgressEvent(
                current=result.processed,
                total=total,
                success=result.success,
                failed=result.failed,
            )

        processing_time_ms = int((time.monotonic() - start_time) * 1000)
        logger.info(
            "Batch classification complete: %d total, %d rule, %d ai, %d failed "
            "(%d ms)",
            result.total,
            result.rule_classified,
            result.ai_classified,
            result.failed,
            processing_time_ms,
        )
        yield BatchClassificationCompletedEvent(
            result=result,
            processing_time_ms=processing_time_ms,
        )

    async def _classify_item(
        self,
        row: int,
        transaction: CardTransaction,
        context: ClassificationContext,
    ) -> BatchItemResult:
        try:
            classification = await self._classification_service.classify(
                transaction,
                context,
            )
        except DomainException as e:
            logger.warning("Row %d failed (%s): %s", row, e.code.value, e.message)
            return BatchItemResult(
                row=row,
                transaction=transaction,
                error=e.message,
                error_code=e.code.value,
            )
        except Exception as e:
            logger.exception("Row %d failed unexpectedly", row)
            return BatchItemResult(
                row=row,
                transaction=transaction,
                error=str(e) or type(e).__name__,
                error_code=ErrorCode.INTERNAL_ERROR.value,
            )

        return BatchItemResult(row=row, transaction=transaction, result=classification)
