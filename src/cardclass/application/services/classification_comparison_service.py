"""Classification comparison service.

Runs the same transactions through two AI configurations (two models, or
one model with two prompt sets) and reports where they agree. Rules are
bypassed so every row exercises the model.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from cardclass.application.dtos import (
    BatchItemResult,
    ClassificationComparisonReport,
    ComparisonRow,
    ComparisonSide,
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


class ClassificationComparisonService:
    """Compares two AI classification setups on the same sample."""

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

    async def compare(
        self,
        transactions: Sequence[CardTransaction],
        context: ClassificationContext,
        left: ComparisonSide,
        right: ComparisonSide,
    ) -> ClassificationComparisonReport:
        """Classify every transaction on both sides with AI only.

        Parameters
        ----------
        transactions
            Sample to classify, in row order
        context
            Shared accounts, examples and defaults; its rules are ignored
        left, right
            The two setups; each overrides the context's model and templates

        Returns
        -------
        ClassificationComparisonReport
            Per-row outcomes of both sides; a failed side is recorded, not raised
        """
        left_context = _apply_side(context, left)
        right_context = _apply_side(context, right)
        report = ClassificationComparisonReport(
            left_label=left.label,
            right_label=right.label,
        )

        for chunk_start in range(0, len(transactions), self._chunk_size):
            chunk = transactions[chunk_start : chunk_start + self._chunk_size]
            rows = await asyncio.gather(
                *(
                    self._compare_row(
                        chunk_start + offset + 1,
                        tx,
                        left_context,
                        right_context,
                    )
                    for offset, tx in enumerate(chunk)
                ),
            )
            report.rows.extend(rows)

        logger.info(
            "Comparison %s vs %s: %d/%d agree",
            left.label,
            right.label,
            report.agreed,
            report.total,
        )
        return report

    async def _compare_row(
        self,
        row: int,
        transaction: CardTransaction,
        left_context: ClassificationContext,
        right_context: ClassificationContext,
    ) -> ComparisonRow:
        left_item, right_item = await asyncio.gather(
            self._classify_side(row, transaction, left_context),
            self._classify_side(row, transaction, right_context),
        )
        return ComparisonRow(
            row=row,
            transaction=transaction,
            left=left_item,
            right=right_item,
        )

    async def _classify_side(
        self,
        row: int,
        transaction: CardTransaction,
        context: ClassificationContext,
    ) -> BatchItemResult:
        try:
            classification = await self._classification_service.classify_with_ai(
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


def _apply_side(
    context: ClassificationContext,
    side: ComparisonSide,
) -> ClassificationContext:
    return dataclasses.replace(
        context,
        rules=(),
        model_id=side.model_id or context.model_id,
        templates=side.templates or context.templates,
    )
