"""Tests for BatchClassificationService."""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cardclass.application.dtos import (
    BatchClassificationCompletedEvent,
    BatchClassificationProgressEvent,
    BatchClassificationStartedEvent,
)
from cardclass.application.services import BatchClassificationService
from cardclass.domain.classification.exceptions import TransportError
from cardclass.domain.classification.services import TransactionClassificationService
from cardclass.domain.classification.value_objects import (
    Account,
    CardTransaction,
    ClassificationContext,
    ClassificationMethod,
    ClassifyResult,
)


def create_transaction(index: int) -> CardTransaction:
    return CardTransaction(
        amount=Decimal(1000 * index),
        merchant_name=f"가맹점 {index}",
        mcc_code="5814",
    )


def create_result(method: ClassificationMethod = ClassificationMethod.AI):
    return ClassifyResult(
        account_code="51100",
        account_name="복리후생비",
        confidence=0.9 if method == ClassificationMethod.AI else 1.0,
        reason="r",
        method=method,
    )


@pytest.fixture
def context() -> ClassificationContext:
    return ClassificationContext(accounts=[Account(code="51100", name="복리후생비")])


@pytest.fixture
def classification_service():
    return MagicMock(spec=TransactionClassificationService)


class TestClassifyBatch:
    """Aggregate results and per-item isolation."""

    @pytest.mark.asyncio
    async def test_failure_isolated_to_its_row(self, classification_service, context):
        transactions = [create_transaction(i) for i in range(1, 6)]

        async def classify(tx, ctx):
            if tx is transactions[2]:
                raise TransportError(provider="mock", reason="boom", status_code=502)
            return create_result()

        classification_service.classify = AsyncMock(side_effect=classify)
        service = BatchClassificationService(classification_service, chunk_size=5)

        result = await service.classify_batch(transactions, context)

        assert result.total == 5
        assert result.success == 4
        assert result.failed == 1
        assert [item.row for item in result.items if item.success] == [1, 2, 4, 5]
        assert len(result.errors) == 1
        assert result.errors[0].row == 3
        assert result.errors[0].error_code == "AI_TRANSPORT_FAILED"
        assert "502" in result.errors[0].error

    @pytest.mark.asyncio
    async def test_counts_by_method(self, classification_service, context):
        results = [
            create_result(ClassificationMethod.RULE),
            create_result(ClassificationMethod.AI),
            create_result(ClassificationMethod.RULE),
        ]
        classification_service.classify = AsyncMock(side_effect=results)
        service = BatchClassificationService(classification_service)

        result = await service.classify_batch(
            [create_transaction(i) for i in range(1, 4)],
            context,
        )

        assert result.rule_classified == 2
        assert result.ai_classified == 1
        assert result.success_rate == 1.0

    @pytest.mark.asyncio
    async def test_unexpected_exception_recorded_as_internal_error(
        self,
        classification_service,
        context,
    ):
        classification_service.classify = AsyncMock(side_effect=RuntimeError("bug"))
        service = BatchClassificationService(classification_service)

        result = await service.classify_batch([create_transaction(1)], context)

        assert result.failed == 1
        assert result.errors[0].error == "bug"
        assert result.errors[0].error_code == "INTERNAL_ERROR"

    @pytest.mark.asyncio
    async def test_empty_batch(self, classification_service, context):
        service = BatchClassificationService(classification_service)

        result = await service.classify_batch([], context)

        assert result.total == 0
        assert result.items == []
        classification_service.classify.assert_not_called()

    def test_chunk_size_must_be_positive(self, classification_service):
        with pytest.raises(ValueError, match="chunk_size"):
            BatchClassificationService(classification_service, chunk_size=0)


class TestGrouping:
    """Groups run concurrently inside, sequentially between."""

    @pytest.mark.asyncio
    async def test_concurrency_bounded_by_chunk_size(
        self,
        classification_service,
        context,
    ):
        in_flight = 0
        peak = 0

        async def classify(tx, ctx):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0)
            in_flight -= 1
            return create_result()

        classification_service.classify = AsyncMock(side_effect=classify)
        service = BatchClassificationService(classification_service, chunk_size=3)

        result = await service.classify_batch(
            [create_transaction(i) for i in range(1, 8)],
            context,
        )

        assert result.success == 7
        assert peak == 3

    @pytest.mark.asyncio
    async def test_rows_keep_input_order(self, classification_service, context):
        classification_service.classify = AsyncMock(return_value=create_result())
        service = BatchClassificationService(classification_service, chunk_size=2)
        transactions = [create_transaction(i) for i in range(1, 6)]

        result = await service.classify_batch(transactions, context)

        assert [item.row for item in result.items] == [1, 2, 3, 4, 5]
        assert [item.transaction for item in result.items] == transactions


class TestClassifyBatchStreaming:
    """Progress events."""

    @pytest.mark.asyncio
    async def test_event_sequence(self, classification_service, context):
        classification_service.classify = AsyncMock(return_value=create_result())
        service = BatchClassificationService(classification_service, chunk_size=2)

        events = [
            event
            async for event in service.classify_batch_streaming(
                [create_transaction(i) for i in range(1, 6)],
                context,
            )
        ]

        assert isinstance(events[0], BatchClassificationStartedEvent)
        assert events[0].total == 5
        progress = [e for e in events if isinstance(e, BatchClassificationProgressEvent)]
        assert [e.current for e in progress] == [2, 4, 5]
        assert isinstance(events[-1], BatchClassificationCompletedEvent)
        assert events[-1].result.success == 5
        assert events[-1].to_dict()["event_type"] == "classification_completed"

    @pytest.mark.asyncio
    async def test_stopping_between_groups_skips_remaining(
        self,
        classification_service,
        context,
    ):
        classification_service.classify = AsyncMock(return_value=create_result())
        service = BatchClassificationService(classification_service, chunk_size=2)
        stream = service.classify_batch_streaming(
            [create_transaction(i) for i in range(1, 7)],
            context,
        )

        async for event in stream:
            if isinstance(event, BatchClassificationProgressEvent):
                break
        await stream.aclose()

        assert classification_service.classify.await_count == 2

    @pytest.mark.asyncio
    async def test_classify_batch_drains_stream(self, classification_service, context):
        service = BatchClassificationService(classification_service)

        with patch.object(
            service,
            "classify_batch_streaming",
        ) as mock_stream:

            async def events(transactions, ctx):
                yield BatchClassificationStartedEvent(total=0)

            mock_stream.side_effect = events
            result = await service.classify_batch([], context)

        mock_stream.assert_called_once()
        assert result.total == 0
