"""
Unit Tests for ErrorHandler.

Test Aspects Covered:
    ✅ Business Logic: Retry gate, backoff, fallback, batch handling
    ✅ Edge Cases: Immediate success, all failures, failing observers
    ✅ Error Handling: Original exceptions propagate unchanged
"""

from __future__ import annotations

import logging
from typing import List
from unittest.mock import Mock

import pytest

from resilience_kit.domain.errors import EnrichedError, ErrorKind, Severity
from resilience_kit.resilience.error_classifier import enrich
from resilience_kit.resilience.error_handler import (
    BatchResult,
    ErrorHandler,
    RetryConfig,
    report_error,
)


@pytest.fixture
def handler(recording_sleep) -> ErrorHandler:
    return ErrorHandler(
        retry_config=RetryConfig(max_retries=3, base_delay_seconds=1.0),
        sleep_func=recording_sleep,
    )


class TestWithErrorHandling:
    """Test cases for retry logic."""

    @pytest.mark.asyncio
    async def test_succeeds_on_first_attempt(self, handler, scripted, recording_sleep) -> None:
        """
        SCENARIO: Operation succeeds on first attempt
        EXPECTED: Result returned, no retries, no sleeps
        """
        operation = scripted("success")

        result = await handler.with_error_handling(operation)

        assert result == "success"
        assert operation.calls == 1
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_retries_network_errors_with_backoff(
        self, handler, scripted, recording_sleep
    ) -> None:
        """
        SCENARIO: Two network failures then success
        EXPECTED: Result returned, delays double per attempt
        """
        operation = scripted(
            ConnectionError("network unreachable"),
            ConnectionError("network unreachable"),
            "ok",
        )

        result = await handler.with_error_handling(operation, retries=2)

        assert result == "ok"
        assert operation.calls == 3
        assert recording_sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_non_retryable_error_aborts(self, handler, scripted) -> None:
        """
        SCENARIO: Validation failure with retries available
        EXPECTED: Called once, original exception raised
        """
        original = ValueError("invalid quantity")
        operation = scripted(original)

        with pytest.raises(ValueError) as exc_info:
            await handler.with_error_handling(operation, retries=3)

        assert exc_info.value is original
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_raises_last_original_after_exhaustion(self, handler, scripted) -> None:
        """
        SCENARIO: Server failures on every attempt
        EXPECTED: Last original exception raised, on_error per attempt
        """
        last = RuntimeError("server error 500 (third)")
        operation = scripted(
            RuntimeError("server error 500"),
            RuntimeError("server error 500"),
            last,
        )
        errors: List[EnrichedError] = []

        with pytest.raises(RuntimeError) as exc_info:
            await handler.with_error_handling(operation, retries=2, on_error=errors.append)

        assert exc_info.value is last
        assert [e.details["attempt"] for e in errors] == [1, 2, 3]
        assert all(e.details["max_attempts"] == 3 for e in errors)
        assert all(e.kind == ErrorKind.SERVER for e in errors)

    @pytest.mark.asyncio
    async def test_repeated_network_failure_escalates(self, handler, scripted) -> None:
        operation = scripted(ConnectionError("network down"))
        errors: List[EnrichedError] = []

        with pytest.raises(ConnectionError):
            await handler.with_error_handling(operation, retries=1, on_error=errors.append)

        assert [e.severity for e in errors] == [Severity.MEDIUM, Severity.HIGH]

    @pytest.mark.asyncio
    async def test_fallback_after_exhaustion(self, handler, scripted) -> None:
        operation = scripted(ConnectionError("network down"))

        async def fallback():
            return "cached"

        result = await handler.with_error_handling(operation, retries=1, fallback=fallback)

        assert result == "cached"
        assert operation.calls == 2

    @pytest.mark.asyncio
    async def test_failing_fallback_reraises_original(self, handler, scripted) -> None:
        original = PermissionError("forbidden")
        operation = scripted(original)

        def fallback():
            raise RuntimeError("fallback broke")

        with pytest.raises(PermissionError) as exc_info:
            await handler.with_error_handling(operation, fallback=fallback)

        assert exc_info.value is original

    @pytest.mark.asyncio
    async def test_failing_on_error_does_not_break(self, handler, scripted) -> None:
        """
        SCENARIO: on_error observer raises
        EXPECTED: Retry loop continues unaffected
        """
        operation = scripted(ConnectionError("network down"), "ok")
        observer = Mock(side_effect=RuntimeError("observer broke"))

        result = await handler.with_error_handling(operation, retries=1, on_error=observer)

        assert result == "ok"
        assert observer.call_count == 1

    @pytest.mark.asyncio
    async def test_zero_delay_skips_sleep(self, handler, scripted, recording_sleep) -> None:
        operation = scripted(ConnectionError("network down"), "ok")

        await handler.with_error_handling(operation, retries=1, retry_delay=0)

        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_negative_retries_rejected(self, handler, scripted) -> None:
        with pytest.raises(ValueError):
            await handler.with_error_handling(scripted("ok"), retries=-1)

    def test_exponential_backoff(self) -> None:
        """
        SCENARIO: Successive attempts
        EXPECTED: Delay doubles per attempt
        """
        handler = ErrorHandler(retry_config=RetryConfig(exponential_base=2.0))

        assert handler._calculate_delay(0, 0.1) == pytest.approx(0.1)
        assert handler._calculate_delay(1, 0.1) == pytest.approx(0.2)
        assert handler._calculate_delay(2, 0.1) == pytest.approx(0.4)

    def test_max_delay_cap(self) -> None:
        handler = ErrorHandler(
            retry_config=RetryConfig(max_delay_seconds=5.0, exponential_base=2.0)
        )

        assert handler._calculate_delay(10, 1.0) == 5.0


class TestSafeAsync:
    """Test cases for safe_async()."""

    @pytest.mark.asyncio
    async def test_returns_result(self, handler, scripted) -> None:
        assert await handler.safe_async(scripted([1, 2]), []) == [1, 2]

    @pytest.mark.asyncio
    async def test_returns_fallback_value_on_failure(self, handler, scripted) -> None:
        errors: List[EnrichedError] = []

        result = await handler.safe_async(
            scripted(RuntimeError("server error")), [], on_error=errors.append
        )

        assert result == []
        assert len(errors) == 1


class TestHandleBatch:
    """Test cases for batch handling."""

    @pytest.mark.asyncio
    async def test_partial_success(self, handler, scripted) -> None:
        """
        SCENARIO: One of three operations fails
        EXPECTED: None in its slot, error recorded with its index
        """
        operations = [scripted(1), scripted(ValueError("invalid row")), scripted(3)]
        seen = []

        result = await handler.handle_batch(
            operations, on_error=lambda error, index: seen.append(index)
        )

        assert result.results == [1, None, 3]
        assert [index for index, _ in result.errors] == [1]
        assert result.errors[0][1].details["total_operations"] == 3
        assert result.success_rate == pytest.approx(2 / 3)
        assert seen == [1]

    @pytest.mark.asyncio
    async def test_fail_fast(self, handler, scripted) -> None:
        third = scripted(3)
        operations = [scripted(1), scripted(ValueError("invalid row")), third]

        with pytest.raises(ValueError):
            await handler.handle_batch(operations, fail_fast=True)

        assert third.calls == 0

    def test_empty_batch_result(self) -> None:
        result: BatchResult[int] = BatchResult()

        assert result.success_rate == 1.0
        assert not result.has_failures
        assert not result.all_failed


class TestReportError:
    """Test cases for report_error()."""

    def test_default_reporter_logs(self, caplog) -> None:
        with caplog.at_level(logging.INFO):
            report_error(enrich("server error 500"))

        assert any("server error 500" in r.getMessage() for r in caplog.records)
        assert any(r.levelno == logging.CRITICAL for r in caplog.records)

    def test_failing_reporter_is_contained(self) -> None:
        reporter = Mock()
        reporter.report.side_effect = RuntimeError("sink down")

        report_error(enrich("network down"), reporter)

        reporter.report.assert_called_once()
