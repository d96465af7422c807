"""Unit tests for the traced decorator."""

from collections.abc import Iterator
from unittest.mock import MagicMock, call, patch

import pytest

from menu_catalog_service.observability.decorators import traced


@pytest.fixture
def span() -> Iterator[MagicMock]:
    """Patch the tracer and hand back the span it opens."""
    span = MagicMock()
    tracer = MagicMock()
    tracer.start_as_current_span.return_value.__enter__.return_value = span
    with patch("menu_catalog_service.observability.decorators.trace.get_tracer", return_value=tracer):
        yield span


@pytest.mark.unit
class TestTraced:
    """Test suite for traced."""

    @pytest.mark.asyncio
    async def test_async_success_records_args(self, span: MagicMock) -> None:
        """Test listed arguments are copied onto the span."""

        @traced("catalog.lookup", record_args=("location_id",))
        async def lookup(location_id: str, verbose: bool = False) -> str:
            return location_id

        assert await lookup("L1") == "L1"

        span.set_attribute.assert_has_calls(
            [call("arg.location_id", "L1"), call("success", True)], any_order=True
        )

    @pytest.mark.asyncio
    async def test_async_failure_is_recorded_and_raised(self, span: MagicMock) -> None:
        """Test exceptions mark the span failed and propagate unchanged."""

        @traced()
        async def explode() -> None:
            raise KeyError("missing")

        with pytest.raises(KeyError):
            await explode()

        span.set_attribute.assert_any_call("success", False)
        span.set_attribute.assert_any_call("error.type", "KeyError")
        span.record_exception.assert_called_once()

    def test_sync_function_stays_sync(self, span: MagicMock) -> None:
        """Test plain functions are wrapped without becoming coroutines."""

        @traced("math.double")
        def double(value: int) -> int:
            return value * 2

        assert double(4) == 8
        span.set_attribute.assert_any_call("function.name", "double")

    def test_non_scalar_args_are_skipped(self, span: MagicMock) -> None:
        """Test only scalar argument values become attributes."""

        @traced(record_args=("payload",))
        def accept(payload: dict) -> None:
            return None

        accept({"a": 1})

        recorded = [c.args[0] for c in span.set_attribute.call_args_list]
        assert "arg.payload" not in recorded
