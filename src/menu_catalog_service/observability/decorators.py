"""OpenTelemetry tracing decorators."""

import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span

# Type variable for generic function signatures
F = TypeVar("F", bound=Callable[..., Any])


def traced(
    span_name: str | None = None,
    service_name: str = "menu-catalog-svc",
    record_args: tuple[str, ...] = (),
) -> Callable[[F], F]:
    """Decorator to add OpenTelemetry tracing to a function.

    Creates a new span for the decorated function with automatic error tracking.
    Named arguments listed in ``record_args`` are copied onto the span as
    ``arg.<name>`` attributes when they are strings or numbers.

    Args:
        span_name: Name for the span (defaults to function name if not provided)
        service_name: Service name for span attributes
        record_args: Argument names whose values should be recorded on the span

    Returns:
        Decorated function with tracing

    Example:
        @traced("catalog.get_catalog_items", record_args=("location_id",))
        async def get_catalog_items(self, location_id: str) -> CatalogResponse:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(service_name)
        signature = inspect.signature(func)

        def start_span(span: Span, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
            span.set_attribute("service.name", service_name)
            if span_name:
                span.set_attribute("function.name", func.__name__)

            if record_args:
                bound = signature.bind_partial(*args, **kwargs)
                for arg_name in record_args:
                    value = bound.arguments.get(arg_name)
                    if isinstance(value, (str, int, float, bool)):
                        span.set_attribute(f"arg.{arg_name}", value)

        def record_failure(span: Span, exc: Exception) -> None:
            span.set_attribute("success", False)
            span.set_attribute("error.type", type(exc).__name__)
            span.record_exception(exc)

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name) as span:
                start_span(span, args, kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    record_failure(span, e)
                    raise
                span.set_attribute("success", True)
                return result

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name) as span:
                start_span(span, args, kwargs)
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    record_failure(span, e)
                    raise
                span.set_attribute("success", True)
                return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator
