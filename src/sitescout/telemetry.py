"""Optional telemetry sink and progress callback used by the extraction service.

The extraction core only depends on the small ``Telemetry`` protocol below.
Callers that do not care pass nothing and get ``NullTelemetry``.
"""

import logging
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Protocol, TypeAlias

LOGGER = logging.getLogger(__name__)

# (current URL count, phase name)
ProgressCallback: TypeAlias = Callable[[int, str], None]

SPAN_EXTRACT = "urlextractor.extract"
COUNTER_URLS_EXTRACTED = "urlextractor.urls.extracted"
COUNTER_URLS_BY_SOURCE = "urlextractor.urls.by_source"


class Telemetry(Protocol):
    """Capabilities the extraction service uses to report what it does.

    Implementations may be shared by concurrent extractions, so ``add`` must
    tolerate concurrent calls.
    """

    def span(self, name: str, **attributes: Any) -> Any:
        """Return a context manager covering one unit of work."""
        ...

    def add(self, counter: str, value: int, **attributes: Any) -> None:
        """Increment a counter."""
        ...

    def event(self, level: int, message: str, **fields: Any) -> None:
        """Record a structured log event."""
        ...


class NullTelemetry:
    """Telemetry sink that discards everything."""

    @contextmanager
    def span(self, name: str, **attributes: Any) -> Iterator[None]:
        yield

    def add(self, counter: str, value: int, **attributes: Any) -> None:
        pass

    def event(self, level: int, message: str, **fields: Any) -> None:
        pass


class LoggingTelemetry:
    """
    Telemetry sink backed by ``logging``.

    Events go to the given logger with their fields as ``extra``. Counters are
    kept in memory keyed by name and sorted attribute pairs, and span
    durations are logged at DEBUG when the span closes.

    Usage:
        telemetry = LoggingTelemetry()
        result = await ExtractService().extract(request, telemetry=telemetry)
        telemetry.counter_value("urlextractor.urls.extracted", base_url=result.base_url)
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or LOGGER
        self._counters: dict[tuple[str, tuple[tuple[str, str], ...]], int] = {}
        self._lock = threading.Lock()

    @contextmanager
    def span(self, name: str, **attributes: Any) -> Iterator[None]:
        started = time.perf_counter()
        try:
            yield
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            self.logger.debug(
                "Span %s finished in %.1fms",
                name,
                elapsed_ms,
                extra={"span": name, "duration_ms": round(elapsed_ms, 1), **attributes},
            )

    def add(self, counter: str, value: int, **attributes: Any) -> None:
        key = (counter, _attribute_key(attributes))
        with self._lock:
            self._counters[key] = self._counters.get(key, 0) + value

    def event(self, level: int, message: str, **fields: Any) -> None:
        self.logger.log(level, message, extra=fields)

    def counter_value(self, counter: str, **attributes: Any) -> int:
        """Return the accumulated value of a counter for exact attributes."""
        with self._lock:
            return self._counters.get((counter, _attribute_key(attributes)), 0)

    def counters(self) -> dict[str, int]:
        """Return totals per counter name across all attribute sets."""
        totals: dict[str, int] = {}
        with self._lock:
            for (name, _attributes), value in self._counters.items():
                totals[name] = totals.get(name, 0) + value
        return totals


def _attribute_key(attributes: dict[str, Any]) -> tuple[tuple[str, str], ...]:
    return tuple(sorted((key, str(value)) for key, value in attributes.items()))
