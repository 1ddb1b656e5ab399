"""Counters and timing samples emitted by the agent loop."""

from typing import Dict, List, Mapping, Optional, Protocol, Tuple, Union

from pydantic import BaseModel, Field

TagValue = Union[str, int, float, bool]
MetricTags = Mapping[str, TagValue]


class MetricsSnapshot(BaseModel):
    """Point-in-time copy of collected metrics."""

    counters: Dict[str, float] = Field(default_factory=dict)
    timings: Dict[str, List[float]] = Field(default_factory=dict)


class MetricsCollector(Protocol):
    """Protocol for metrics sinks injected into the loop."""

    def increment(
        self, name: str, value: float = 1, tags: Optional[MetricTags] = None
    ) -> None:
        """Add ``value`` to a counter series."""

        ...

    def timing(
        self, name: str, duration_ms: float, tags: Optional[MetricTags] = None
    ) -> None:
        """Record one latency sample."""

        ...

    def snapshot(self) -> MetricsSnapshot:
        """Return collected metrics."""

        ...


def series_key(name: str, tags: Optional[MetricTags] = None) -> str:
    """Build a series key of the form ``name|k1=v1,k2=v2`` with sorted tags."""

    if not tags:
        return name
    serialized = ",".join(
        f"{key}={_format_tag(value)}" for key, value in sorted(tags.items())
    )
    return f"{name}|{serialized}"


def _format_tag(value: TagValue) -> str:
    """Render a tag value, using lowercase booleans."""

    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class InMemoryMetricsCollector:
    """In-memory metrics collector keyed by name and tags."""

    def __init__(self) -> None:
        """Initialize empty counter and timing stores."""

        self._counters: Dict[str, float] = {}
        self._timings: Dict[str, List[float]] = {}

    def increment(
        self, name: str, value: float = 1, tags: Optional[MetricTags] = None
    ) -> None:
        key = series_key(name, tags)
        self._counters[key] = self._counters.get(key, 0) + value

    def timing(
        self, name: str, duration_ms: float, tags: Optional[MetricTags] = None
    ) -> None:
        self._timings.setdefault(series_key(name, tags), []).append(duration_ms)

    def snapshot(self) -> MetricsSnapshot:
        return MetricsSnapshot(
            counters=dict(self._counters),
            timings={key: list(values) for key, values in self._timings.items()},
        )

    def counter(self, name: str, tags: Optional[MetricTags] = None) -> float:
        """Return the current value of one counter series."""

        return self._counters.get(series_key(name, tags), 0)

    def counters_by_name(self, name: str) -> List[Tuple[str, float]]:
        """Return every series of a counter regardless of tags."""

        prefix = f"{name}|"
        return [
            (key, value)
            for key, value in self._counters.items()
            if key == name or key.startswith(prefix)
        ]


class NullMetricsCollector:
    """Metrics collector that discards everything."""

    def increment(
        self, name: str, value: float = 1, tags: Optional[MetricTags] = None
    ) -> None:
        del name, value, tags

    def timing(
        self, name: str, duration_ms: float, tags: Optional[MetricTags] = None
    ) -> None:
        del name, duration_ms, tags

    def snapshot(self) -> MetricsSnapshot:
        return MetricsSnapshot()
