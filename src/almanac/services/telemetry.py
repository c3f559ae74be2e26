"""Span timing for service operations, switched on by ``-v``.

One ContextVar holds the stack of open spans. It is None while telemetry
is off, so the disabled path is a single ``ContextVar.get``. Executor
threads start from an empty context and record nothing.

A finished root span is attached to ``ServiceResult.meta["telemetry"]``.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from almanac.services.result import ServiceResult

logger = structlog.get_logger("almanac.telemetry")

_open_spans: ContextVar[list[Span] | None] = ContextVar("almanac_open_spans", default=None)


@dataclass
class Span:
    name: str
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None
    annotations: dict[str, Any] = field(default_factory=dict)
    children: list[Span] = field(default_factory=list)

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def end(self) -> None:
        self.finished = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


def enable_telemetry() -> None:
    _open_spans.set([])


def disable_telemetry() -> None:
    _open_spans.set(None)


def get_current_span() -> Span | None:
    """Innermost open span, or None outside a traced operation."""
    spans = _open_spans.get()
    return spans[-1] if spans else None


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Time a step inside a traced operation; yields None when nothing is recording."""
    spans = _open_spans.get()
    if not spans:
        yield None
        return

    child = Span(name)
    spans[-1].children.append(child)
    spans.append(child)
    try:
        yield child
    finally:
        spans.pop()
        child.end()


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Record *func* as a root span and attach the tree to its ServiceResult."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        spans = _open_spans.get()
        if spans is None:
            return func(*args, **kwargs)

        root = Span(func.__qualname__)
        spans.append(root)
        ok = False
        try:
            result = func(*args, **kwargs)
            ok = result.ok if isinstance(result, ServiceResult) else True
        finally:
            spans.pop()
            root.end()
            logger.debug(
                "span.complete",
                span_name=root.name,
                duration_ms=round(root.duration_ms, 2),
                ok=ok,
                steps=[child.name for child in root.children],
            )

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": root.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper
