"""Tracing and structured logging for the list runtime.

Two things are observed. State transitions (a key dispatch, a list
refresh, the app mount) run inside spans whose attributes live under the
span's namespace, so ``span("keyboard.dispatch", action="move_up")``
records ``keyboard.action``. Failures in caller-supplied column code
(value extractors, renderers, sort keys) are recorded by ``cell_failure``
as an error span plus a warning log line; the page keeps rendering.

Instrumentation problems are logged at debug level and never propagate
into dispatch or rendering.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import Status, StatusCode

LOGGER_NAME = "termgrid"
NO_TRACE_ID = "0" * 32
NO_SPAN_ID = "0" * 16

CELL_STAGES = ("extract", "render", "sort")

_internal = logging.getLogger(f"{LOGGER_NAME}.telemetry")


class SpanRecorder:
    """Attribute sink for one span, keyed under the span's namespace."""

    def __init__(self, span: trace.Span, namespace: str) -> None:
        self._span = span
        self.namespace = namespace

    def set(self, **attributes: object) -> None:
        """Record ``namespace.<key>`` attributes; ``None`` values are skipped."""
        for key, value in attributes.items():
            if value is None:
                continue
            try:
                self._span.set_attribute(f"{self.namespace}.{key}", value)  # type: ignore[arg-type]
            except Exception as exc:
                _internal.debug(f"span attribute dropped key={key!r} error={exc!r}")

    def fail(self, exc: BaseException) -> None:
        """Attach ``exc`` to the span and mark it as an error."""
        try:
            self._span.record_exception(exc)
            self._span.set_status(Status(StatusCode.ERROR, type(exc).__name__))
        except Exception as otel_exc:
            _internal.debug(f"span failure not recorded error={otel_exc!r}")


class TraceLogAdapter(logging.LoggerAdapter):
    """Stamps the active trace and span ids onto every record."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:  # type: ignore[override]
        ctx = trace.get_current_span().get_span_context()
        extra = kwargs.setdefault("extra", {})
        if ctx.is_valid:
            extra["trace_id"] = format(ctx.trace_id, "032x")
            extra["span_id"] = format(ctx.span_id, "016x")
        return msg, kwargs


class Telemetry:
    """Tracer plus trace-aware logger shared by the core modules and the TUI."""

    def __init__(self, tracer: trace.Tracer) -> None:
        self._tracer = tracer
        self.log = TraceLogAdapter(logging.getLogger(LOGGER_NAME), {})

    @contextmanager
    def span(self, name: str, **attributes: object) -> Iterator[SpanRecorder]:
        """Run the block inside span ``name`` with initial ``attributes``.

        Attribute keys are prefixed with the part of ``name`` before the
        first dot.
        """
        with self._tracer.start_as_current_span(name) as otel_span:
            recorder = SpanRecorder(otel_span, name.split(".", 1)[0])
            recorder.set(**attributes)
            yield recorder

    def cell_failure(
        self,
        stage: str,
        column: str,
        exc: BaseException,
        row: int | None = None,
    ) -> None:
        """Record a failure of column code for one cell.

        Args:
            stage: One of ``CELL_STAGES``; the span is named ``cell.<stage>``.
            column: Key of the column whose code failed.
            exc: The exception the column code raised.
            row: Row index when the failure happened while painting a row.
        """
        if stage not in CELL_STAGES:
            raise ValueError(f"unknown cell stage {stage!r}")
        with self.span(f"cell.{stage}", column=column, row=row) as recorder:
            recorder.fail(exc)
            where = f" row={row}" if row is not None else ""
            self.log.warning(f"cell {stage} failed column={column!r}{where} error={exc!r}")

    @classmethod
    def for_testing(cls) -> tuple[Telemetry, InMemorySpanExporter]:
        """Telemetry exporting into memory; assert on ``get_finished_spans()``."""
        exporter = InMemorySpanExporter()
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        return cls(provider.get_tracer(LOGGER_NAME)), exporter

    @classmethod
    def noop(cls) -> Telemetry:
        """Telemetry whose spans go nowhere."""
        return cls(TracerProvider().get_tracer(LOGGER_NAME))


# ---------------------------------------------------------------------------
# Active instance. Core modules read it through get_telemetry(); GridApp
# installs its own on construction.
# ---------------------------------------------------------------------------

_active: Telemetry | None = None


def get_telemetry() -> Telemetry:
    global _active
    if _active is None:
        _active = Telemetry.noop()
    return _active


def set_telemetry(telemetry: Telemetry) -> None:
    global _active
    _active = telemetry


# ---------------------------------------------------------------------------
# JSON-lines file logging
# ---------------------------------------------------------------------------


class JsonLinesFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, trace, span, msg."""

    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(
            {
                "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
                "level": record.levelname,
                "logger": record.name,
                "trace": getattr(record, "trace_id", NO_TRACE_ID),
                "span": getattr(record, "span_id", NO_SPAN_ID),
                "msg": record.getMessage(),
            },
            ensure_ascii=False,
        )


def configure_file_logging(log_dir: str | Path = "logs") -> Path:
    """Send the termgrid logger to ``{log_dir}/termgrid-YYYYMMDD.log``.

    Only the first call installs a handler; later calls return the path.
    """
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / f"termgrid-{datetime.now():%Y%m%d}.log"

    logger = logging.getLogger(LOGGER_NAME)
    if any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        return log_path

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(JsonLinesFormatter())
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    return log_path
