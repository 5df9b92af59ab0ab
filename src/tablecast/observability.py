from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from tablecast.errors import ConversionError
from tablecast.table import DataTable


class StructuredLogger(Protocol):
    def log(self, level: int, message: str, fields: Mapping[str, object]) -> None: ...


class MetricsRecorder(Protocol):
    def increment(
        self, name: str, value: int = 1, tags: Mapping[str, str] | None = None
    ) -> None: ...


@dataclass(frozen=True)
class StdlibLogger:
    logger: logging.Logger

    def log(self, level: int, message: str, fields: Mapping[str, object]) -> None:
        self.logger.log(level, message, extra={"fields": dict(fields)})


@dataclass(frozen=True)
class NullLogger:
    def log(self, level: int, message: str, fields: Mapping[str, object]) -> None:
        return None


@dataclass(frozen=True)
class NullMetrics:
    def increment(
        self, name: str, value: int = 1, tags: Mapping[str, str] | None = None
    ) -> None:
        return None


@dataclass(frozen=True)
class Observability:
    logger: StructuredLogger
    metrics: MetricsRecorder

    def record_conversion(
        self, *, path: str, target: str, table: DataTable, transposed: bool = False
    ) -> None:
        self.logger.log(
            logging.DEBUG,
            "tablecast.conversion",
            {
                "path": path,
                "target": target,
                "width": table.width(),
                "height": table.height(),
                "transposed": transposed,
            },
        )
        self.metrics.increment("tablecast.conversions", tags={"path": path})

    def record_failure(self, *, path: str, table: DataTable, error: ConversionError) -> None:
        self.logger.log(
            logging.INFO,
            "tablecast.conversion_failed",
            {
                "path": path,
                "target": error.detail.target,
                "width": table.width(),
                "height": table.height(),
                "error_kind": error.detail.error_kind,
                "error_detail": error.detail.hint,
            },
        )
        self.metrics.increment(
            "tablecast.conversion_failures", tags={"error_kind": error.detail.error_kind}
        )


class _FieldsFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "fields"):
            record.fields = {}
        return True


def configure_logging(level: int = logging.INFO) -> Observability:
    """Route tablecast events to stderr and install them as the active observability."""
    logger = logging.getLogger("tablecast")
    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(_FieldsFilter())
    handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s | %(fields)s")
    )
    logger.addHandler(handler)
    logger.setLevel(level)
    observability = Observability(logger=StdlibLogger(logger), metrics=NullMetrics())
    set_observability(observability)
    return observability


_OBSERVABILITY = Observability(logger=NullLogger(), metrics=NullMetrics())


def set_observability(observability: Observability) -> None:
    global _OBSERVABILITY
    _OBSERVABILITY = observability


def get_observability() -> Observability:
    return _OBSERVABILITY
