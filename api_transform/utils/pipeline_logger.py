"""Structured logging utilities for transformation runs.

Every step log line carries:
- primary_alias
- run_id
- step
- record_count
- duration_ms
"""

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass
class PipelineLogContext:
    """Context for pipeline logging with required fields."""

    primary_alias: str
    run_id: str
    step: str = ""
    record_count: int = 0
    duration_ms: Optional[float] = None
    status: str = "started"
    error: Optional[str] = None
    extra: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        data = asdict(self)
        data["timestamp"] = datetime.now(timezone.utc).isoformat()
        return {k: v for k, v in data.items() if v is not None}

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), default=str)


class PipelineLogger:
    """Structured logger for transformation runs."""

    def __init__(self, primary_alias: str, run_id: str):
        """Initialize pipeline logger.

        Args:
            primary_alias: Alias of the primary model being transformed
            run_id: Unique run identifier
        """
        self.primary_alias = primary_alias
        self.run_id = run_id
        self.logger = logging.getLogger(f"api_transform.run.{primary_alias}")
        self._start_time: Optional[float] = None
        self._transform_times: list[float] = []

    def _log(self, level: int, step: str, **kwargs) -> None:
        ctx = PipelineLogContext(
            primary_alias=self.primary_alias,
            run_id=self.run_id,
            step=step,
            **kwargs
        )
        self.logger.log(level, ctx.to_json(), extra={"context": ctx.to_dict()})

    def _elapsed_ms(self) -> Optional[float]:
        if self._start_time is None:
            return None
        return (time.time() - self._start_time) * 1000

    def start(self, step: str) -> None:
        """Log step start."""
        self._start_time = time.time()
        self._log(logging.INFO, step, status="started")

    def success(self, step: str, **kwargs) -> None:
        """Log step success."""
        self._log(
            logging.INFO,
            step,
            status="success",
            duration_ms=self._elapsed_ms(),
            **kwargs
        )

    def error(self, step: str, error: Exception, **kwargs) -> None:
        """Log step error."""
        self._log(
            logging.ERROR,
            step,
            status="error",
            error=str(error),
            duration_ms=self._elapsed_ms(),
            **kwargs
        )

    def log_transform(
        self,
        input_count: int,
        output_count: int,
        duration_ms: float,
        wrapped: bool = False,
    ) -> None:
        """Log a transformation step."""
        self._transform_times.append(duration_ms)
        self._log(
            logging.INFO,
            step="transform",
            status="success",
            record_count=output_count,
            duration_ms=duration_ms,
            extra={
                "input_count": input_count,
                "output_count": output_count,
                "wrapped": wrapped,
            }
        )

    def get_metrics(self) -> dict:
        """Get aggregated metrics."""
        return {
            "primary_alias": self.primary_alias,
            "run_id": self.run_id,
            "total_transforms": len(self._transform_times),
            "total_transform_time_ms": sum(self._transform_times),
            "avg_transform_time_ms": (
                sum(self._transform_times) / len(self._transform_times)
                if self._transform_times else 0
            ),
        }


@contextmanager
def timed_operation(name: str, logger: logging.Logger = None):
    """Context manager to time an operation.

    Usage:
        with timed_operation("transform") as timer:
            result = pipeline.transform(data, "Post")
        print(f"Took {timer.duration_ms}ms")

    Args:
        name: Operation name for logging
        logger: Optional logger instance

    Yields:
        Timer object with duration_ms attribute
    """
    class Timer:
        def __init__(self):
            self.start_time = time.time()
            self.end_time = None
            self.duration_ms = 0

    timer = Timer()

    try:
        yield timer
    finally:
        timer.end_time = time.time()
        timer.duration_ms = (timer.end_time - timer.start_time) * 1000

        if logger:
            logger.debug(
                f"Operation '{name}' completed",
                extra={"operation": name, "duration_ms": timer.duration_ms}
            )
