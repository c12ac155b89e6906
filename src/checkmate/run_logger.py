"""Run logger for recording per-request pipeline stages to JSON files."""

import dataclasses
import enum
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel


class StageRecord(BaseModel):
    """Record of a single pipeline stage execution."""

    stage: str
    component: str
    input: Any = None
    output: Any = None
    timestamp: str = ""
    duration_seconds: float = 0.0
    succeeded: bool = True
    error: str | None = None


class RunRecord(BaseModel):
    """Record of one ``process`` call."""

    run_id: str
    platform: str
    url: str
    started_at: str
    completed_at: str | None = None
    stages: list[StageRecord] = []
    credibility_rating: float | None = None


def _serialize(obj: Any) -> Any:
    """Serialize an object to JSON-compatible format.

    Handles dataclasses, Pydantic models, enums, tuples, lists, dicts, and
    primitives.
    """
    if obj is None:
        return None
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return _serialize(dataclasses.asdict(obj))
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, enum.Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [_serialize(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _serialize(v) for k, v in obj.items()}
    if isinstance(obj, Path):
        return str(obj)
    return obj


class RunLogger:
    """Accumulates stage records per request and writes a JSON file per run.

    Records are keyed by run id, so one logger can serve concurrent
    requests. When ``enabled=False``, all methods are no-ops.

    Args:
        log_dir: Directory to write JSON log files.
        enabled: If False, all methods become no-ops.
    """

    def __init__(self, log_dir: Path, *, enabled: bool = True) -> None:
        self._log_dir = log_dir
        self._enabled = enabled
        self._records: dict[str, RunRecord] = {}
        self._last_log_path: Path | None = None

    @property
    def enabled(self) -> bool:
        """Whether logging is active."""
        return self._enabled

    @property
    def last_log_path(self) -> Path | None:
        """Path to the last written log file, or None."""
        return self._last_log_path

    def start_run(self, run_id: str, platform: str, url: str) -> None:
        """Initialize a new run record.

        Args:
            run_id: Request id from the processing context.
            platform: Detected platform.
            url: Sanitized URL being processed.
        """
        if not self._enabled:
            return

        self._records[run_id] = RunRecord(
            run_id=run_id,
            platform=str(platform),
            url=url,
            started_at=datetime.now(tz=UTC).isoformat(),
        )

    def log_stage(
        self,
        run_id: str,
        stage: str,
        component: str,
        input_data: Any,
        output_data: Any,
        duration_seconds: float,
        *,
        error: str | None = None,
    ) -> None:
        """Append a stage record to a run.

        Args:
            run_id: Request id passed to :meth:`start_run`.
            stage: Stage name (e.g. "extract", "fact_check").
            component: Component class name.
            input_data: Stage input (will be serialized).
            output_data: Stage output (will be serialized).
            duration_seconds: Wall-clock time for this stage.
            error: Error message when the stage failed or degraded.
        """
        record = self._records.get(run_id) if self._enabled else None
        if record is None:
            return

        record.stages.append(
            StageRecord(
                stage=stage,
                component=component,
                input=_serialize(input_data),
                output=_serialize(output_data),
                timestamp=datetime.now(tz=UTC).isoformat(),
                duration_seconds=round(duration_seconds, 4),
                succeeded=error is None,
                error=error,
            )
        )

    def finish_run(self, run_id: str, credibility_rating: float | None = None) -> Path | None:
        """Write the run record to a JSON file.

        Args:
            run_id: Request id passed to :meth:`start_run`.
            credibility_rating: Final rating, if one was produced.

        Returns:
            Path to the written JSON file, or None if logging is disabled.
        """
        record = self._records.pop(run_id, None) if self._enabled else None
        if record is None:
            return None

        record.completed_at = datetime.now(tz=UTC).isoformat()
        record.credibility_rating = credibility_rating

        self._log_dir.mkdir(parents=True, exist_ok=True)

        # run_2026-02-12T14-30-00_1a2b3c4d.json
        ts = record.started_at.replace(":", "-").split(".")[0].split("+")[0]
        filepath = self._log_dir / f"run_{ts}_{run_id[:8]}.json"

        filepath.write_text(record.model_dump_json(indent=2))
        self._last_log_path = filepath
        return filepath
