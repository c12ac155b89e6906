"""Tests for RunLogger and serialization helpers."""

import json
from pathlib import Path

from checkmate.data import (
    FactCheckResult,
    FactCheckSource,
    Platform,
    SentimentAnalysis,
    Verdict,
)
from checkmate.run_logger import RunLogger, StageRecord, _serialize

RUN_ID = "1a2b3c4d-0000-4000-8000-000000000000"
URL = "https://www.tiktok.com/@user/video/123"

# -- _serialize tests --


def test_serialize_none() -> None:
    assert _serialize(None) is None


def test_serialize_primitive() -> None:
    assert _serialize(42) == 42
    assert _serialize("hello") == "hello"
    assert _serialize(True) is True


def test_serialize_enum() -> None:
    assert _serialize(Platform.TIKTOK) == "tiktok"


def test_serialize_tuple_becomes_list() -> None:
    assert _serialize((1, "two", None)) == [1, "two", None]


def test_serialize_path() -> None:
    assert _serialize(Path("/some/path")) == "/some/path"


def test_serialize_nested_dataclass_with_enums() -> None:
    result = _serialize(
        FactCheckResult(
            verdict=Verdict.FALSE,
            confidence=80,
            explanation="Debunked",
            sources=(FactCheckSource(url="https://a.org", title="A", credibility=9),),
        )
    )
    assert result["verdict"] == "false"
    assert result["sources"][0]["url"] == "https://a.org"
    assert isinstance(result["sources"], list)


def test_serialize_dataclass_with_dict_field() -> None:
    result = _serialize(SentimentAnalysis(overall="NEUTRAL", scores={"neutral": 0.9}))
    assert result["scores"] == {"neutral": 0.9}


def test_serialize_pydantic_model() -> None:
    record = StageRecord(stage="extract", component="TikTokExtractor")
    assert _serialize(record)["component"] == "TikTokExtractor"


# -- RunLogger disabled tests --


def test_run_logger_disabled_is_noop(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=False)
    assert not logger.enabled

    logger.start_run(RUN_ID, Platform.TIKTOK, URL)
    logger.log_stage(RUN_ID, "extract", "TikTokExtractor", URL, None, 1.0)
    result = logger.finish_run(RUN_ID, 7.5)

    assert result is None
    assert logger.last_log_path is None
    assert list(tmp_path.iterdir()) == []


# -- RunLogger enabled tests --


def test_run_logger_start_and_finish(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)

    logger.start_run(RUN_ID, Platform.TIKTOK, URL)
    path = logger.finish_run(RUN_ID, 8.1)

    assert path is not None
    assert path.exists()
    assert logger.last_log_path == path

    data = json.loads(path.read_text())
    assert data["run_id"] == RUN_ID
    assert data["platform"] == "tiktok"
    assert data["url"] == URL
    assert data["credibility_rating"] == 8.1
    assert data["completed_at"] is not None
    assert data["stages"] == []


def test_run_logger_log_stages(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    logger.start_run(RUN_ID, Platform.WEB, URL)

    logger.log_stage(
        RUN_ID,
        stage="fact_check",
        component="WebFactChecker",
        input_data={"text": "claim"},
        output_data=FactCheckResult(verdict=Verdict.VERIFIED, confidence=90, explanation="ok"),
        duration_seconds=1.23456,
    )
    logger.log_stage(
        RUN_ID,
        stage="origin_tracing",
        component="OriginTracer",
        input_data=None,
        output_data=None,
        duration_seconds=0.0,
        error="skipped: degraded fact-check",
    )
    path = logger.finish_run(RUN_ID)

    assert path is not None
    data = json.loads(path.read_text())
    assert [s["stage"] for s in data["stages"]] == ["fact_check", "origin_tracing"]
    assert data["stages"][0]["output"]["verdict"] == "verified"
    assert data["stages"][0]["duration_seconds"] == 1.2346
    assert data["stages"][0]["succeeded"] is True
    assert data["stages"][1]["succeeded"] is False
    assert data["stages"][1]["error"] == "skipped: degraded fact-check"
    assert data["credibility_rating"] is None


def test_run_logger_keeps_concurrent_runs_apart(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    other = "9f8e7d6c-0000-4000-8000-000000000000"
    logger.start_run(RUN_ID, Platform.TIKTOK, URL)
    logger.start_run(other, Platform.TWITTER, "https://x.com/a/status/1")

    logger.log_stage(other, "extract", "TwitterExtractor", None, None, 0.2)
    first = logger.finish_run(RUN_ID)
    second = logger.finish_run(other)

    assert first is not None and second is not None
    assert first != second
    assert json.loads(first.read_text())["stages"] == []
    assert len(json.loads(second.read_text())["stages"]) == 1


def test_run_logger_creates_log_dir(tmp_path: Path) -> None:
    log_dir = tmp_path / "nested" / "logs"
    logger = RunLogger(log_dir=log_dir, enabled=True)

    logger.start_run(RUN_ID, Platform.WEB, URL)
    assert logger.finish_run(RUN_ID) is not None
    assert log_dir.exists()


def test_run_logger_filename_format(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=True)

    logger.start_run(RUN_ID, Platform.WEB, URL)
    path = logger.finish_run(RUN_ID)

    assert path is not None
    assert path.name.startswith("run_")
    assert path.name.endswith("_1a2b3c4d.json")
    assert ":" not in path.name


def test_run_logger_log_stage_without_start(tmp_path: Path) -> None:
    """log_stage before start_run should be a no-op."""
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    logger.log_stage(RUN_ID, "extract", "TikTokExtractor", URL, None, 1.0)


def test_run_logger_finish_twice(tmp_path: Path) -> None:
    """A run is written once; a second finish_run returns None."""
    logger = RunLogger(log_dir=tmp_path, enabled=True)
    logger.start_run(RUN_ID, Platform.WEB, URL)
    assert logger.finish_run(RUN_ID) is not None
    assert logger.finish_run(RUN_ID) is None
