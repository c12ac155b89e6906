"""Tests for the command-line entry point."""

import json
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

import main
from checkmate.config import get_default_config_path
from checkmate.errors import RateLimited

URL = "https://www.thestar.com.my/news/nation/2025/01/01/story"


@pytest.fixture
def failing_pipeline(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    pipeline = MagicMock()
    pipeline.process = AsyncMock()
    monkeypatch.setattr(main, "create_from_config", lambda *args, **kwargs: (pipeline, None))
    return pipeline


def args() -> main.CLIArgs:
    return main.CLIArgs(url=URL, config=get_default_config_path())


class TestRun:
    async def test_typed_error_keeps_its_code(
        self, failing_pipeline: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        failing_pipeline.process.side_effect = RateLimited(30, key="ip:unknown")

        assert await main.run(args()) == 1

        output = json.loads(capsys.readouterr().out)
        assert output["success"] is False
        assert output["error"]["code"] == "RATE_LIMITED"
        assert output["error"]["context"]["retry_after"] == 30

    async def test_unexpected_error_reported_as_internal(
        self, failing_pipeline: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        failing_pipeline.process.side_effect = RuntimeError("db password is hunter2")

        assert await main.run(args()) == 1

        out = capsys.readouterr().out
        output = json.loads(out)
        assert output == {
            "success": False,
            "error": {"code": "INTERNAL_ERROR", "message": "An internal server error occurred"},
        }
        assert "hunter2" not in out


def test_main_exits_non_zero_on_unexpected_error(
    failing_pipeline: MagicMock,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    failing_pipeline.process.side_effect = KeyError("extractor")
    monkeypatch.setattr(sys, "argv", ["main.py", URL])

    with pytest.raises(SystemExit) as exc_info:
        main.main()

    assert exc_info.value.code == 1
    assert json.loads(capsys.readouterr().out)["error"]["code"] == "INTERNAL_ERROR"
