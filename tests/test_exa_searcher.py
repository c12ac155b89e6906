"""Tests for ExaSearcher."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from checkmate.data import PageContent, SearchHit
from checkmate.errors import ConfigurationError
from checkmate.search import ExaSearcher


def _make_mock_result(
    url: str = "https://example.com/article",
    title: str | None = "Test Article",
    published_date: str | None = "2026-02-01T10:00:00.000Z",
    score: float | None = 0.8,
    text: str | None = None,
    summary: str | None = None,
    highlights: list[str] | None = None,
) -> MagicMock:
    """Create a mock Exa result."""
    result = MagicMock()
    result.url = url
    result.title = title
    result.published_date = published_date
    result.score = score
    result.text = text
    result.summary = summary
    result.highlights = highlights
    return result


def _make_mock_response(results: list[MagicMock]) -> MagicMock:
    response = MagicMock()
    response.results = results
    return response


@pytest.fixture
def exa_searcher() -> ExaSearcher:
    """Create a searcher with test API key."""
    return ExaSearcher(api_key="test-key")


def test_init_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Should raise if no API key provided."""
    monkeypatch.delenv("EXA_API_KEY", raising=False)
    with pytest.raises(ConfigurationError, match="API key required"):
        ExaSearcher()


def test_init_uses_env_var(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXA_API_KEY", "env-key")
    assert ExaSearcher()._api_key == "env-key"


async def test_search_returns_hits(exa_searcher: ExaSearcher) -> None:
    response = _make_mock_response(
        [
            _make_mock_result(url="https://www.reuters.com/a", title="Study", score=0.9),
            _make_mock_result(url="https://blog.example.com/b", title=None, score=None),
        ]
    )
    exa_searcher._client = MagicMock()
    exa_searcher._client.search = AsyncMock(return_value=response)

    hits = await exa_searcher.search("vaccines autism study", num_results=5)

    exa_searcher._client.search.assert_awaited_once_with("vaccines autism study", num_results=5)
    assert hits == [
        SearchHit(
            url="https://www.reuters.com/a",
            title="Study",
            score=0.9,
            published_date="2026-02-01T10:00:00.000Z",
        ),
        SearchHit(
            url="https://blog.example.com/b",
            title="",
            published_date="2026-02-01T10:00:00.000Z",
        ),
    ]


async def test_fetch_contents(exa_searcher: ExaSearcher) -> None:
    response = _make_mock_response(
        [
            _make_mock_result(
                url="https://www.reuters.com/a",
                text="Full body",
                summary="Short summary",
                highlights=["key line 1", "key line 2"],
            )
        ]
    )
    exa_searcher._client = MagicMock()
    exa_searcher._client.get_contents = AsyncMock(return_value=response)

    pages = await exa_searcher.fetch_contents(["https://www.reuters.com/a"])

    kwargs = exa_searcher._client.get_contents.call_args.kwargs
    assert kwargs == {"text": True, "summary": True, "highlights": True}
    assert pages == [
        PageContent(
            url="https://www.reuters.com/a",
            title="Test Article",
            text="Full body",
            summary="Short summary",
            highlights=("key line 1", "key line 2"),
            published_date="2026-02-01T10:00:00.000Z",
        )
    ]


async def test_fetch_contents_empty_skips_call(exa_searcher: ExaSearcher) -> None:
    exa_searcher._client = MagicMock()
    exa_searcher._client.get_contents = AsyncMock()
    assert await exa_searcher.fetch_contents([]) == []
    exa_searcher._client.get_contents.assert_not_awaited()
