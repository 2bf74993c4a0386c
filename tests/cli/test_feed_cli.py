from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from zenn_notifier.cli.app import app
from zenn_notifier.cli.commands import feed
from zenn_notifier.core.feed import FeedError
from zenn_notifier.infra.feed import FeedDocument
from zenn_notifier.shared.config import AppSettings, FeedSettings


class StubFeedClient:
    def __init__(self, document: FeedDocument | None = None, error: Exception | None = None):
        self.document = document
        self.error = error
        self.urls: list[str] = []

    def fetch(self, url: str) -> FeedDocument:
        self.urls.append(url)
        if self.error:
            raise self.error
        assert self.document is not None
        return self.document


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        feed=FeedSettings(
            cache_path=tmp_path / "cache" / "rss-processed.json",
            output_path=tmp_path / "new-articles.json",
            cache_size=3,
        )
    )


def _entry(key: str) -> dict[str, str]:
    return {"id": key, "title": f"title-{key}", "link": f"https://zenn.dev/{key}"}


def test_detect_writes_new_articles_and_outputs(
    runner: CliRunner, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    settings = _settings(tmp_path)
    settings.feed.cache_path.parent.mkdir(parents=True)
    settings.feed.cache_path.write_text(json.dumps(["old-1", "old-2", "a"]), encoding="utf-8")
    client = StubFeedClient(
        FeedDocument(title="Zenn", entries=[_entry("a"), _entry("b"), _entry("c")])
    )
    monkeypatch.setattr(feed, "get_settings", lambda: settings)
    monkeypatch.setattr(feed, "_create_feed_client", lambda _settings: client)
    github_output = tmp_path / "github_output"

    result = runner.invoke(
        app,
        [
            "feed",
            "detect",
            "--rss-url",
            "https://example.com/feed",
            "--github-output",
            str(github_output),
        ],
    )

    assert result.exit_code == 0
    assert client.urls == ["https://example.com/feed"]
    written = json.loads(settings.feed.output_path.read_text(encoding="utf-8"))
    assert [article["guid"] for article in written] == ["b", "c"]
    cache = json.loads(settings.feed.cache_path.read_text(encoding="utf-8"))
    assert cache == ["a", "b", "c"]
    assert github_output.read_text(encoding="utf-8") == (
        "has-new-articles=true\nnew-articles-count=2\n"
    )


def test_detect_without_new_articles(
    runner: CliRunner, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    settings = _settings(tmp_path)
    client = StubFeedClient(FeedDocument(title="Zenn", entries=[]))
    monkeypatch.setattr(feed, "get_settings", lambda: settings)
    monkeypatch.setattr(feed, "_create_feed_client", lambda _settings: client)
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
    monkeypatch.delenv("RSS_URL", raising=False)

    result = runner.invoke(app, ["feed", "detect"])

    assert result.exit_code == 0
    assert client.urls == ["https://zenn.dev/feed"]
    assert not settings.feed.output_path.exists()
    assert "has-new-articles=false" in result.stdout
    assert "new-articles-count=0" in result.stdout


def test_detect_fails_on_feed_error(
    runner: CliRunner, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    settings = _settings(tmp_path)
    client = StubFeedClient(error=FeedError("boom"))
    monkeypatch.setattr(feed, "get_settings", lambda: settings)
    monkeypatch.setattr(feed, "_create_feed_client", lambda _settings: client)

    result = runner.invoke(app, ["feed", "detect"])

    assert result.exit_code == 1
    assert "RSS の処理に失敗しました" in result.stdout
