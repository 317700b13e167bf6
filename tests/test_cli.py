# File: tests/test_cli.py
"""Tests for the CLI (`page_crawler.cli`) using click.testing.CliRunner.
They cover `crawl`, `config`, `--version` and error handling.
"""
import asyncio
import importlib
import json

import pytest
from click.testing import CliRunner

from page_crawler.cli import cli
from page_crawler.crawler.models import CrawlResult, StatsSample
from page_crawler.errors import Failure, FailureKind, SinkUnavailableError

# The package re-exports the `cli` Group under the same name as the submodule,
# so fetch the module object itself from the import system.
cli_module = importlib.import_module("page_crawler.cli")


@pytest.fixture(autouse=True)
def patch_start_crawl(monkeypatch):
    """Patch start_crawl to return a canned result without crawling."""
    calls = []
    result = CrawlResult(
        total_enqueued=42,
        frontier_size=30,
        visited_size=12,
        pages_parsed=11,
        fetch_failures=1,
        samples=[StatsSample(0.0, 0, 0.0), StatsSample(1.0, 12, 0.4)],
    )

    async def fake_crawl(cfg):
        calls.append(cfg)
        return result

    monkeypatch.setattr(cli_module, "start_crawl", fake_crawl)
    return calls


@pytest.fixture()
def cfg_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "seed_urls": ["https://example.com/"],
                "max_pages": 50,
                "mongodb_uri": "mongodb://user:secret@db",
            }
        ),
        encoding="utf-8",
    )
    return path


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "PageCrawler" in result.output


def test_show_config_masks_uri(cfg_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["seed_urls"] == ["https://example.com/"]
    assert data["max_pages"] == 50
    assert data["mongodb_uri"] == "***"
    assert "secret" not in result.output


def test_crawl_prints_summary(cfg_file, patch_start_crawl):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "crawl"])
    assert result.exit_code == 0
    assert "Total queued: 42" in result.output
    assert "To be crawled (Queue) size: 30" in result.output
    assert "Crawled size: 12" in result.output
    assert "pages crawled per minute" in result.output
    assert "1.000000 12" in result.output
    assert "Crawled to queue ratio per minute" in result.output
    assert patch_start_crawl[0].max_pages == 50


def test_crawl_options_override_config(cfg_file, patch_start_crawl):
    runner = CliRunner()
    result = runner.invoke(
        cli,
        [
            "--config", str(cfg_file), "crawl",
            "--seed", "http://a.example/", "--seed", "http://b.example/",
            "--limit", "5", "--concurrency", "3",
        ],
    )
    assert result.exit_code == 0
    cfg = patch_start_crawl[0]
    assert cfg.seed_urls == ["http://a.example/", "http://b.example/"]
    assert cfg.max_pages == 5
    assert cfg.concurrency == 3


def test_invalid_seed_option(cfg_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "crawl", "--seed", "/relative"])
    assert result.exit_code == 1


def test_crawl_json_file(cfg_file, tmp_path):
    out = tmp_path / "out" / "crawl.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "crawl", "--json", str(out)])
    assert result.exit_code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["total_enqueued"] == 42
    assert data["samples"][1] == {
        "elapsed_minutes": 1.0,
        "visited_count": 12,
        "visited_over_frontier_ratio": 0.4,
    }


def test_crawl_timeout(monkeypatch, cfg_file):
    async def slow(cfg):
        await asyncio.sleep(2)

    monkeypatch.setattr(cli_module, "start_crawl", slow)

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "crawl", "--crawl-timeout", "0.2"])
    assert result.exit_code == 1
    assert "did not finish" in result.output


def test_fatal_sink_error(monkeypatch, cfg_file):
    async def refuse(cfg):
        raise SinkUnavailableError(Failure(FailureKind.SINK_UNAVAILABLE, "ping failed", fatal=True))

    monkeypatch.setattr(cli_module, "start_crawl", refuse)

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "crawl"])
    assert result.exit_code == 1
    assert "ping failed" in result.output


def test_bad_config_file(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("max_pages: -1", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(bad), "config"])
    assert result.exit_code == 1
    assert "Failed to load configuration" in result.output
