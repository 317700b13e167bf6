# File: tests/test_stats.py
import asyncio

import pytest

from page_crawler.crawler.frontier import Frontier
from page_crawler.crawler.models import StatsSample
from page_crawler.crawler.visited import VisitedSet
from page_crawler.stats import StatsCollector, render_series


def make_collector(interval: float = 60.0) -> StatsCollector:
    return StatsCollector(Frontier(), VisitedSet(), interval)


def test_ratio_is_zero_when_frontier_is_empty():
    collector = make_collector()
    collector.visited.add("http://a/")

    sample = collector.sample()
    assert sample.visited_count == 1
    assert sample.visited_over_frontier_ratio == 0.0


def test_ratio_is_visited_over_frontier():
    collector = make_collector()
    for i in range(3):
        collector.visited.add(f"http://v/{i}")
    for i in range(2):
        collector.frontier.enqueue(f"http://f/{i}")

    assert collector.sample().visited_over_frontier_ratio == pytest.approx(1.5)


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        make_collector(interval=0)


@pytest.mark.asyncio()
async def test_ticks_until_stopped():
    collector = make_collector(interval=0.05)
    collector.start()
    await asyncio.sleep(0.3)
    await collector.stop()
    count = len(collector.samples)

    assert collector.samples[0] == StatsSample(0.0, 0, 0.0)
    assert count >= 3
    await asyncio.sleep(0.15)
    assert len(collector.samples) == count


@pytest.mark.asyncio()
async def test_stop_is_prompt():
    collector = make_collector(interval=60.0)
    collector.start()
    await asyncio.wait_for(collector.stop(), timeout=1.0)
    assert len(collector.samples) == 1


@pytest.mark.asyncio()
async def test_cannot_start_twice():
    collector = make_collector(interval=60.0)
    collector.start()
    with pytest.raises(RuntimeError):
        collector.start()
    await collector.stop()


def test_render_series_aligns_both_series():
    samples = [StatsSample(0.0, 0, 0.0), StatsSample(1.0, 10, 2.5)]
    text = render_series(samples)

    assert text.startswith("pages crawled per minute\n0.000000 0\n1.000000 10\n")
    assert "Crawled to queue ratio per minute\n0.000000 0.000000\n1.000000 2.500000\n" in text
