# File: tests/test_frontier.py
import threading

from page_crawler.crawler.frontier import Frontier


def drain(frontier: Frontier) -> list[str]:
    out = []
    while True:
        url, ok = frontier.try_dequeue()
        if not ok:
            return out
        out.append(url)


def test_fifo_order():
    frontier = Frontier()
    urls = [f"http://example.com/{i}" for i in range(50)]
    for url in urls:
        frontier.enqueue(url)

    assert drain(frontier) == urls


def test_try_dequeue_on_empty_reports_not_ok():
    frontier = Frontier()
    assert frontier.try_dequeue() == ("", False)

    frontier.enqueue("http://a/")
    assert frontier.try_dequeue() == ("http://a/", True)
    assert frontier.try_dequeue() == ("", False)
    assert frontier.size() == 0


def test_size_matches_enqueued_minus_dequeued():
    frontier = Frontier()
    ops = ["e", "e", "d", "e", "d", "d", "d", "e", "e", "e", "d"]
    for i, op in enumerate(ops):
        if op == "e":
            frontier.enqueue(f"http://x/{i}")
        else:
            frontier.try_dequeue()
        assert frontier.size() == frontier.total_enqueued - frontier.total_dequeued

    assert frontier.total_enqueued == 6
    assert len(frontier) == 1


def test_empty_dequeue_does_not_count():
    frontier = Frontier()
    frontier.try_dequeue()
    assert frontier.total_dequeued == 0


def test_concurrent_producers_and_consumers_lose_nothing():
    frontier = Frontier()
    producers, per_producer = 8, 500
    taken: list[str] = []
    taken_lock = threading.Lock()
    start = threading.Barrier(producers + 4)

    def produce(n: int) -> None:
        start.wait()
        for i in range(per_producer):
            frontier.enqueue(f"http://p{n}/{i}")

    def consume() -> None:
        start.wait()
        for _ in range(per_producer):
            url, ok = frontier.try_dequeue()
            if ok:
                with taken_lock:
                    taken.append(url)

    threads = [threading.Thread(target=produce, args=(n,)) for n in range(producers)]
    threads += [threading.Thread(target=consume) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    rest = drain(frontier)
    everything = taken + rest
    assert len(everything) == producers * per_producer
    assert len(set(everything)) == producers * per_producer
    assert frontier.total_enqueued == producers * per_producer
    assert frontier.size() == 0
