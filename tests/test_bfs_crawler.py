"""
Traversal tests for the BFS crawler using fake renderers and sinks
"""

import asyncio

import pytest

from linkharvest import BFSCrawler, CancellationToken, ConfigError, SinkError, run_crawl
from linkharvest.crawler import VisitState
from linkharvest.errors import RenderError
from linkharvest.utils import ErrorHandler, ErrorType, RateLimiter

from conftest import FakeRenderer, FakeSink

A = "https://site.test/a"
B = "https://site.test/b"
C = "https://site.test/c"
D = "https://site.test/d"
E = "https://site.test/e"


def crawl(graph, max_depth=3, sink=None, **kwargs):
    renderer = kwargs.pop('renderer', None) or FakeRenderer(graph)
    sink = sink or FakeSink()
    urls = asyncio.run(run_crawl(A, max_depth, renderer, sink, politeness_delay=0, **kwargs))
    return urls, renderer, sink


def make_crawler(renderer, max_depth=3, sink=None, **kwargs):
    kwargs.setdefault('rate_limiter', RateLimiter(default_delay=0))
    return BFSCrawler(A, max_depth, renderer, sink or FakeSink(), **kwargs)


def test_breadth_first_order():
    urls, _, sink = crawl({A: [B, C], B: [D]}, max_depth=2)
    assert urls == [A, B, C, D]
    assert sink.writes == [[A, B, C, D]]


def test_links_beyond_max_depth_are_not_followed():
    graph = {A: [B], B: [C], C: [D]}
    urls, renderer, _ = crawl(graph, max_depth=1)
    assert urls == [A, B]
    assert renderer.calls == [A, B]


def test_max_depth_zero_visits_only_the_seed():
    urls, renderer, _ = crawl({A: [B, C]}, max_depth=0)
    assert urls == [A]
    assert renderer.calls == [A]


def test_nodes_at_max_depth_are_recorded():
    urls, _, _ = crawl({A: [B], B: [C]}, max_depth=1)
    assert B in urls
    assert C not in urls


def test_each_url_rendered_once_and_recorded_once():
    graph = {A: [B, C, B], B: [C, A], C: [B, A]}
    urls, renderer, _ = crawl(graph, max_depth=5)
    assert urls == [A, B, C]
    assert sorted(renderer.calls) == sorted(set(renderer.calls))


def test_cycle_terminates():
    urls, renderer, _ = crawl({A: [B], B: [A]}, max_depth=5)
    assert urls == [A, B]
    assert renderer.calls == [A, B]


def test_self_loop_terminates():
    urls, _, _ = crawl({A: [A, B], B: [B]}, max_depth=5)
    assert urls == [A, B]


def test_duplicate_frontier_entries_are_discarded():
    # C is queued from A and again from B before it is visited
    renderer = FakeRenderer({A: [B, C], B: [C]})
    crawler = make_crawler(renderer, max_depth=2)
    result = asyncio.run(crawler.crawl())

    assert result.urls == [A, B, C]
    assert result.duplicates_discarded == 1
    assert renderer.calls.count(C) == 1

    states = [(v.url, v.state) for v in result.visits]
    assert states == [
        (A, VisitState.SUCCEEDED),
        (B, VisitState.SUCCEEDED),
        (C, VisitState.SUCCEEDED),
        (C, VisitState.DISCARDED),
    ]
    assert [v.url for v in result.attempted] == [A, B, C]


def test_url_visited_at_depth_of_first_discovery():
    renderer = FakeRenderer({A: [B, C], B: [D], C: [D]})
    result = asyncio.run(make_crawler(renderer, max_depth=2).crawl())

    depths = {v.url: v.depth for v in result.visits}
    assert depths == {A: 0, B: 1, C: 1, D: 2}


def test_failed_page_does_not_stop_the_crawl():
    renderer = FakeRenderer({A: [B, C], B: [E], C: [D]}, failing=[B])
    urls, _, sink = crawl(None, max_depth=3, renderer=renderer)

    assert urls == [A, C, D]
    assert E not in renderer.calls
    assert sink.writes == [[A, C, D]]


def test_failed_page_is_not_retried():
    renderer = FakeRenderer({A: [B, C], C: [B]}, failing=[B])
    urls, _, _ = crawl(None, max_depth=3, renderer=renderer)

    assert urls == [A, C]
    assert renderer.calls.count(B) == 1


def test_failed_visit_is_recorded():
    renderer = FakeRenderer({A: [B]}, failing=[B])
    result = asyncio.run(make_crawler(renderer).crawl())

    states = {v.url: v.state for v in result.visits}
    assert states == {A: VisitState.SUCCEEDED, B: VisitState.FAILED}
    assert result.failed_urls == [B]
    assert result.visits[1].error == "navigation timeout"


def test_seed_failure_still_writes_empty_result():
    renderer = FakeRenderer({}, failing=[A])
    urls, _, sink = crawl(None, renderer=renderer)
    assert urls == []
    assert sink.writes == [[]]


def test_error_listener_receives_failures():
    failures = []
    renderer = FakeRenderer({A: [B, C]}, errors={
        B: RenderError(B, asyncio.TimeoutError()),
        C: RenderError(C, status_code=503, message="HTTP 503"),
    })
    crawl(None, renderer=renderer, on_error=failures.append)

    assert [f.url for f in failures] == [B, C]
    assert failures[0].error_type is ErrorType.NETWORK_TIMEOUT
    assert failures[0].depth == 1
    assert failures[1].error_type is ErrorType.HTTP_SERVER_ERROR
    assert failures[1].status_code == 503


def test_relative_and_non_http_links_are_dropped():
    links = ["/path", "mailto:x@y.com", "javascript:void(0)", "ftp://files.test/x",
             "#top", "", "https://other.test/"]
    urls, renderer, _ = crawl({A: links}, max_depth=2)

    assert renderer.calls == [A, "https://other.test/"]
    assert urls == [A, "https://other.test/"]


def test_filtered_links_are_counted():
    renderer = FakeRenderer({A: ["/relative", "mailto:x@y.com", B]})
    result = asyncio.run(make_crawler(renderer).crawl())
    assert result.links_filtered == 2
    assert result.visits[0].links_found == 3
    assert result.visits[0].links_enqueued == 1


def test_urls_are_not_normalized():
    fragment = A + "#section"
    query = A + "?page=2"
    urls, _, _ = crawl({A: [fragment, query]}, max_depth=1)
    assert urls == [A, fragment, query]


def test_sink_failure_propagates():
    renderer = FakeRenderer({A: [B]})
    sink = FakeSink(fail=True)

    with pytest.raises(SinkError):
        asyncio.run(run_crawl(A, 2, renderer, sink, politeness_delay=0))

    assert sink.writes == [[A, B]]
    assert renderer.closed == 1


def test_renderer_released_after_successful_crawl():
    _, renderer, _ = crawl({A: [B]})
    assert renderer.started == 1
    assert renderer.closed == 1


def test_renderer_released_when_loop_fails():
    renderer = FakeRenderer({A: [B]}, errors={B: RuntimeError("renderer bug")})
    sink = FakeSink()

    with pytest.raises(RuntimeError):
        asyncio.run(run_crawl(A, 2, renderer, sink, politeness_delay=0))

    assert renderer.closed == 1
    assert sink.writes == []


def test_cancellation_flushes_collected_urls():
    token = CancellationToken()

    def cancel_after_b(url):
        if url == B:
            token.cancel("test")

    renderer = FakeRenderer({A: [B, C], B: [D]}, on_visit=cancel_after_b)
    sink = FakeSink()
    result = asyncio.run(make_crawler(renderer, sink=sink, cancel_token=token).crawl())

    assert result.cancelled
    assert result.urls == [A, B]
    assert sink.writes == [[A, B]]
    assert renderer.calls == [A, B]
    assert renderer.closed == 1


def test_cancellation_cuts_politeness_delay_short():
    token = CancellationToken()
    limiter = RateLimiter(default_delay=30)
    renderer = FakeRenderer({A: [B, C]}, on_visit=lambda url: token.cancel("test"))

    async def scenario():
        crawler = make_crawler(renderer, rate_limiter=limiter, cancel_token=token)
        return await asyncio.wait_for(crawler.crawl(), timeout=5)

    result = asyncio.run(scenario())

    assert result.cancelled
    assert result.urls == [A]
    assert limiter.wait_count == 1
    assert limiter.total_wait < 1


def test_politeness_delay_applied_between_visits():
    limiter = RateLimiter(default_delay=0.01)
    renderer = FakeRenderer({A: [B, C]}, failing=[B])
    asyncio.run(make_crawler(renderer, rate_limiter=limiter).crawl())

    # After A and after the failed B; nothing is left after C
    assert limiter.wait_count == 2
    assert limiter.total_wait == pytest.approx(0.02)


def test_crawl_state_is_fresh_on_each_run():
    renderer = FakeRenderer({A: [B]})
    crawler = make_crawler(renderer)

    first = asyncio.run(crawler.crawl())
    second = asyncio.run(crawler.crawl())

    assert first.urls == second.urls == [A, B]
    assert renderer.started == 2


def test_sink_path_reported_in_result():
    result = asyncio.run(make_crawler(FakeRenderer({})).crawl())
    assert result.output_path == "memory.csv"


def test_shared_error_handler_collects_history():
    handler = ErrorHandler()
    renderer = FakeRenderer({A: [B, C]}, failing=[B, C])
    asyncio.run(make_crawler(renderer, error_handler=handler).crawl())

    assert handler.get_failed_urls() == [B, C]
    assert handler.get_error_summary()["total_errors"] == 2


@pytest.mark.parametrize("seed, depth", [("", 1), (A, -1), (A, 1.5), (A, True)])
def test_invalid_arguments_rejected(seed, depth):
    with pytest.raises(ConfigError):
        BFSCrawler(seed, depth, FakeRenderer(), FakeSink())
