"""Unit tests for ranked batch search."""

import threading

import pytest

from inverted_search.search.analyzers import StandardAnalyzer
from inverted_search.search.inverted_index import InvertedIndex
from inverted_search.search.models import RelativeIndex
from inverted_search.search.search_server import SearchServer, round_rank


COFFEE_DOCUMENTS = [
    "milk milk milk milk water water water",
    "milk water water",
    "milk milk milk milk milk water water water water water",
    "americano cappuccino",
]


def _server(documents, max_responses=5) -> SearchServer:
    index = InvertedIndex()
    index.update_document_base(documents)
    return SearchServer(index, max_responses)


def _pairs(results: list[RelativeIndex]) -> list[tuple[int, float]]:
    return [r.as_pair() for r in results]


class TestSearch:
    """Ranking behaviour."""

    def test_london_example(self, london_documents):
        server = _server(london_documents)

        single, combined = server.search(["london", "london ben"])

        assert _pairs(single) == [(0, 1.0), (1, 1.0)]
        assert _pairs(combined) == [(1, 1.0), (0, 0.5)]

    def test_coffee_example(self):
        server = _server(COFFEE_DOCUMENTS)

        (milk_water, sugar) = server.search(["milk water", "sugar"])

        assert milk_water == [
            RelativeIndex(doc_id=2, rank=1.0),
            RelativeIndex(doc_id=0, rank=0.7),
            RelativeIndex(doc_id=1, rank=0.3),
        ]
        assert sugar == []

    def test_absolute_relevance_is_carried(self):
        server = _server(COFFEE_DOCUMENTS)

        (results,) = server.search(["milk water"])

        assert [r.absolute_relevance for r in results] == [10, 7, 3]

    def test_query_words_are_case_folded_and_deduplicated(self, london_documents):
        server = _server(london_documents)

        (results,) = server.search(["LONDON london Ben"])

        assert _pairs(results) == [(1, 1.0), (0, 0.5)]

    def test_top_result_has_rank_one_and_ranks_bounded(self):
        server = _server(COFFEE_DOCUMENTS + ["water", "cappuccino milk"])

        for results in server.search(["milk", "water cappuccino", "americano milk water"]):
            assert results[0].rank == 1.0
            assert all(0.0 <= r.rank <= 1.0 for r in results)

    def test_results_are_ordered(self):
        documents = ["a b", "a", "b", "a a", "c"]
        server = _server(documents, max_responses=10)

        (results,) = server.search(["a b"])

        for current, following in zip(results, results[1:]):
            assert current.rank >= following.rank
            if current.rank == following.rank:
                assert current.doc_id < following.doc_id
        assert _pairs(results) == [(0, 1.0), (3, 1.0), (1, 0.5), (2, 0.5)]

    def test_ranks_are_rounded_to_two_decimals(self):
        server = _server(["x x x", "x", "x x"])

        (results,) = server.search(["x"])

        assert _pairs(results) == [(0, 1.0), (2, 0.67), (1, 0.33)]

    def test_half_rank_rounds_up(self):
        server = _server(["w w w w w w w w", "w", "w w w"])

        (results,) = server.search(["w"])

        assert _pairs(results) == [(0, 1.0), (2, 0.38), (1, 0.13)]

    def test_results_list_per_query_in_order(self, london_documents):
        server = _server(london_documents)

        results = server.search(["ben", "nothing", "capital"])

        assert [_pairs(r) for r in results] == [[(1, 1.0)], [], [(0, 1.0)]]


class TestEmptyInput:
    """Empty batches and blank queries degrade to empty results."""

    def test_empty_batch(self, london_documents, caplog):
        server = _server(london_documents)

        with caplog.at_level("INFO"):
            assert server.search([]) == []
        assert "Requests are empty" in caplog.text

    def test_blank_query_does_not_abort_batch(self, london_documents, caplog):
        server = _server(london_documents)

        with caplog.at_level("INFO"):
            results = server.search(["london", "   ", "ben"])

        assert [_pairs(r) for r in results] == [[(0, 1.0), (1, 1.0)], [], [(1, 1.0)]]
        assert "Bad request" in caplog.text

    def test_search_against_empty_index(self):
        server = SearchServer(InvertedIndex())

        assert server.search(["london"]) == [[]]


class TestMaxResponses:
    """Result cap handling."""

    def test_default_is_five(self):
        assert SearchServer(InvertedIndex()).max_responses == 5

    def test_cap_truncates_tail(self):
        server = _server([f"word {n}" for n in range(10)])

        (results,) = server.search(["word"])

        assert _pairs(results) == [(0, 1.0), (1, 1.0), (2, 1.0), (3, 1.0), (4, 1.0)]

    def test_set_max_responses(self):
        server = _server([f"word {n}" for n in range(10)])
        server.set_max_responses(2)

        (results,) = server.search(["word"])

        assert _pairs(results) == [(0, 1.0), (1, 1.0)]

    def test_zero_cap_returns_empty_lists(self, london_documents):
        server = _server(london_documents, max_responses=0)

        assert server.search(["london"]) == [[]]

    def test_shorter_result_is_not_padded(self, london_documents):
        server = _server(london_documents, max_responses=50)

        (results,) = server.search(["ben"])

        assert len(results) == 1

    def test_negative_cap_rejected(self):
        server = SearchServer(InvertedIndex())

        with pytest.raises(ValueError, match="non-negative"):
            server.set_max_responses(-1)
        assert server.max_responses == 5

    def test_negative_cap_rejected_in_constructor(self):
        with pytest.raises(ValueError):
            SearchServer(InvertedIndex(), max_responses=-3)


class TestIndexSharing:
    """The server observes the index by reference."""

    def test_rebuild_is_visible_to_server(self, london_documents):
        index = InvertedIndex()
        index.update_document_base(london_documents)
        server = SearchServer(index)

        index.update_document_base(["ben ben", "london"])

        (results,) = server.search(["ben"])
        assert _pairs(results) == [(0, 1.0)]

    def test_search_during_rebuild_returns_empty(self, london_documents):
        release = threading.Event()
        started = threading.Event()

        class SlowAnalyzer:
            def __call__(self, text):
                started.set()
                release.wait(timeout=5)
                return StandardAnalyzer()(text)

        index = InvertedIndex(max_workers=1)
        index.update_document_base(london_documents)
        index._analyzer = SlowAnalyzer()
        server = SearchServer(index)

        rebuild = threading.Thread(target=index.update_document_base, args=(london_documents,))
        rebuild.start()
        try:
            assert started.wait(timeout=5)
            assert server.search(["london"]) == [[]]
        finally:
            release.set()
            rebuild.join(timeout=5)

        (results,) = server.search(["london"])
        assert _pairs(results) == [(0, 1.0), (1, 1.0)]

    def test_rebuild_started_mid_query_does_not_change_ranks(self, london_documents, monkeypatch):
        release = threading.Event()
        started = threading.Event()

        class SlowAnalyzer:
            def __call__(self, text):
                started.set()
                release.wait(timeout=5)
                return StandardAnalyzer()(text)

        index = InvertedIndex(max_workers=1)
        index.update_document_base(london_documents)
        index._analyzer = SlowAnalyzer()
        server = SearchServer(index)
        rebuild = threading.Thread(target=index.update_document_base, args=(["paris"],))
        take_snapshot = index.snapshot

        def snapshot_then_rebuild():
            current = take_snapshot()
            rebuild.start()
            assert started.wait(timeout=5)
            return current

        monkeypatch.setattr(index, "snapshot", snapshot_then_rebuild)
        try:
            (results,) = server.search(["london"])
            assert index.is_indexing
        finally:
            release.set()
            rebuild.join(timeout=5)

        assert _pairs(results) == [(0, 1.0), (1, 1.0)]
        assert index.generation == 2

    def test_each_query_reads_the_generation_current_at_its_start(self, london_documents, monkeypatch):
        index = InvertedIndex()
        index.update_document_base(london_documents)
        server = SearchServer(index)
        take_snapshot = index.snapshot
        calls = []

        def snapshot_and_rebuild_after_first():
            current = take_snapshot()
            calls.append(current.generation)
            if len(calls) == 1:
                index.update_document_base(["ben ben", "london"])
            return current

        monkeypatch.setattr(index, "snapshot", snapshot_and_rebuild_after_first)

        first, second = server.search(["ben", "ben"])

        assert calls == [1, 2]
        assert _pairs(first) == [(1, 1.0)]
        assert _pairs(second) == [(0, 1.0)]


@pytest.mark.parametrize(
    ("value", "expected"),
    [(1.0, 1.0), (0.5, 0.5), (0.125, 0.13), (1 / 3, 0.33), (2 / 3, 0.67), (0.0, 0.0)],
)
def test_round_rank(value, expected):
    assert round_rank(value) == expected
