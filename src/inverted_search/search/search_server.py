"""Batch query resolution with relative term-frequency ranking."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging
import math

from inverted_search.search.analyzers import Analyzer, StandardAnalyzer, unique_words
from inverted_search.search.inverted_index import IndexSnapshot, InvertedIndex
from inverted_search.search.models import RelativeIndex


logger = logging.getLogger(__name__)

DEFAULT_MAX_RESPONSES = 5


def round_rank(value: float) -> float:
    """Round half up to two decimal places."""
    return math.floor(value * 100 + 0.5) / 100


class SearchServer:
    """Resolve raw query strings against an :class:`InvertedIndex`.

    The index is held by reference, so a rebuild performed by its owner is
    visible to the next ``search`` call. Each query reads one snapshot of the
    index taken when the query starts.
    """

    def __init__(
        self,
        index: InvertedIndex,
        max_responses: int = DEFAULT_MAX_RESPONSES,
        *,
        analyzer: Analyzer | None = None,
    ) -> None:
        self._index = index
        self._analyzer = analyzer or StandardAnalyzer()
        self.max_responses = DEFAULT_MAX_RESPONSES
        self.set_max_responses(max_responses)

    def set_max_responses(self, max_responses: int) -> None:
        if max_responses < 0:
            raise ValueError(f"max_responses must be non-negative, got {max_responses}")
        self.max_responses = max_responses

    def search(self, queries: Sequence[str]) -> list[list[RelativeIndex]]:
        """Return one ranked, capped result list per query, in input order."""
        if not queries:
            logger.info("Requests are empty")
            return []

        results: list[list[RelativeIndex]] = []
        for query in queries:
            words = unique_words(query, self._analyzer)
            if not words:
                logger.info("Bad request: %r has no words", query)
                results.append([])
                continue
            snapshot = self._index.snapshot()
            if snapshot is None:
                results.append([])
                continue
            results.append(self._search_one(words, snapshot))
        return results

    def _search_one(self, words: set[str], snapshot: IndexSnapshot) -> list[RelativeIndex]:
        words_entries = self._sort_words_ascending(self._get_words_entries(words, snapshot))
        doc_ids = self._get_documents_with_words((word for word, _ in words_entries), snapshot)
        logger.debug(
            "Found %d candidate documents for %d words (generation %d)", len(doc_ids), len(words), snapshot.generation
        )

        absolute = {doc_id: self._absolute_relevance(doc_id, words, snapshot) for doc_id in doc_ids}
        max_absolute = max(absolute.values(), default=0)

        ranked = []
        for doc_id, relevance in absolute.items():
            rank = round_rank(relevance / max_absolute) if max_absolute > 0 else 0.0
            ranked.append(RelativeIndex(doc_id=doc_id, rank=rank, absolute_relevance=relevance))
        ranked.sort()
        return ranked[: self.max_responses]

    @staticmethod
    def _get_words_entries(words: Iterable[str], snapshot: IndexSnapshot) -> list[tuple[str, int]]:
        return [(word, sum(entry.count for entry in snapshot.get_word_count(word))) for word in words]

    @staticmethod
    def _sort_words_ascending(words_entries: list[tuple[str, int]]) -> list[tuple[str, int]]:
        # Rarest words first; this is the scan order for candidate collection.
        return sorted(words_entries, key=lambda pair: pair[1])

    @staticmethod
    def _get_documents_with_words(words: Iterable[str], snapshot: IndexSnapshot) -> list[int]:
        doc_ids: set[int] = set()
        for word in words:
            doc_ids.update(entry.doc_id for entry in snapshot.get_word_count(word))
        return sorted(doc_ids)

    @staticmethod
    def _absolute_relevance(doc_id: int, words: Iterable[str], snapshot: IndexSnapshot) -> int:
        return sum(snapshot.get_word_count_in_doc(word, doc_id) for word in words)
