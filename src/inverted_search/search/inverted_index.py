"""Inverted index mapping words to per-document occurrence counts.

A rebuild tokenizes every document on a bounded thread pool. Each worker
counts words for its own document with no shared state, then merges those
counts into the new word table under a single lock that covers the merge
only. Readers never wait on a rebuild: while one is running they get empty
results straight away.

A completed build is published as one :class:`IndexSnapshot`. Callers that
need several consistent reads take a snapshot once and read from it.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import logging
import threading

from inverted_search.search.analyzers import Analyzer, StandardAnalyzer, count_words
from inverted_search.search.models import Entry


logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


@dataclass(frozen=True, slots=True)
class IndexSnapshot:
    """One completed index generation; never mutated after publication."""

    generation: int = 0
    documents: Mapping[int, str] = field(default_factory=dict)
    frequency_dictionary: Mapping[str, list[Entry]] = field(default_factory=dict)

    def get_word_count(self, word: str) -> list[Entry]:
        return list(self.frequency_dictionary.get(word, ()))

    def get_word_count_in_doc(self, word: str, doc_id: int) -> int:
        entries = self.frequency_dictionary.get(word)
        if entries is None:
            logger.debug('Word "%s" not found', word)
            return 0
        return sum(entry.count for entry in entries if entry.doc_id == doc_id)


class InvertedIndex:
    """Frequency dictionary for the most recently completed document base."""

    def __init__(self, *, max_workers: int = DEFAULT_MAX_WORKERS, analyzer: Analyzer | None = None) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.max_workers = max_workers
        self._analyzer = analyzer or StandardAnalyzer()
        self._current = IndexSnapshot()
        self._merge_lock = threading.Lock()
        self._rebuild_lock = threading.Lock()
        self._indexing = False

    @property
    def is_indexing(self) -> bool:
        return self._indexing

    @property
    def generation(self) -> int:
        """Number of rebuilds completed so far."""
        return self._current.generation

    @property
    def documents(self) -> dict[int, str]:
        return dict(self._current.documents)

    @property
    def word_index(self) -> dict[str, list[Entry]]:
        """Copy of the word table; entry lists are copies."""
        return {word: list(entries) for word, entries in self._current.frequency_dictionary.items()}

    def __len__(self) -> int:
        return len(self._current.frequency_dictionary)

    def snapshot(self) -> IndexSnapshot | None:
        """Return the latest completed generation, or None while a rebuild runs."""
        if self._indexing:
            logger.info("Index is ongoing, please repeat the request later")
            return None
        return self._current

    def update_document_base(self, documents: Sequence[str]) -> None:
        """Replace the index with one built from ``documents``.

        Document ids are positions in ``documents``. An empty sequence leaves
        the current index in place.
        """
        if not documents:
            logger.warning("Indexing: no content in docs content base")
            return

        with self._rebuild_lock:
            self._indexing = True
            try:
                staging: dict[str, list[Entry]] = {}
                workers = min(self.max_workers, len(documents))
                with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="indexer") as executor:
                    futures = [
                        executor.submit(self._index_document, content, doc_id, staging)
                        for doc_id, content in enumerate(documents)
                    ]
                    for future in futures:
                        future.result()
                self._current = IndexSnapshot(
                    generation=self._current.generation + 1,
                    documents=dict(enumerate(documents)),
                    frequency_dictionary=staging,
                )
            finally:
                self._indexing = False

        logger.info(
            "Indexed %d documents, %d distinct words (generation %d)",
            len(documents),
            len(self._current.frequency_dictionary),
            self._current.generation,
        )

    def get_word_count(self, word: str) -> list[Entry]:
        """Return every entry for ``word`` in insertion order."""
        current = self.snapshot()
        if current is None:
            return []
        return current.get_word_count(word)

    def get_word_count_in_doc(self, word: str, doc_id: int) -> int:
        """Return how many times ``word`` occurs in document ``doc_id``."""
        current = self.snapshot()
        if current is None:
            return 0
        return current.get_word_count_in_doc(word, doc_id)

    def _index_document(self, content: str, doc_id: int, staging: dict[str, list[Entry]]) -> None:
        word_counts = count_words(content, self._analyzer)
        self._merge(word_counts, doc_id, staging)

    def _merge(self, word_counts: Mapping[str, int], doc_id: int, staging: dict[str, list[Entry]]) -> None:
        with self._merge_lock:
            for word, count in word_counts.items():
                staging.setdefault(word, []).append(Entry(doc_id=doc_id, count=count))
