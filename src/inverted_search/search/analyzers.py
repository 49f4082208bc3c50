"""Analyzer utilities for the in-memory search stack.

Documents and queries go through the same pipeline: split on whitespace,
then lowercase every token. No stemming or stopword removal is applied, so a
token matches only its exact lowercase form.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class Token:
    """Represents a token emitted by analyzers."""

    text: str
    position: int

    def copy_with(self, text: str) -> Token:
        return Token(text=text, position=self.position)


class Analyzer(Protocol):
    """Protocol implemented by analyzers."""

    def __call__(self, text: str) -> list[Token]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class WhitespaceTokenizer:
    """Tokenizer that yields maximal runs of non-whitespace characters."""

    def __call__(self, text: str) -> Iterator[Token]:
        for position, word in enumerate(text.split()):
            yield Token(text=word, position=position)


class LowercaseFilter:
    """Filter that lowercases token text."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if token.text.islower():
                yield token
            else:
                yield token.copy_with(text=token.text.lower())


class StandardAnalyzer:
    """Whitespace tokenization followed by lowercasing."""

    def __init__(self, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = WhitespaceTokenizer()
        self.filters: list[TokenFilter] = list(filters) if filters is not None else [LowercaseFilter()]

    def __call__(self, text: str) -> list[Token]:
        stream: Iterable[Token] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        return list(stream)


def count_words(text: str, analyzer: Analyzer | None = None) -> Counter[str]:
    """Return per-word occurrence counts for a single document."""
    active = analyzer or StandardAnalyzer()
    return Counter(token.text for token in active(text))


def unique_words(text: str, analyzer: Analyzer | None = None) -> set[str]:
    """Return the set of distinct words in a query string."""
    active = analyzer or StandardAnalyzer()
    return {token.text for token in active(text)}
