"""In-memory inverted index and ranked query engine."""

from inverted_search.search.inverted_index import InvertedIndex
from inverted_search.search.models import Entry, RelativeIndex
from inverted_search.search.search_server import SearchServer


__all__ = ["Entry", "InvertedIndex", "RelativeIndex", "SearchServer"]

__version__ = "0.1.0"
