"""
Search indexing and query engine package.

This package provides a pure-Python search stack:
- models: Entry and RelativeIndex value objects
- analyzers: Whitespace tokenizer and lowercase filter
- inverted_index: Word -> per-document frequency store
- search_server: Ranked batch query resolution
"""
