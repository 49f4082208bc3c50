"""Command-line entry point: index the configured corpus and answer requests.

Examples:
  inverted-search
  inverted-search --config ./config.json --requests ./requests.json --answers ./answers.json
  INVERTED_SEARCH_LOG_LEVEL=debug inverted-search --json-logs
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys

from pydantic import ValidationError

from inverted_search.config import EngineConfig, Settings
from inverted_search.converter import ConverterJSON
from inverted_search.observability import configure_logging
from inverted_search.search.inverted_index import InvertedIndex
from inverted_search.search.search_server import SearchServer


logger = logging.getLogger(__name__)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inverted-search",
        description="Build an inverted index over the configured files and rank the requested queries",
    )
    parser.add_argument("--config", type=Path, help="Path to config.json (default: settings.config_path)")
    parser.add_argument("--requests", type=Path, help="Path to requests.json (default: settings.requests_path)")
    parser.add_argument("--answers", type=Path, help="Path to answers.json (default: settings.answers_path)")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        help="Root log level (default: settings.log_level)",
    )
    parser.add_argument("--json-logs", action="store_true", default=None, help="Emit structured JSON logs")
    parser.add_argument("--workers", type=int, help="Indexing worker threads (default: settings.index_workers)")
    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Overlay explicit CLI arguments on environment-derived settings."""
    overrides = {
        "config_path": args.config,
        "requests_path": args.requests,
        "answers_path": args.answers,
        "log_level": args.log_level,
        "json_logs": args.json_logs,
        "index_workers": args.workers,
    }
    return Settings(**{key: value for key, value in overrides.items() if value is not None})


def run(settings: Settings) -> int:
    try:
        config = EngineConfig.from_json_file(settings.config_path)
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        return 1
    except ValueError as exc:
        logger.error("Invalid config file %s: %s", settings.config_path, exc)
        return 1

    converter = ConverterJSON(config)
    converter.log_banner()

    try:
        requests = converter.get_requests(settings.requests_path)
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        return 1
    except ValueError as exc:
        logger.error("Invalid requests file %s: %s", settings.requests_path, exc)
        return 1

    index = InvertedIndex(max_workers=settings.index_workers)
    index.update_document_base(converter.get_text_documents())

    logger.info("Searching...")
    server = SearchServer(index, converter.get_responses_limit())
    answers = server.search(requests)
    if not answers:
        logger.info("No matches are found")
    converter.put_answers(answers, settings.answers_path)
    logger.info("End of search")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_argument_parser().parse_args(argv)
    try:
        settings = resolve_settings(args)
    except ValidationError as exc:
        configure_logging()
        logger.error("Invalid settings: %s", exc)
        return 1
    configure_logging(settings.log_level, settings.json_logs)
    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
