"""JSON adapter between the search core and its input/output files."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from pathlib import Path
from typing import Any

import orjson

from inverted_search.config import EngineConfig, RequestsFile
from inverted_search.search.models import RelativeIndex


logger = logging.getLogger(__name__)


class ConverterJSON:
    """Read documents and requests, write ranked answers."""

    def __init__(self, config: EngineConfig) -> None:
        self.config = config

    def log_banner(self) -> None:
        logger.info("[Initialization] %s", self.config.config.name)
        logger.info("Version: %s", self.config.config.version)
        logger.info("Max responses per request: %d", self.config.max_responses)
        logger.info("Files library: %d", len(self.config.files))

    def get_text_documents(self) -> list[str]:
        """Return the contents of every readable file listed in the config.

        Missing, unreadable or non-UTF-8 files are logged and skipped, so ids
        stay positional over what was read.
        """
        documents: list[str] = []
        for raw_path in self.config.files:
            path = Path(raw_path)
            try:
                documents.append(path.read_text(encoding="utf-8"))
            except FileNotFoundError:
                logger.error("File content reading: file not found %s", path)
            except (OSError, UnicodeDecodeError) as exc:
                logger.error("File content reading: cannot read %s: %s", path, exc)
        logger.info("Input docs read: %d of %d files", len(documents), len(self.config.files))
        return documents

    def get_responses_limit(self) -> int:
        return self.config.max_responses

    def get_requests(self, path: Path) -> list[str]:
        requests = RequestsFile.from_json_file(path).requests
        logger.info("%d %s found", len(requests), "request is" if len(requests) == 1 else "requests are")
        return requests

    def build_answers(self, answers: Sequence[Sequence[RelativeIndex]]) -> dict[str, Any]:
        """Shape ranked results into the ``answers.json`` document."""
        payload: dict[str, Any] = {}
        for number, request in enumerate(answers):
            hits = list(request)[: self.config.max_responses]
            entry: dict[str, Any] = {"result": bool(hits)}
            if len(hits) == 1:
                entry["docid"] = hits[0].doc_id
                entry["rank"] = round(hits[0].rank, 2)
            elif hits:
                entry["relevance"] = [{"docid": hit.doc_id, "rank": round(hit.rank, 2)} for hit in hits]
            payload[f"request{number}"] = entry
        return {"answers": payload}

    def put_answers(self, answers: Sequence[Sequence[RelativeIndex]], path: Path) -> bool:
        """Write ``answers.json``; returns False when there was nothing to write."""
        if not answers:
            logger.info("No answers to push")
            return False
        path.write_bytes(orjson.dumps(self.build_answers(answers), option=orjson.OPT_INDENT_2))
        logger.info("Answers written to %s", path)
        return True
