"""Configuration for inverted-search.

Process settings come from environment variables via Pydantic Settings. The
document corpus and response limit come from ``config.json``, validated by
:class:`EngineConfig`; query strings come from ``requests.json``.

Example ``config.json``:
    {
        "config": {
            "name": "SkillboxSearchEngine",
            "version": "0.1",
            "max_responses": 5
        },
        "files": [
            "resources/file001.txt",
            "resources/file002.txt"
        ]
    }
"""

from pathlib import Path
from typing import Annotated, Any

import orjson
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_json(path: Path, label: str) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"{label} not found: {path}")
    return orjson.loads(path.read_bytes())


class Settings(BaseSettings):
    """Strictly typed process settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="INVERTED_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    config_path: Path = Field(default=Path("config.json"), description="Path to the engine configuration file")
    requests_path: Path = Field(default=Path("requests.json"), description="Path to the search requests file")
    answers_path: Path = Field(default=Path("answers.json"), description="Path the ranked answers are written to")

    log_level: str = Field(default="info", pattern=r"^(debug|info|warning|error|critical)$", description="Log level")
    json_logs: bool = Field(default=False, description="Emit structured JSON logs")

    index_workers: int = Field(default=4, ge=1, description="Worker threads used to tokenize documents")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class ApplicationConfig(BaseModel):
    """The ``config`` section of ``config.json``."""

    model_config = {"extra": "ignore"}

    name: Annotated[str, Field(description="Application name shown at start-up")] = "SearchEngine"
    version: Annotated[str, Field(description="Application version shown at start-up")] = "0.1"
    max_responses: Annotated[
        int,
        Field(ge=0, description="Maximum ranked documents returned per request"),
    ] = 5


class EngineConfig(BaseModel):
    """Validated contents of ``config.json``."""

    config: ApplicationConfig
    files: Annotated[
        list[str],
        Field(description="Document paths; a document's id is its position in this list"),
    ] = Field(default_factory=list)

    @property
    def max_responses(self) -> int:
        return self.config.max_responses

    @classmethod
    def from_json_file(cls, path: Path) -> "EngineConfig":
        """Load configuration from JSON file.

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        return cls.model_validate(_load_json(path, "Config file"))


class RequestsFile(BaseModel):
    """Validated contents of ``requests.json``."""

    requests: list[str] = Field(default_factory=list)

    @classmethod
    def from_json_file(cls, path: Path) -> "RequestsFile":
        return cls.model_validate(_load_json(path, "Requests file"))
