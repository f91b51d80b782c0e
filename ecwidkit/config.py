"""Configuration for the Ecwid API client and command-line tool."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from typing import Any

DEFAULT_BASE_URL = "https://app.ecwid.com/api/v3"
DEFAULT_OUTPUT = "json"
DEFAULT_LOG_LEVEL = "info"

VALID_OUTPUTS = frozenset({"json", "table"})
VALID_LOG_LEVELS = frozenset({"debug", "info", "warn", "error"})


class ConfigError(ValueError):
    """Raised when a configuration fails validation."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__("config validation: " + "; ".join(self.problems))


@dataclass
class Config:
    """All settings for the Ecwid client and CLI."""

    store_id: str = ""
    token: str = ""
    base_url: str = ""
    output: str = ""
    log_level: str = ""
    max_retries: int = 0

    def validate(self) -> None:
        """Raise ConfigError listing every problem found."""
        problems: list[str] = []
        if not self.store_id:
            problems.append("store_id is required")
        if not self.token:
            problems.append("token is required")
        if self.output and self.output not in VALID_OUTPUTS:
            problems.append(
                f'invalid output format "{self.output}" (must be json or table)'
            )
        if self.log_level and self.log_level not in VALID_LOG_LEVELS:
            problems.append(
                f'invalid log level "{self.log_level}" '
                "(must be debug, info, warn, or error)"
            )
        if self.max_retries < 0:
            problems.append("max_retries must be >= 0")
        if problems:
            raise ConfigError(problems)

    def with_defaults(self) -> Config:
        """Return a copy with defaults filled into empty fields."""
        return dataclasses.replace(
            self,
            base_url=self.base_url or DEFAULT_BASE_URL,
            output=self.output or DEFAULT_OUTPUT,
            log_level=self.log_level or DEFAULT_LOG_LEVEL,
        )

    def redacted_token(self) -> str:
        """Return the token with all but its last four characters masked."""
        if len(self.token) <= 4:
            return "****"
        return "*" * (len(self.token) - 4) + self.token[-4:]

    def to_dict(self) -> dict[str, Any]:
        """Return a serialisable mapping with the token redacted."""
        data: dict[str, Any] = {"store_id": self.store_id}
        if self.base_url:
            data["base_url"] = self.base_url
        if self.output:
            data["output"] = self.output
        if self.log_level:
            data["log_level"] = self.log_level
        if self.max_retries:
            data["max_retries"] = self.max_retries
        data["token"] = self.redacted_token()
        return data

    def to_json(self) -> str:
        """Return compact JSON with the token redacted."""
        return json.dumps(self.to_dict(), separators=(",", ":"))