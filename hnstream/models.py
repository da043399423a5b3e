import json
from dataclasses import dataclass
from enum import Enum

from hnstream.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class StoryRecord:
    by: str
    title: str
    url: str = ""

    @classmethod
    def from_json(cls, body: str) -> "StoryRecord":
        """Parse an upstream item body into a record.

        Deleted and dead items carry no author or title; those render empty.
        """
        data = json.loads(body)
        if not isinstance(data, dict):
            raise ValueError(f"Story body is not a JSON object: {body[:80]!r}")
        return cls(
            by=data.get("by") or "",
            title=data.get("title") or "",
            url=data.get("url") or "",
        )


class OutputMode(Enum):
    HTML = "html"
    JSON = "json"

    @classmethod
    def parse(cls, value) -> "OutputMode":
        """Case-insensitive match against "html" and "json"."""
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigurationError('output parameter must be "html" or "json"') from None


class RunState(Enum):
    CREATED = "created"
    LIST_FETCHING = "list_fetching"
    ITEM_FETCHING = "item_fetching"
    EMITTING = "emitting"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.COMPLETED, RunState.FAILED)


@dataclass(slots=True)
class PipelineState:
    remaining: float
    emitted: int = 0
    attempted: int = 0
    state: RunState = RunState.CREATED
