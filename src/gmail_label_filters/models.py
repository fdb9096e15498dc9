"""Data models for Gmail Label Filters."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Label:
    """A Gmail user label, identified by its full slash-separated name."""

    label_id: str | None
    name: str


@dataclass(frozen=True)
class Message:
    """A single message of a thread, with its raw RFC 822 content."""

    message_id: str
    raw_content: str  # Full header block + body
    subject: str = ""
    sender: str = ""  # Full From header value
    date: str = ""


@dataclass
class Thread:
    """A Gmail thread and the flags this tool changes on it."""

    thread_id: str
    messages: list[Message] = field(default_factory=list)
    labels: set[str] = field(default_factory=set)
    important: bool | None = None
    in_inbox: bool = False

    @property
    def subject(self) -> str:
        return self.messages[0].subject if self.messages else ""


@dataclass(frozen=True)
class ClassificationResult:
    """Classification of a single message."""

    label_path: str | None
    important: bool = False


@dataclass
class ThreadOutcome:
    """What happened to one thread during a rule run."""

    thread_id: str
    subject: str
    labels: list[str] = field(default_factory=list)
    important: bool = False
    error: str | None = None

    @property
    def labeled(self) -> bool:
        return bool(self.labels) and self.error is None


@dataclass
class RuleReport:
    """Result of running one rule over its search results."""

    rule_name: str
    query: str
    outcomes: list[ThreadOutcome] = field(default_factory=list)
    error: str | None = None  # set when the search itself failed

    @property
    def labeled(self) -> int:
        return sum(1 for o in self.outcomes if o.labeled)

    @property
    def important(self) -> int:
        return sum(1 for o in self.outcomes if o.labeled and o.important)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.error is not None)

    @property
    def unlabeled(self) -> int:
        return sum(1 for o in self.outcomes if not o.labels and o.error is None)
