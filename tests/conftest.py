"""Shared fixtures for tests."""

from __future__ import annotations

import pytest

from gmail_label_filters.errors import LabelCreationError, MailStoreError
from gmail_label_filters.models import Label, Message, Thread


def _make_message(
    *header_lines: str,
    subject: str = "Test subject",
    sender: str = "Sender <sender@example.com>",
    message_id: str = "msg_001",
    body: str = "Hello",
) -> Message:
    """Build a Message whose raw content carries the given header lines."""
    lines = [f"From: {sender}", f"Subject: {subject}", "Date: Mon, 15 Jan 2024 10:00:00 +0000"]
    lines.extend(header_lines)
    raw = "\r\n".join(lines) + "\r\n\r\n" + body + "\r\n"
    return Message(
        message_id=message_id,
        raw_content=raw,
        subject=subject,
        sender=sender,
        date="2024-01-15",
    )


def _make_thread(*messages: Message, thread_id: str = "thread_001") -> Thread:
    return Thread(thread_id=thread_id, messages=list(messages), important=None, in_inbox=True)


class FakeMailStore:
    """In-memory mail store recording every call."""

    def __init__(self, threads: list[Thread] | None = None, labels: list[str] | None = None) -> None:
        self.threads = threads or []
        self.labels: dict[str, Label] = {
            name: Label(label_id=f"Label_{i}", name=name) for i, name in enumerate(labels or [])
        }
        self.created: list[str] = []
        self.applied: list[tuple[str, str]] = []
        self.searches: list[tuple[str, int, int]] = []
        self.fail_create: set[str] = set()
        self.fail_apply: set[str] = set()
        self.fail_search = False

    def search(self, query: str, offset: int = 0, max_results: int = 16) -> list[Thread]:
        self.searches.append((query, offset, max_results))
        if self.fail_search:
            raise MailStoreError(f'Search "{query}" failed')
        return self.threads[offset : offset + max_results]

    def get_label_by_name(self, name: str) -> Label | None:
        return self.labels.get(name)

    def create_label(self, name: str) -> Label:
        if name in self.fail_create:
            raise LabelCreationError(name, "invalid label name")
        label = Label(label_id=f"Label_{len(self.labels)}", name=name)
        self.labels[name] = label
        self.created.append(name)
        return label

    def add_label(self, thread: Thread, label: Label) -> None:
        if label.name in self.fail_apply:
            raise MailStoreError(f'Modifying thread id="{thread.thread_id}" failed')
        self.applied.append((thread.thread_id, label.name))
        thread.labels.add(label.name)

    def mark_important(self, thread: Thread) -> None:
        thread.important = True

    def mark_unimportant(self, thread: Thread) -> None:
        thread.important = False

    def move_to_inbox(self, thread: Thread) -> None:
        thread.in_inbox = True

    def move_to_archive(self, thread: Thread) -> None:
        thread.in_inbox = False


@pytest.fixture
def make_message():
    """Factory building a Message from raw header lines."""
    return _make_message


@pytest.fixture
def make_thread():
    """Factory building an unprocessed Thread in the inbox."""
    return _make_thread


@pytest.fixture
def make_store():
    """Factory building a FakeMailStore with optional threads and existing labels."""
    return FakeMailStore


@pytest.fixture
def store() -> FakeMailStore:
    return FakeMailStore()


@pytest.fixture
def github_message() -> Message:
    return _make_message(
        "X-GitHub-Reason: mention",
        "List-ID: eclipse/jetty <jetty.eclipse.github.com>",
        subject="Re: [eclipse/jetty] Fix request timeout (#42)",
        sender="Someone <notifications@github.com>",
    )


@pytest.fixture
def bugzilla_message() -> Message:
    return _make_message(
        "X-Bugzilla-URL: https://bugs.eclipse.org/bugs/",
        "X-Bugzilla-Product: Platform",
        "X-Bugzilla-Component: UI",
        "X-Bugzilla-Reason: CC",
        subject="[Bug 12345] View does not refresh",
        sender="bugzilla-daemon@eclipse.org",
    )
