"""The mail store interface the classification engine talks to."""

from __future__ import annotations

import logging
from typing import Protocol

from .constants import DEFAULT_SEARCH_MAX
from .models import Label, Thread

logger = logging.getLogger(__name__)


class MailStore(Protocol):
    """Search, label storage and thread flags of a mailbox."""

    def search(self, query: str, offset: int = 0, max_results: int = DEFAULT_SEARCH_MAX) -> list[Thread]:
        ...

    def get_label_by_name(self, name: str) -> Label | None:
        ...

    def create_label(self, name: str) -> Label:
        ...

    def add_label(self, thread: Thread, label: Label) -> None:
        ...

    def mark_important(self, thread: Thread) -> None:
        ...

    def mark_unimportant(self, thread: Thread) -> None:
        ...

    def move_to_inbox(self, thread: Thread) -> None:
        ...

    def move_to_archive(self, thread: Thread) -> None:
        ...


class DryRunMailStore:
    """Wrap a store so nothing is written to the mailbox.

    Searches and label lookups go to the wrapped store.  Label creation and
    thread changes are logged and only applied to the local objects.
    """

    def __init__(self, store: MailStore) -> None:
        self._store = store

    def search(self, query: str, offset: int = 0, max_results: int = DEFAULT_SEARCH_MAX) -> list[Thread]:
        return self._store.search(query, offset=offset, max_results=max_results)

    def get_label_by_name(self, name: str) -> Label | None:
        return self._store.get_label_by_name(name)

    def create_label(self, name: str) -> Label:
        logger.info('[DRY RUN] Would create label "%s"', name)
        return Label(label_id=None, name=name)

    def add_label(self, thread: Thread, label: Label) -> None:
        logger.info('[DRY RUN] Would add label "%s" to thread "%s"', label.name, thread.subject)
        thread.labels.add(label.name)

    def mark_important(self, thread: Thread) -> None:
        thread.important = True

    def mark_unimportant(self, thread: Thread) -> None:
        thread.important = False

    def move_to_inbox(self, thread: Thread) -> None:
        logger.info('[DRY RUN] Would move thread "%s" to the inbox', thread.subject)
        thread.in_inbox = True

    def move_to_archive(self, thread: Thread) -> None:
        logger.info('[DRY RUN] Would archive thread "%s"', thread.subject)
        thread.in_inbox = False
