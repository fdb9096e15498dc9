"""Gmail API implementation of the mail store."""

from __future__ import annotations

import base64
import logging
from email.header import decode_header, make_header
from email.parser import HeaderParser

from googleapiclient.errors import HttpError

from gmail_label_filters.constants import (
    BATCH_SIZE,
    DEFAULT_SEARCH_MAX,
    IMPORTANT_LABEL,
    INBOX_LABEL,
    PAGE_SIZE,
)
from gmail_label_filters.errors import LabelCreationError, MailStoreError
from gmail_label_filters.models import Label, Message, Thread

logger = logging.getLogger(__name__)


def decode_raw(raw: str) -> str:
    """Decode the base64url ``raw`` field of a message into text."""
    padded = raw + "=" * (-len(raw) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8", errors="replace")


def _header_text(value: str | None) -> str:
    if not value:
        return ""
    try:
        return str(make_header(decode_header(value))).strip()
    except (UnicodeDecodeError, LookupError):
        return value.strip()


def parse_message(message_id: str, raw_content: str) -> Message:
    """Build a Message from raw RFC 822 text."""
    parsed = HeaderParser().parsestr(raw_content, headersonly=True)
    return Message(
        message_id=message_id,
        raw_content=raw_content,
        subject=_header_text(parsed.get("Subject")),
        sender=_header_text(parsed.get("From")),
        date=_header_text(parsed.get("Date")),
    )


class GmailMailStore:
    """Mail store backed by an authenticated Gmail API service."""

    def __init__(self, service) -> None:
        self.service = service
        self._labels: dict[str, Label] | None = None

    # --- search ---

    def list_thread_ids(self, query: str, max_results: int) -> list[str]:
        """List up to ``max_results`` thread IDs matching the query, handling pagination."""
        ids: list[str] = []
        page_token: str | None = None

        while len(ids) < max_results:
            kwargs: dict = {
                "userId": "me",
                "q": query,
                "maxResults": min(PAGE_SIZE, max_results - len(ids)),
            }
            if page_token:
                kwargs["pageToken"] = page_token

            try:
                resp = self.service.users().threads().list(**kwargs).execute()
            except HttpError as exc:
                raise MailStoreError(f'Search "{query}" failed: {exc}') from exc

            ids.extend(t["id"] for t in resp.get("threads", []))
            page_token = resp.get("nextPageToken")
            if not page_token:
                break

        return ids[:max_results]

    def _fetch_raw_messages(self, message_ids: list[str]) -> tuple[dict[str, Message], set[str]]:
        """Fetch raw content for messages in batches.  Returns (messages, failed IDs)."""
        messages: dict[str, Message] = {}
        failed: set[str] = set()

        def _cb(request_id, response, exception):
            if exception is not None:
                logger.error("Error fetching message %s: %s", request_id, exception)
                failed.add(request_id)
                return
            messages[request_id] = parse_message(request_id, decode_raw(response["raw"]))

        for start in range(0, len(message_ids), BATCH_SIZE):
            batch = self.service.new_batch_http_request(callback=_cb)
            for msg_id in message_ids[start : start + BATCH_SIZE]:
                batch.add(
                    self.service.users().messages().get(userId="me", id=msg_id, format="raw"),
                    request_id=msg_id,
                )
            try:
                batch.execute()
            except HttpError as exc:
                raise MailStoreError(f"Fetching raw messages failed: {exc}") from exc

        return messages, failed

    def search(self, query: str, offset: int = 0, max_results: int = DEFAULT_SEARCH_MAX) -> list[Thread]:
        """Return threads matching ``query`` with the raw content of all their messages.

        Threads with a message that could not be fetched are left out; they
        still match the query and are picked up by the next run.
        """
        thread_ids = self.list_thread_ids(query, offset + max_results)[offset:]

        skeletons: list[tuple[Thread, list[str]]] = []
        for thread_id in thread_ids:
            try:
                resp = (
                    self.service.users()
                    .threads()
                    .get(userId="me", id=thread_id, format="minimal")
                    .execute()
                )
            except HttpError as exc:
                raise MailStoreError(f"Fetching thread {thread_id} failed: {exc}") from exc

            entries = resp.get("messages", [])
            label_ids = {lid for m in entries for lid in m.get("labelIds", [])}
            thread = Thread(
                thread_id=thread_id,
                important=IMPORTANT_LABEL in label_ids,
                in_inbox=INBOX_LABEL in label_ids,
            )
            skeletons.append((thread, [m["id"] for m in entries]))

        all_ids = [msg_id for _, ids in skeletons for msg_id in ids]
        messages, failed = self._fetch_raw_messages(all_ids)

        threads: list[Thread] = []
        for thread, ids in skeletons:
            if failed.intersection(ids):
                logger.error('Skipping thread id="%s": some of its messages could not be fetched', thread.thread_id)
                continue
            thread.messages = [messages[msg_id] for msg_id in ids]
            threads.append(thread)
        return threads

    # --- labels ---

    def _load_labels(self) -> dict[str, Label]:
        if self._labels is None:
            try:
                resp = self.service.users().labels().list(userId="me").execute()
            except HttpError as exc:
                raise MailStoreError(f"Listing labels failed: {exc}") from exc
            self._labels = {
                item["name"]: Label(label_id=item["id"], name=item["name"])
                for item in resp.get("labels", [])
                if item.get("type") == "user"
            }
        return self._labels

    def get_label_by_name(self, name: str) -> Label | None:
        return self._load_labels().get(name)

    def create_label(self, name: str) -> Label:
        labels = self._load_labels()
        body = {"name": name, "labelListVisibility": "labelShow", "messageListVisibility": "show"}
        try:
            created = self.service.users().labels().create(userId="me", body=body).execute()
        except HttpError as exc:
            raise LabelCreationError(name, str(exc)) from exc

        label = Label(label_id=created["id"], name=created.get("name", name))
        labels[label.name] = label
        return label

    # --- thread flags ---

    def _modify(self, thread: Thread, add: list[str] | None = None, remove: list[str] | None = None) -> None:
        body = {"addLabelIds": add or [], "removeLabelIds": remove or []}
        try:
            self.service.users().threads().modify(userId="me", id=thread.thread_id, body=body).execute()
        except (HttpError, OSError) as exc:
            raise MailStoreError(f'Modifying thread id="{thread.thread_id}" failed: {exc}') from exc

    def add_label(self, thread: Thread, label: Label) -> None:
        self._modify(thread, add=[label.label_id])
        thread.labels.add(label.name)

    def mark_important(self, thread: Thread) -> None:
        self._modify(thread, add=[IMPORTANT_LABEL])
        thread.important = True

    def mark_unimportant(self, thread: Thread) -> None:
        self._modify(thread, remove=[IMPORTANT_LABEL])
        thread.important = False

    def move_to_inbox(self, thread: Thread) -> None:
        self._modify(thread, add=[INBOX_LABEL])
        thread.in_inbox = True

    def move_to_archive(self, thread: Thread) -> None:
        self._modify(thread, remove=[INBOX_LABEL])
        thread.in_inbox = False
