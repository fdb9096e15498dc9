"""Table-driven header extraction from raw message content.

Each provider describes the headers it needs as ``HeaderPattern`` entries;
``extract`` is the only place that runs them.  Patterns are anchored at the
start of a header line and case-insensitive.

Some senders (Bugzilla in particular) wrap header values in a quoted-printable
UTF-8 encoded word, e.g. ``X-Bugzilla-Product: =?UTF-8?Q?Web_Tools?=``.  Patterns
built with ``encoded_header`` match both the bare and the wrapped form, and
underscores are turned back into spaces only when the wrapper was present.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_FLAGS = re.MULTILINE | re.IGNORECASE
_HEADER_END_RE = re.compile(r"\r?\n\r?\n")


@dataclass(frozen=True)
class HeaderPattern:
    """A named regex over the header block and the group holding the value."""

    name: str
    regex: re.Pattern
    group: int = 1
    marker_group: int | None = None  # set when the value may be Q-encoded


def header_pattern(name: str, pattern: str, group: int = 1) -> HeaderPattern:
    return HeaderPattern(name=name, regex=re.compile(pattern, _FLAGS), group=group)


def encoded_header(name: str) -> HeaderPattern:
    """Pattern for ``name`` accepting a ``=?UTF-8?Q?...?=`` wrapped value."""
    pattern = rf"^{re.escape(name)}:[ \t]*(=\?UTF-8\?Q\?)?([^?\r\n]*)(?:\?=)?"
    return HeaderPattern(name=name, regex=re.compile(pattern, _FLAGS), group=2, marker_group=1)


def header_block(content: str) -> str:
    """Return the header part of a raw message (everything before the first blank line)."""
    end = _HEADER_END_RE.search(content)
    return content[: end.start()] if end else content


def extract(content: str, pattern: HeaderPattern) -> str | None:
    """Apply ``pattern`` to the header block of ``content``.

    Returns the selected group trimmed, or None when the header is absent or
    its value is empty.
    """
    match = pattern.regex.search(header_block(content))
    if match is None:
        return None

    value = match.group(pattern.group)
    if value is None:
        return None
    value = value.strip()

    if pattern.marker_group is not None and match.group(pattern.marker_group):
        value = value.replace("_", " ")

    return value or None


# --- GitHub ---
GITHUB_REASON = header_pattern("X-GitHub-Reason", r"^X-GitHub-Reason:[ \t]*(.*)")
GITHUB_LIST_NAME = header_pattern("List-ID", r"^List-ID:[ \t]*([^<\r\n]*)<([^>\r\n]*)>")
GITHUB_LIST_ADDRESS = header_pattern(
    "List-ID", r"^List-ID:[ \t]*([^<\r\n]*)<([^>\r\n]*)>", group=2
)

# --- GitLab ---
GITLAB_PROJECT_PATH = header_pattern("X-GitLab-Project-Path", r"^X-GitLab-Project-Path:[ \t]*(.*)")

# --- Bugzilla ---
BUGZILLA_URL = header_pattern("X-Bugzilla-URL", r"^X-Bugzilla-URL:[ \t]*(.*)")
BUGZILLA_REASON = encoded_header("X-Bugzilla-Reason")
BUGZILLA_PRODUCT = encoded_header("X-Bugzilla-Product")
BUGZILLA_COMPONENT = encoded_header("X-Bugzilla-Component")

# --- Mailing lists ---
ECLIPSE_LIST_ID = header_pattern("List-ID", r"^List-ID:[^<\r\n]*<([^>\r\n]*)\.eclipse\.org>")
HUBSPOT_ABUSE = header_pattern("X-Report-Abuse-To", r"^X-Report-Abuse-To:(.*hubspot.*)")
MAILCHIMP_MAILER = header_pattern("X-Mailer", r"^X-Mailer:[ \t]*(.*mailchimp.*)")
JENKINS_RESULT = header_pattern("X-Jenkins-Result", r"^X-Jenkins-Result:[ \t]*(.*)")
GCAL_SENDER = header_pattern(
    "Sender", r"^Sender:[^<\r\n]*<(calendar-notification@google\.com)>"
)
ECLIPSE_SENDER = header_pattern(
    "From", r"^From:[ \t]*[^<\r\n]*<([^@>\r\n]*)@eclipse(?:-foundation)?\.org>"
)

RELAY_MARKERS = [HUBSPOT_ABUSE, MAILCHIMP_MAILER, JENKINS_RESULT, GCAL_SENDER]
