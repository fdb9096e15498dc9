"""Constants for Gmail Label Filters."""

from pathlib import Path

# --- Config paths ---
CONFIG_DIR = Path.home() / ".gmail-label-filters"
CREDENTIALS_PATH = CONFIG_DIR / "credentials.json"
TOKEN_PATH = CONFIG_DIR / "token.json"

# --- Gmail API ---
SCOPES = ["https://www.googleapis.com/auth/gmail.modify"]
PAGE_SIZE = 100  # threads per list page
BATCH_SIZE = 50  # raw message gets per BatchHttpRequest
INBOX_LABEL = "INBOX"
IMPORTANT_LABEL = "IMPORTANT"

# --- Search ---
DEFAULT_SEARCH_MAX = 16  # threads per rule run
MAILING_LIST_SEARCH_MAX = 32
NO_USER_LABELS = "has:nouserlabels"

# --- Label roots ---
LABEL_SEPARATOR = "/"
GITHUB_ROOT = "GitHub"
GITLAB_HOST = "eclipse.org"
MAILING_LIST_ROOT = "Eclipse Lists"
RELAY_LISTS_LABEL = "HubSpot Lists"

# --- GitHub ---
GITHUB_UNIMPORTANT_REASONS = frozenset({"subscribed", "team_mention", "ci_activity"})
GITHUB_LIST_DOMAIN = ".github.com"

# --- Bugzilla ---
# Checked in order, the first domain contained in X-Bugzilla-URL wins.
BUGZILLA_ROOT_LABELS = [
    ("bugs.eclipse.org", "Eclipse Bugs"),
    ("polarsys.org", "Polarsys Bugs"),
    ("locationtech.org", "LocationTech Bugs"),
    ("foundation=2Eeclipse=2Eorg", "Foundation Bugs"),
    ("foundation.eclipse.org", "Foundation Bugs"),
]
UNKNOWN_BUGZILLA_ROOT = "Unknown Bugzilla"
BUGZILLA_NO_REASON = "None"

# --- Mailing lists ---
MAILING_LIST_EXCLUDED_SENDERS = [
    "gitlab@gitlab.eclipse.org",
    "gerrit@eclipse.org",
    "gerrit@foundation.eclipse.org",
    "hudson@eclipse.org",
    "webmaster@eclipse.org",
    "sabot@*",
]
MAILING_LIST_SINCE = "2019/01/01"
