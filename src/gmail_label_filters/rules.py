"""Provider rules: which threads to search for, how to label them, what is important."""

from __future__ import annotations

import logging

from . import headers
from .constants import (
    BUGZILLA_NO_REASON,
    BUGZILLA_ROOT_LABELS,
    DEFAULT_SEARCH_MAX,
    GITHUB_LIST_DOMAIN,
    GITHUB_ROOT,
    GITHUB_UNIMPORTANT_REASONS,
    GITLAB_HOST,
    MAILING_LIST_EXCLUDED_SENDERS,
    MAILING_LIST_ROOT,
    MAILING_LIST_SEARCH_MAX,
    MAILING_LIST_SINCE,
    NO_USER_LABELS,
    RELAY_LISTS_LABEL,
    UNKNOWN_BUGZILLA_ROOT,
)
from .errors import MissingHeaderError
from .models import ClassificationResult, Message

logger = logging.getLogger(__name__)


class ClassifierRule:
    """Base rule: a Gmail query plus a label extractor and an importance check.

    Subclasses set ``name`` and ``query`` and override ``find_label_path``;
    ``is_important`` defaults to False.
    """

    name = ""
    query = ""

    def __init__(self, search_max: int = DEFAULT_SEARCH_MAX) -> None:
        self.search_max = search_max

    def search_filter(self) -> str:
        return f"{self.query} AND {NO_USER_LABELS}"

    def is_important(self, message: Message) -> bool:
        return False

    def find_label_path(self, message: Message) -> str | None:
        raise NotImplementedError(f"{type(self).__name__} must implement find_label_path")

    def classify(self, message: Message) -> ClassificationResult:
        return ClassificationResult(
            label_path=self.find_label_path(message),
            important=self.is_important(message),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(search_max={self.search_max})"


class MailingListRule(ClassifierRule):
    """Eclipse mailing lists, plus bulk mail relayed from eclipse.org senders."""

    name = "mailing-list"
    query = " AND ".join(
        ["from:*@eclipse.org"]
        + [f"NOT from:{sender}" for sender in MAILING_LIST_EXCLUDED_SENDERS]
        + ["NOT in:Sent", f"after:{MAILING_LIST_SINCE}"]
    )

    def __init__(self, search_max: int = MAILING_LIST_SEARCH_MAX) -> None:
        super().__init__(search_max)

    def find_label_path(self, message: Message) -> str | None:
        content = message.raw_content

        list_id = headers.extract(content, headers.ECLIPSE_LIST_ID)
        if list_id:
            return f"{MAILING_LIST_ROOT}/{list_id}"

        if not any(headers.extract(content, marker) for marker in headers.RELAY_MARKERS):
            logger.warning(
                'Message not from HubSpot, MailChimp, Jenkins or Google Calendar "%s" on %s from %s',
                message.subject,
                message.date,
                message.sender,
            )
            return None

        from_name = headers.extract(content, headers.ECLIPSE_SENDER)
        if not from_name:
            logger.warning('Unknown sender of message "%s" on %s', message.subject, message.date)
            return None

        return f"{MAILING_LIST_ROOT}/{RELAY_LISTS_LABEL}/{from_name}"


def _split_repository(value: str) -> tuple[str, str] | None:
    """Split ``org/repo`` on the first slash; None when there is no slash."""
    if "/" not in value:
        return None
    org, repo = value.split("/", 1)
    org = org.strip().replace("_", " ") or "unknown_org"
    repo = repo.strip().replace("_", " ") or "unknown_repo"
    return org, repo


class GitHubRule(ClassifierRule):
    """GitHub notifications, labelled by organization and repository."""

    name = "github"
    query = "from:notifications@github.com"

    def is_important(self, message: Message) -> bool:
        reason = headers.extract(message.raw_content, headers.GITHUB_REASON)
        return reason is not None and reason not in GITHUB_UNIMPORTANT_REASONS

    def find_label_path(self, message: Message) -> str | None:
        content = message.raw_content
        list_name = headers.extract(content, headers.GITHUB_LIST_NAME)
        list_address = headers.extract(content, headers.GITHUB_LIST_ADDRESS)
        if list_name is None and list_address is None:
            logger.warning('Cannot find List-ID from message "%s" on %s', message.subject, message.date)
            return None

        repository = _split_repository(list_name or "")
        if repository is None and list_address:
            address = list_address
            if address.lower().endswith(GITHUB_LIST_DOMAIN):
                address = address[: -len(GITHUB_LIST_DOMAIN)]
            repository = _split_repository(address)

        if repository is None:
            logger.error('Something went wrong during matching of "%s <%s>"', list_name, list_address)
            return None

        org, repo = repository
        return f"{GITHUB_ROOT}/{org}/{repo}"


class GitLabRule(ClassifierRule):
    """GitLab notifications, labelled by project path under the instance root."""

    name = "gitlab"

    def __init__(self, search_max: int = DEFAULT_SEARCH_MAX, host: str = GITLAB_HOST) -> None:
        super().__init__(search_max)
        self.root = f"gitlab.{host}"
        self.query = f"from:gitlab@gitlab.{host}"

    def find_label_path(self, message: Message) -> str | None:
        project_path = headers.extract(message.raw_content, headers.GITLAB_PROJECT_PATH)
        if project_path is None:
            return self.root

        segments = [segment.strip() for segment in project_path.split("/") if segment.strip()]
        return "/".join([self.root] + segments)


def bugzilla_root_label(url: str) -> str:
    """Map a Bugzilla URL to the root label of its instance."""
    for domain, root in BUGZILLA_ROOT_LABELS:
        if domain in url:
            return root
    return UNKNOWN_BUGZILLA_ROOT


class BugzillaRule(ClassifierRule):
    """Bugzilla notifications, labelled by instance, product and component."""

    name = "bugzilla"
    query = (
        "(from:bugzilla-daemon@polarsys.org"
        " OR from:bugzilla-daemon@eclipse.org"
        " OR from:bugzilla-daemon@locationtech.org)"
    )

    def is_important(self, message: Message) -> bool:
        reason = headers.extract(message.raw_content, headers.BUGZILLA_REASON)
        return reason is not None and reason != BUGZILLA_NO_REASON

    def find_label_path(self, message: Message) -> str | None:
        content = message.raw_content
        url = headers.extract(content, headers.BUGZILLA_URL)
        if url is None:
            raise MissingHeaderError("X-Bugzilla-URL", message.subject, message.date)

        root = bugzilla_root_label(url)
        product = headers.extract(content, headers.BUGZILLA_PRODUCT)
        component = headers.extract(content, headers.BUGZILLA_COMPONENT)

        if product and component:
            return f"{root}/{product}/{component}"

        logger.warning(
            'Something went wrong during matching of product "%s" and component "%s" in "%s"',
            product,
            component,
            message.subject,
        )
        return root


RULES: dict[str, type[ClassifierRule]] = {
    GitHubRule.name: GitHubRule,
    GitLabRule.name: GitLabRule,
    BugzillaRule.name: BugzillaRule,
    MailingListRule.name: MailingListRule,
}


def get_rule(name: str, search_max: int | None = None) -> ClassifierRule:
    """Instantiate the rule registered under ``name``."""
    try:
        rule_cls = RULES[name]
    except KeyError:
        raise ValueError(f"Unknown rule {name!r}, expected one of: {', '.join(RULES)}") from None
    return rule_cls() if search_max is None else rule_cls(search_max)


def default_rules() -> list[ClassifierRule]:
    """All rules, in the order they run."""
    return [GitHubRule(), GitLabRule(), BugzillaRule(), MailingListRule()]
