"""Tests for the provider rules."""

import pytest

from gmail_label_filters.errors import MissingHeaderError
from gmail_label_filters.rules import (
    BugzillaRule,
    GitHubRule,
    GitLabRule,
    MailingListRule,
    bugzilla_root_label,
    default_rules,
    get_rule,
)


# --- GitHub ---


def test_github_subscribed_not_important(make_message):
    """Being subscribed to a repository is not a reason to surface the thread."""
    assert GitHubRule().is_important(make_message("X-GitHub-Reason: subscribed")) is False


def test_github_mention_important(make_message):
    """A direct mention makes the message important."""
    assert GitHubRule().is_important(make_message("X-GitHub-Reason: mention")) is True


@pytest.mark.parametrize("reason", ["team_mention", "ci_activity"])
def test_github_other_unimportant_reasons(make_message, reason):
    assert GitHubRule().is_important(make_message(f"X-GitHub-Reason: {reason}")) is False


def test_github_missing_reason_not_important(make_message):
    assert GitHubRule().is_important(make_message()) is False


def test_github_label_from_bracketed_address(make_message):
    """org/repo is read from the address when the list name has no slash."""
    msg = make_message("List-ID: my_repo.my_org <my_org/my_repo.github.com>")
    assert GitHubRule().find_label_path(msg) == "GitHub/my org/my repo"


def test_github_label_from_list_name(github_message):
    """GitHub's usual 'owner/repo <repo.owner.github.com>' form."""
    assert GitHubRule().find_label_path(github_message) == "GitHub/eclipse/jetty"


def test_github_missing_list_id(make_message, caplog):
    """No List-ID header means no label and a warning."""
    msg = make_message(subject="No list")
    assert GitHubRule().find_label_path(msg) is None
    assert "Cannot find List-ID" in caplog.text


def test_github_malformed_list_id(make_message, caplog):
    """A List-ID without an org/repo pair anywhere is logged as an error."""
    msg = make_message("List-ID: repo.org <repo.org.github.com>")
    assert GitHubRule().find_label_path(msg) is None
    assert "Something went wrong" in caplog.text


def test_github_search_filter():
    assert GitHubRule().search_filter() == "from:notifications@github.com AND has:nouserlabels"


# --- GitLab ---


def test_gitlab_project_path(make_message):
    """Project path segments are trimmed and nested under the instance root."""
    msg = make_message("X-GitLab-Project-Path: eclipse/oniro-core/ oniro ")
    assert GitLabRule().find_label_path(msg) == "gitlab.eclipse.org/eclipse/oniro-core/oniro"


def test_gitlab_skips_blank_segments(make_message):
    """Empty and whitespace-only segments are dropped."""
    msg = make_message("X-GitLab-Project-Path: eclipse//  /jkube")
    assert GitLabRule().find_label_path(msg) == "gitlab.eclipse.org/eclipse/jkube"


def test_gitlab_missing_header_gives_root(make_message):
    """Without a project path the thread still gets the instance root label."""
    assert GitLabRule().find_label_path(make_message()) == "gitlab.eclipse.org"


def test_gitlab_custom_host(make_message):
    """The root label and the query follow the configured GitLab host."""
    rule = GitLabRule(host="example.com")
    assert rule.find_label_path(make_message()) == "gitlab.example.com"
    assert "from:gitlab@gitlab.example.com" in rule.search_filter()


def test_gitlab_never_important(make_message):
    assert GitLabRule().is_important(make_message("X-GitLab-Project-Path: a/b")) is False


# --- Bugzilla ---


def test_bugzilla_product_and_component(bugzilla_message):
    """Instance root, product and component make up the label path."""
    assert BugzillaRule().find_label_path(bugzilla_message) == "Eclipse Bugs/Platform/UI"


def test_bugzilla_encoded_product(make_message):
    """Q-encoded product and component have their underscores decoded to spaces."""
    msg = make_message(
        "X-Bugzilla-URL: https://bugs.eclipse.org/bugs/",
        "X-Bugzilla-Product: =?UTF-8?Q?Web_Tools?=",
        "X-Bugzilla-Component: =?UTF-8?Q?Web_Standard_Tools?=",
    )
    assert BugzillaRule().find_label_path(msg) == "Eclipse Bugs/Web Tools/Web Standard Tools"


def test_bugzilla_missing_component_gives_root(make_message, caplog):
    """Without both product and component only the root label is used."""
    msg = make_message(
        "X-Bugzilla-URL: https://bugs.polarsys.org/",
        "X-Bugzilla-Product: Capella",
    )
    assert BugzillaRule().find_label_path(msg) == "Polarsys Bugs"
    assert "Something went wrong" in caplog.text


def test_bugzilla_missing_url_raises(make_message):
    """The root label cannot be chosen without X-Bugzilla-URL."""
    msg = make_message("X-Bugzilla-Product: Platform", "X-Bugzilla-Component: UI", subject="[Bug 1]")
    with pytest.raises(MissingHeaderError) as excinfo:
        BugzillaRule().find_label_path(msg)
    assert excinfo.value.header == "X-Bugzilla-URL"
    assert "[Bug 1]" in str(excinfo.value)


@pytest.mark.parametrize(
    "url, root",
    [
        ("https://bugs.eclipse.org/bugs/", "Eclipse Bugs"),
        ("https://bugs.locationtech.org/", "LocationTech Bugs"),
        ("https://bugs.foundation.eclipse.org/", "Foundation Bugs"),
        ("=?UTF-8?Q?https://bugs=2Efoundation=2Eeclipse=2Eorg/?=", "Foundation Bugs"),
        ("https://bugzilla.example.com/", "Unknown Bugzilla"),
    ],
)
def test_bugzilla_root_label(url, root):
    assert bugzilla_root_label(url) == root


def test_bugzilla_reason_important(bugzilla_message):
    """Any reason other than 'None' makes the message important."""
    assert BugzillaRule().is_important(bugzilla_message) is True


def test_bugzilla_reason_none_not_important(make_message):
    assert BugzillaRule().is_important(make_message("X-Bugzilla-Reason: None")) is False


def test_bugzilla_encoded_reason_none_not_important(make_message):
    """The reason is decoded before it is compared with 'None'."""
    assert BugzillaRule().is_important(make_message("X-Bugzilla-Reason: =?UTF-8?Q?None?=")) is False


def test_bugzilla_missing_reason_not_important(make_message):
    assert BugzillaRule().is_important(make_message()) is False


# --- Mailing lists ---


def test_mailing_list_id(make_message):
    """The list name before .eclipse.org becomes the label."""
    msg = make_message("List-Id: Platform developers <platform-dev.eclipse.org>")
    assert MailingListRule().find_label_path(msg) == "Eclipse Lists/platform-dev"


@pytest.mark.parametrize(
    "marker",
    [
        "X-Report-Abuse-To: abuse@hubspot.com",
        "X-Mailer: MailChimp Mailer",
        "X-Jenkins-Result: SUCCESS",
        "Sender: Google Calendar <calendar-notification@google.com>",
    ],
)
def test_mailing_list_relay_fallback(make_message, marker):
    """Bulk mail without List-ID is labelled by the eclipse.org sender's local part."""
    msg = make_message(marker, sender="Eclipse Foundation <newsletter@eclipse.org>")
    assert MailingListRule().find_label_path(msg) == "Eclipse Lists/HubSpot Lists/newsletter"


def test_mailing_list_no_marker(make_message, caplog):
    """Neither a list nor a known relay: no label."""
    msg = make_message(sender="Someone <someone@eclipse.org>")
    assert MailingListRule().find_label_path(msg) is None
    assert "Message not from HubSpot" in caplog.text


def test_mailing_list_relay_unknown_sender(make_message, caplog):
    """A relay marker with a sender outside eclipse.org gives no label."""
    msg = make_message("X-Mailer: mailchimp", sender="Someone <someone@example.com>")
    assert MailingListRule().find_label_path(msg) is None
    assert "Unknown sender" in caplog.text


def test_mailing_list_search_filter():
    query = MailingListRule().search_filter()
    assert query.startswith("from:*@eclipse.org AND NOT from:gitlab@gitlab.eclipse.org")
    assert "NOT in:Sent" in query
    assert query.endswith("AND has:nouserlabels")


# --- registry ---


def test_classify_combines_path_and_importance(github_message):
    result = GitHubRule().classify(github_message)
    assert result.label_path == "GitHub/eclipse/jetty"
    assert result.important is True


def test_default_rules_order_and_limits():
    """Rules run GitHub first and mailing lists last, with a larger batch for lists."""
    rules = default_rules()
    assert [r.name for r in rules] == ["github", "gitlab", "bugzilla", "mailing-list"]
    assert [r.search_max for r in rules] == [16, 16, 16, 32]


def test_get_rule():
    rule = get_rule("bugzilla", search_max=5)
    assert isinstance(rule, BugzillaRule)
    assert rule.search_max == 5


def test_get_rule_unknown():
    with pytest.raises(ValueError, match="Unknown rule"):
        get_rule("jira")
