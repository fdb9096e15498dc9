"""Thread processing and rule runs - label, route, and report."""

from __future__ import annotations

import logging

from .errors import MailStoreError
from .labels import LabelResolver
from .models import Label, RuleReport, Thread, ThreadOutcome
from .rules import ClassifierRule
from .store import MailStore

logger = logging.getLogger(__name__)


class ThreadProcessor:
    """Apply one rule to one thread."""

    def __init__(self, store: MailStore, resolver: LabelResolver | None = None) -> None:
        self.store = store
        self.resolver = resolver or LabelResolver(store)

    def classify(self, thread: Thread, rule: ClassifierRule) -> tuple[list[Label], bool]:
        """Classify every message; return the distinct labels and whether any message is important."""
        labels: dict[str, Label] = {}
        important = False
        for message in thread.messages:
            result = rule.classify(message)
            important = important or result.important
            if not result.label_path:
                continue
            label = self.resolver.resolve(result.label_path)
            labels.setdefault(label.name, label)
        return list(labels.values()), important

    def route(self, thread: Thread, important: bool) -> None:
        if important:
            logger.info('Important thread "%s" (id="%s")', thread.subject, thread.thread_id)
            self.store.mark_important(thread)
            self.store.move_to_inbox(thread)
        else:
            self.store.mark_unimportant(thread)
            self.store.move_to_archive(thread)

    def process(self, thread: Thread, rule: ClassifierRule) -> ThreadOutcome:
        """Route ``thread`` to the inbox or the archive, then label it.

        Every label is resolved before the thread is touched, so an exception
        raised by the rule leaves the thread as it was.  Routing happens before
        labelling: a thread whose routing fails keeps no user label and still
        matches ``has:nouserlabels`` on the next run.  A failure to apply one
        label is logged and the other labels are still applied.
        """
        outcome = ThreadOutcome(thread_id=thread.thread_id, subject=thread.subject)

        labels, outcome.important = self.classify(thread, rule)
        if not labels:
            logger.error('No labels found for thread "%s" (id="%s")', thread.subject, thread.thread_id)
            return outcome

        self.route(thread, outcome.important)

        for label in labels:
            try:
                self.store.add_label(thread, label)
            except MailStoreError as exc:
                logger.error(
                    'Could not add label "%s" to thread "%s" (id="%s"): %s',
                    label.name,
                    thread.subject,
                    thread.thread_id,
                    exc,
                )
                continue
            outcome.labels.append(label.name)
            logger.info(
                'Label "%s" has been added to thread "%s" (id="%s")',
                label.name,
                thread.subject,
                thread.thread_id,
            )

        return outcome


class FilterRunner:
    """Search threads for each rule and process them one by one."""

    def __init__(self, store: MailStore, processor: ThreadProcessor | None = None) -> None:
        self.store = store
        self.processor = processor or ThreadProcessor(store)

    def run(self, rule: ClassifierRule, search_max: int | None = None) -> RuleReport:
        """Process up to ``search_max`` threads matching the rule's filter.

        A thread that fails is logged and recorded in the report; the
        remaining threads are still processed.
        """
        query = rule.search_filter()
        report = RuleReport(rule_name=rule.name, query=query)

        if search_max is None:
            search_max = rule.search_max
        threads = self.store.search(query, offset=0, max_results=search_max)
        logger.info('Rule "%s" found %d thread(s)', rule.name, len(threads))

        for thread in threads:
            try:
                outcome = self.processor.process(thread, rule)
            except Exception as exc:  # noqa: BLE001
                logger.exception(
                    'Failed to process thread "%s" (id="%s")', thread.subject, thread.thread_id
                )
                outcome = ThreadOutcome(
                    thread_id=thread.thread_id,
                    subject=thread.subject,
                    error=str(exc),
                )
            report.outcomes.append(outcome)

        return report

    def run_all(self, rules: list[ClassifierRule], search_max: int | None = None) -> list[RuleReport]:
        """Run every rule in order; a failed search only skips that rule."""
        reports: list[RuleReport] = []
        for rule in rules:
            try:
                report = self.run(rule, search_max=search_max)
            except MailStoreError as exc:
                logger.error('Search failed for rule "%s": %s', rule.name, exc)
                report = RuleReport(rule_name=rule.name, query=rule.search_filter(), error=str(exc))
            reports.append(report)
        return reports
