"""Resolution of hierarchical label paths to Gmail labels."""

from __future__ import annotations

import logging

from .constants import LABEL_SEPARATOR
from .errors import LabelCreationError
from .models import Label
from .store import MailStore

logger = logging.getLogger(__name__)


def sanitize_segment(segment: str) -> str:
    """Gmail rejects parentheses in label names; replace them with underscores."""
    return segment.replace("(", "_").replace(")", "_")


class LabelResolver:
    """Fetch or create labels by full path, creating every ancestor on the way."""

    def __init__(self, store: MailStore) -> None:
        self.store = store
        self._labels: dict[str, Label] = {}

    def get_or_create(self, name: str) -> Label:
        """Return the label called ``name``, creating it if the store has none."""
        name = sanitize_segment(name)
        if name in self._labels:
            return self._labels[name]

        label = self.store.get_label_by_name(name)
        if label is None:
            try:
                label = self.store.create_label(name)
            except LabelCreationError:
                logger.error('Error while creating label "%s"', name)
                raise
            logger.debug('Created label "%s"', name)

        self._labels[name] = label
        return label

    def resolve(self, path: str, separator: str = LABEL_SEPARATOR) -> Label:
        """Return the leaf label of ``path`` after making sure all its ancestors exist.

        ``"GitHub/org/repo"`` fetches or creates ``GitHub``, ``GitHub/org`` and
        ``GitHub/org/repo``, in that order.
        """
        if not path:
            raise ValueError("Cannot resolve an empty label path")

        label: Label | None = None
        for segment in path.split(separator):
            name = sanitize_segment(segment)
            if label is not None:
                name = f"{label.name}{LABEL_SEPARATOR}{name}"
            label = self.get_or_create(name)
        return label
