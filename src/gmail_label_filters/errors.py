"""Exception types for Gmail Label Filters."""


class LabelFilterError(Exception):
    """Base exception for all Gmail Label Filters errors."""


class MissingHeaderError(LabelFilterError):
    """Raised when a header a rule cannot do without is absent from a message.

    Fatal for the thread being processed; the runner records it and moves on
    to the next thread.
    """

    def __init__(self, header: str, subject: str = "", date: str = "") -> None:
        super().__init__(f'{header} header missing from message "{subject}" on {date}')
        self.header = header


class MailStoreError(LabelFilterError):
    """Raised when a Gmail API call fails."""


class LabelCreationError(MailStoreError):
    """Raised when a label cannot be created.

    Attributes:
        label_name: The sanitized label name that was being created.
    """

    def __init__(self, label_name: str, reason: str = "") -> None:
        message = f'Error while creating label "{label_name}"'
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.label_name = label_name


class AuthenticationError(LabelFilterError):
    """Raised when no usable Gmail token is stored and no browser flow may be started."""
