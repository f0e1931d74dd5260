"""
This module provides the notifiers used to report recoverable problems.

The descriptor codec never decides how a problem reaches the user. It calls a
notifier, any callable taking `(message, severity)`, and carries on. The
classes here are the surfaces the command line host offers: the console via
loguru, a plain text error log that keeps a chronological record of problems
across runs, and an in-memory collector.

A notifier must not fail back into the codec. `safe_notify` is the single place
that enforces this: whatever a notifier raises is logged and dropped.
"""

from enum import Enum
from pathlib import Path
from typing import Callable, List, Tuple

from loguru import logger

from ..config.common import DEFAULT_ERROR_LOG_FILENAME, ERROR_LOG_SEPARATOR


class Severity(Enum):
    """How serious a reported problem is."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


NotifyCallable = Callable[[str, Severity], None]


def safe_notify(notify: NotifyCallable, message: str, severity: Severity) -> None:
    """
    Calls a notifier, containing any exception it raises.

    Args:
        notify: The notifier supplied by the host.
        message: The human-readable description of the problem.
        severity: The severity of the problem.
    """
    try:
        notify(message, severity)
    except Exception:
        logger.exception(f"Notifier failed while reporting: {message}")


class Notifier:
    """
    A base class for notifiers.

    Subclasses implement `notify`. Instances are callable so they can be passed
    wherever a plain function is expected.
    """

    def notify(self, message: str, severity: Severity) -> None:
        raise NotImplementedError("Subclasses must implement the notify() method.")

    def __call__(self, message: str, severity: Severity) -> None:
        self.notify(message, severity)


class LoguruNotifier(Notifier):
    """Reports problems on the console through the application logger."""

    def notify(self, message: str, severity: Severity) -> None:
        if severity is Severity.ERROR:
            logger.error(message)
        elif severity is Severity.WARNING:
            logger.warning(message)
        else:
            logger.info(message)


class ErrorLogNotifier(Notifier):
    """
    Appends warnings and errors to a plain text log file.

    Each event is written on its own line followed by a separator line, which
    keeps the file readable when several runs append to it. Informational
    messages are not written.
    """

    def __init__(self, log_base_path: Path, filename: str = DEFAULT_ERROR_LOG_FILENAME):
        """
        Initializes the ErrorLogNotifier instance.

        Args:
            log_base_path: The directory for the log file, or the path of the log
                           file itself if it does not point to a directory.
            filename: The name of the log file when a directory is given.
        """
        if log_base_path.is_dir():
            self.log_file_path = log_base_path.resolve() / filename
        else:
            self.log_file_path = log_base_path.resolve()
        self.log_file_path.parent.mkdir(parents=True, exist_ok=True)

    def notify(self, message: str, severity: Severity) -> None:
        if severity is Severity.INFO:
            return

        content_to_write = f"[{severity.value.upper()}] {message}\n{ERROR_LOG_SEPARATOR}\n"
        try:
            with self.log_file_path.open("a", encoding="utf-8") as f:
                f.write(content_to_write)
        except OSError as e:
            # Keep the message on the console if the file cannot be written.
            logger.error(f"Failed to write to error log {self.log_file_path}: {e}")
            logger.error(f"Original message: {message}")


class CollectingNotifier(Notifier):
    """Keeps every notification in memory, in the order received."""

    def __init__(self):
        self.messages: List[Tuple[str, Severity]] = []

    def notify(self, message: str, severity: Severity) -> None:
        self.messages.append((message, severity))

    def with_severity(self, severity: Severity) -> List[str]:
        return [message for message, sev in self.messages if sev is severity]


class CompositeNotifier(Notifier):
    """Forwards each notification to several notifiers."""

    def __init__(self, *notifiers: NotifyCallable):
        self.notifiers = list(notifiers)

    def notify(self, message: str, severity: Severity) -> None:
        for notifier in self.notifiers:
            safe_notify(notifier, message, severity)
