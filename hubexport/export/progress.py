"""Progress reporters for the export pipeline."""

import logging

from ..core.interfaces import ProgressReporter

logger = logging.getLogger(__name__)


class LoggingProgressReporter(ProgressReporter):
    """Writes progress through the logging system."""

    def __init__(self, log: logging.Logger = logger):
        self.log = log

    def stage(self, title: str) -> None:
        self.log.info(f"{title}:")

    def detail(self, message: str) -> None:
        if message:
            self.log.info(message)


class NullProgressReporter(ProgressReporter):
    """Discards all progress output."""

    def stage(self, title: str) -> None:
        pass

    def detail(self, message: str) -> None:
        pass
