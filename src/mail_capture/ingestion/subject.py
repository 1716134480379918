"""Subject header lookup on decoded message text."""

from __future__ import annotations

import io
import logging
import re
from typing import TextIO

LOGGER = logging.getLogger(__name__)

SUBJECT_PATTERN = re.compile(r"Subject: (.*)")


class SubjectExtractor:
    """Find the first ``Subject:`` line of a message."""

    def __init__(self, pattern: re.Pattern[str] = SUBJECT_PATTERN) -> None:
        self._pattern = pattern

    def extract(self, text: str | TextIO) -> str:
        """Return the raw value of the first subject line, or ``""``.

        Only a line consisting entirely of ``Subject: <value>`` counts; the
        header name is case sensitive and encoded words are left as is.
        """
        reader = io.StringIO(text, newline=None) if isinstance(text, str) else text
        try:
            for line in reader:
                match = self._pattern.fullmatch(line.rstrip("\r\n"))
                if match:
                    return match.group(1)
        except OSError:
            LOGGER.error("Cannot obtain the subject", exc_info=True)
        return ""


__all__ = ["SUBJECT_PATTERN", "SubjectExtractor"]
