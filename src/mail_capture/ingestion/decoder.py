"""Conversion of raw SMTP submissions into message text."""

from __future__ import annotations

import io
import logging
import os
from typing import BinaryIO, TextIO

LOGGER = logging.getLogger(__name__)

# Lines the SMTP engine prepends to every submission (Received trace and
# envelope data); they are not part of the message itself.
PREAMBLE_LINES = 4

RawMessage = bytes | str | BinaryIO | TextIO


class StreamDecoder:
    """Read a raw submission line by line and drop the engine preamble."""

    def __init__(self, *, line_separator: str = os.linesep) -> None:
        """Use ``line_separator`` to terminate every retained line."""
        self._line_separator = line_separator

    def decode(
        self, stream: RawMessage, charset: str, skip_lines: int = PREAMBLE_LINES
    ) -> str:
        """Return the text of ``stream`` without its first ``skip_lines`` lines.

        Decoding is best effort: an ``OSError`` raised while reading, or a
        ``UnicodeDecodeError`` from a strict caller-supplied text stream, is
        logged and whatever was read up to that point is returned. Binary
        streams are decoded with undecodable bytes replaced.
        """
        if skip_lines < 0:
            raise ValueError("skip_lines must not be negative")

        reader, wrapper = _open_text(stream, charset)
        retained: list[str] = []
        line_number = 0
        try:
            for line in reader:
                line_number += 1
                if line_number > skip_lines:
                    retained.append(_strip_terminator(line))
                    retained.append(self._line_separator)
        except (OSError, UnicodeDecodeError):
            LOGGER.error(
                "Could not convert the stream after %d line(s)",
                line_number,
                exc_info=True,
            )
        finally:
            if wrapper is not None:
                # Leave the caller's stream open.
                wrapper.detach()

        if line_number <= skip_lines:
            LOGGER.debug(
                "Stream held %d line(s), nothing left after the preamble",
                line_number,
            )
        return "".join(retained)


def _strip_terminator(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line


def _open_text(
    stream: RawMessage, charset: str
) -> tuple[TextIO, io.TextIOWrapper | None]:
    """Return a universal-newline text reader over ``stream``.

    The second element is the wrapper created around a binary stream, if
    any, so the caller can detach it once reading is done.
    """
    if isinstance(stream, str):
        return io.StringIO(stream, newline=None), None
    if isinstance(stream, (bytes, bytearray)):
        stream = io.BytesIO(stream)
    if isinstance(stream, io.TextIOBase):
        return stream, None
    wrapper = io.TextIOWrapper(
        stream,  # type: ignore[arg-type]
        encoding=charset,
        errors="replace",
        newline=None,
    )
    return wrapper, wrapper


__all__ = ["PREAMBLE_LINES", "RawMessage", "StreamDecoder"]
