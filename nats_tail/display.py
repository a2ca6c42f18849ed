#!/usr/bin/env python3
"""
Display Engine - renders NATS messages as aligned, colorized terminal lines.
Tracks the longest subject seen so far so the ' | ' separators line up.
"""
import json
import logging
from dataclasses import dataclass
from typing import Optional

from .errors import UnsupportedFormatError
from .stats import TailStats

logger = logging.getLogger(__name__)

DEFAULT_PADDING_SIZE = 20
DEFAULT_TIMESTAMP_PADDING_SIZE = 30

FNV32_OFFSET_BASIS = 0x811c9dc5
FNV32_PRIME = 0x01000193


class OutputFormat:
    RAW = "raw"
    DOCKER_LOGS = "docker-logs"


def fnv1a_32(data: bytes) -> int:
    """32-bit FNV-1a hash."""
    h = FNV32_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * FNV32_PRIME) & 0xFFFFFFFF
    return h


def color_index(subject: str) -> int:
    """Pick one of 6 palette slots for a subject."""
    return fnv1a_32(subject.encode('utf-8')) % 6


def hash_color(subject: str) -> str:
    """Wrap a subject in a bright ANSI foreground color derived from its hash."""
    return f"\033[1;3{color_index(subject) + 1}m{subject}\033[0m"


@dataclass
class DockerLogEntry:
    """One line of docker log output as shipped over NATS."""
    time: str = ""
    text: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> 'DockerLogEntry':
        return cls(
            time=_as_text(data.get("time")),
            text=_as_text(data.get("text"))
        )

    @classmethod
    def from_json(cls, data: bytes) -> 'DockerLogEntry':
        """Parse a payload; raises ValueError unless it is a JSON object or null."""
        try:
            decoded = json.loads(data.decode('utf-8') if isinstance(data, bytes) else data)
        except UnicodeDecodeError as e:
            raise ValueError(f"invalid UTF-8 payload: {e}") from e
        except RecursionError as e:
            raise ValueError(f"JSON nested too deeply: {e}") from e
        if decoded is None:
            # null decodes to an empty entry
            return cls()
        if not isinstance(decoded, dict):
            raise ValueError(f"expected a JSON object, got {type(decoded).__name__}")
        return cls.from_dict(decoded)


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


class Engine:
    """Stateful formatter for incoming messages.

    `longest_subject` only grows. It is updated before the padding for the
    current message is computed, so the message that sets a new maximum is
    printed with no padding and earlier lines are never realigned.
    """

    def __init__(self, output_format: str = OutputFormat.RAW, show_timestamp: bool = False,
                 stats: Optional[TailStats] = None):
        self.format = output_format
        self.show_timestamp = show_timestamp
        self.longest_subject = DEFAULT_PADDING_SIZE
        self.stats = stats or TailStats()

    def padding_for(self, subject: str) -> str:
        size = len(subject)
        if size > self.longest_subject:
            self.longest_subject = size
        return " " * (self.longest_subject - size)

    def format_line(self, subject: str, payload: bytes, padding: str) -> str:
        """Build the output line for one message.

        Raises ValueError for an unparsable docker-logs payload and
        UnsupportedFormatError for an unknown output format.
        """
        if self.format == OutputFormat.DOCKER_LOGS:
            entry = DockerLogEntry.from_json(payload)
            if self.show_timestamp:
                timestamp = entry.time.ljust(DEFAULT_TIMESTAMP_PADDING_SIZE)
                return f"{hash_color(subject)}{padding} | {timestamp} -- {entry.text}"
            return f"{hash_color(subject)}{padding} | {entry.text}"
        elif self.format == OutputFormat.RAW:
            return f"{hash_color(subject)}{padding} | {payload.decode('utf-8', errors='replace')}"

        raise UnsupportedFormatError(f"Unsupported output format: {self.format!r}")

    def render(self, subject: str, payload: bytes) -> str:
        """Format one message and write it to the log stream."""
        padding = self.padding_for(subject)
        try:
            line = self.format_line(subject, payload, padding)
        except ValueError as e:
            # docker-logs payload that is not JSON; report it and move on
            line = f"{subject}{padding} | {e}"
            self.stats.record(False)
            logger.info(line)
            return line

        self.stats.record(True)
        logger.info(line)
        return line
