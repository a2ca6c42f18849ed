#!/usr/bin/env python3
"""
Stats Collector - message counters for a tail session.
Summarized once when the subscriber shuts down.
"""
import time


class TailStats:
    """Tracks how many messages were received, rendered and rejected."""

    def __init__(self):
        self.received = 0
        self.rendered = 0
        self.failed = 0
        self.start_time = None
        self.end_time = None

    def record(self, success: bool):
        """Record a single message result."""
        self.received += 1
        if success:
            self.rendered += 1
        else:
            self.failed += 1

    def set_duration(self, start_ms: float, end_ms: float):
        """Set the overall session duration."""
        self.start_time = start_ms
        self.end_time = end_ms

    def get_duration_ms(self) -> float:
        """Get total duration in milliseconds."""
        if self.start_time is not None and self.end_time is not None:
            return self.end_time - self.start_time
        return 0.0

    def summary(self) -> str:
        return (f"Received {self.received} messages ({self.failed} unparsable) "
                f"in {self.get_duration_ms():.0f} ms")


def get_current_time_ms() -> float:
    """Get current time in milliseconds."""
    return time.time() * 1000
