"""nats-tail: follow messages on a NATS subject in the terminal."""

__version__ = "0.1.0"
