"""Exceptions raised by nats-tail. The CLI turns each of them into a fatal exit."""


class TailError(Exception):
    """Base class for nats-tail errors."""
    pass


class ConnectError(TailError):
    """Could not connect to any of the configured NATS servers."""
    pass


class SubscribeError(TailError):
    """The server rejected the subscription or the post-subscribe flush failed."""
    pass


class UnsupportedFormatError(TailError):
    """The engine was asked to render with an output format it does not know."""
    pass
