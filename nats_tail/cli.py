#!/usr/bin/env python3
"""
nats-tail command line.
Usage: nats-tail [-s server] [-o raw|docker-logs] [-t] <subject>

Use the tls scheme for TLS, e.g. nats-tail -s tls://demo.nats.io:4443 "docker.>"
"""
import argparse
import asyncio
import logging
import signal
import sys

from . import __version__
from .display import Engine, OutputFormat
from .errors import TailError
from .subscriber import DEFAULT_URL, Tail, parse_servers

logger = logging.getLogger("nats_tail")

USAGE = "nats-tail [-s server] <subject>"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nats-tail",
        usage=USAGE,
        description="Follow messages published on a NATS subject"
    )
    parser.add_argument("-s", dest="servers", default=DEFAULT_URL,
                        help=f"The nats server URLs, separated by comma (default: {DEFAULT_URL})")
    # Not restricted with choices: an unknown format only fails once a message arrives
    parser.add_argument("-o", dest="output_format", default=OutputFormat.RAW,
                        help="Display output format: raw or docker-logs (default: raw)")
    parser.add_argument("-t", dest="show_timestamp", action="store_true",
                        help="Display timestamp (docker-logs format only)")
    parser.add_argument("-v", dest="show_version", action="store_true",
                        help="Show nats-tail version")
    parser.add_argument("-D", dest="debug", action="store_true",
                        help="Enable debug logging")
    parser.add_argument("subject", nargs="?", help="Subject to tail, wildcards allowed")
    return parser


def setup_logging(debug: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        stream=sys.stderr
    )
    if not debug:
        # nats-py reports connection problems through our error callback
        logging.getLogger("nats").setLevel(logging.CRITICAL)


def fatal(message: str):
    logger.critical(message)
    sys.exit(1)


async def run(args) -> None:
    engine = Engine(args.output_format, args.show_timestamp)
    tail = Tail(parse_servers(args.servers), args.subject, engine)

    stop_event = asyncio.Event()

    def signal_handler():
        logger.debug("Received shutdown signal")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, signal_handler)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            signal.signal(sig, lambda *_: loop.call_soon_threadsafe(signal_handler))

    await tail.run(stop_event)


def main(argv=None):
    parser = build_parser()
    args, extra = parser.parse_known_args(argv)
    setup_logging(args.debug)

    if args.show_version:
        logger.info(f"nats-tail v{__version__}")
        sys.exit(0)

    unknown_flags = [arg for arg in extra if arg.startswith("-")]
    if unknown_flags:
        parser.error(f"unrecognized arguments: {' '.join(unknown_flags)}")
    if extra:
        # only the first subject is tailed
        logger.debug(f"Ignoring extra arguments: {' '.join(extra)}")

    if not args.subject:
        fatal(f"Usage: {USAGE}")

    try:
        asyncio.run(run(args))
    except TailError as e:
        fatal(str(e))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
