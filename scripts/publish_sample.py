#!/usr/bin/env python3
"""
Sample publisher for trying out nats-tail by hand.
Publishes numbered messages as raw text or as docker-logs JSON lines.
Usage: python scripts/publish_sample.py --subject docker.web --format docker-logs
"""
import argparse
import asyncio
import json
import random
from datetime import datetime, timezone

import nats

WORDS = ["GET", "POST", "/health", "/api/v1/items", "200", "404", "500", "ok", "slow", "retry"]


def build_payload(index: int, fmt: str = "raw") -> bytes:
    text = f"message {index}: {' '.join(random.sample(WORDS, 3))}"
    if fmt == "docker-logs":
        return json.dumps({
            "time": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "text": text,
            "stream": "stdout"
        }).encode()
    return text.encode()


async def main():
    parser = argparse.ArgumentParser(description="Publish sample messages for nats-tail")
    parser.add_argument("--server", default="nats://localhost:4222", help="NATS server URL")
    parser.add_argument("--subject", default="docker.sample", help="Subject to publish to")
    parser.add_argument("--format", choices=["raw", "docker-logs"], default="raw", help="Payload format")
    parser.add_argument("--messages", type=int, default=10, help="Number of messages to publish (default: 10)")
    parser.add_argument("--interval", type=float, default=0.5, help="Seconds between messages")
    args = parser.parse_args()

    nc = await nats.connect(servers=[args.server])
    for i in range(args.messages):
        await nc.publish(args.subject, build_payload(i + 1, args.format))
        print(f"Published to {args.subject}: message {i + 1}")
        await asyncio.sleep(args.interval)
    await nc.drain()


if __name__ == "__main__":
    asyncio.run(main())
