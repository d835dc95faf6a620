"""Protean Engine runner for the ratings domain.

In production (``PROTEAN_ENV=production``) events are processed
asynchronously: the OutboxProcessor publishes RatingSubmitted and
ProviderReplyAttached to Redis Streams, and stream subscriptions run the
provider reputation refresh.

Usage:
    python src/server.py
"""

import asyncio

from protean.server.engine import Engine


async def run():
    from ratings.domain import ratings

    ratings.init()
    await Engine(ratings).run()


def main():
    asyncio.run(run())


if __name__ == "__main__":
    main()
