#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging

from relaxoncouch import ChangesFeedRecord, CouchServer, FeedMode, ServerConfig


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Follow a database's continuous changes feed")
    p.add_argument("db")
    p.add_argument("--since", default="now")
    p.add_argument("--include-docs", action="store_true")
    p.add_argument("--seconds", type=float, default=30.0, help="Abort after this many seconds")
    return p.parse_args()


def print_change(record: ChangesFeedRecord) -> None:
    flag = " (deleted)" if record.deleted else ""
    revs = ",".join(c.rev for c in record.changes)
    print(f"{record.seq} | {record.id}{flag} | {revs}")


async def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO)

    async with CouchServer(ServerConfig.from_env()) as couch:
        db = couch.use_db(args.db)
        feed = await db.changes(
            FeedMode.CONTINUOUS,
            {"since": args.since, "include_docs": args.include_docs or None},
            print_change,
        )
        try:
            heading = await asyncio.wait_for(asyncio.shield(feed.heading), args.seconds)
            print(f"feed finished at {heading.last_seq}")
        except asyncio.TimeoutError:
            feed.control.abort()
        await feed.control.wait()


if __name__ == "__main__":
    asyncio.run(main())
