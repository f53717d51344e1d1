#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio

from relaxoncouch import ApplicationError, CouchServer, FeedMode, ServerConfig


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Write a document and wait for it on a long-poll feed")
    p.add_argument("db")
    p.add_argument("doc_id", nargs="?", default="quickstart")
    return p.parse_args()


async def main() -> None:
    args = parse_args()

    async with CouchServer(ServerConfig.from_env()) as couch:
        db = couch.use_db(args.db)
        try:
            await couch.create_db(args.db)
        except ApplicationError as e:
            if e.error != "file_exists":
                raise

        waiting = await db.changes(FeedMode.LONGPOLL, {"doc_ids": [args.doc_id], "filter": "_doc_ids"})

        try:
            current = await db.get(args.doc_id)
            doc = {**current, "counter": current.get("counter", 0) + 1}
        except ApplicationError as e:
            if e.status_code != 404:
                raise
            doc = {"_id": args.doc_id, "counter": 1}
        written = await db.put(doc)
        print(f"wrote {written.id} at {written.rev}")

        feed = await waiting.outcome
        for record in feed.results:
            print(f"change seen: {record.id} {[c.rev for c in record.changes]}")


if __name__ == "__main__":
    asyncio.run(main())
