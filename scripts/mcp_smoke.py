#!/usr/bin/env python3
"""Call the scheduling MCP tools of a running server over streamable HTTP."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from datetime import date, timedelta

from mcp.client.session import ClientSession
from mcp.client.streamable_http import streamablehttp_client

BASE = os.getenv("SALON_MCP_BASE", "http://127.0.0.1:8000/mcp")


async def main(base: str, service_id: str, day: date) -> None:
    print("SALON_MCP_BASE =", base)
    async with streamablehttp_client(base) as (read, write, _):
        async with ClientSession(read, write) as session:
            await session.initialize()
            tools = await session.list_tools()
            print("TOOLS:", [tool.name for tool in tools.tools])

            res = await session.call_tool("ping", {"message": "hello"})
            print("PING RESULT:", res)

            res = await session.call_tool(
                "slots_list",
                {"input": {"service_id": service_id, "date": day.isoformat()}},
            )
            print("SLOTS RESULT:", res)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--base", default=BASE, help="MCP endpoint URL")
    parser.add_argument("--service-id", default="s2", help="Catalog service to list slots for")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=date.today() + timedelta(days=1),
        help="Day to list slots for (YYYY-MM-DD)",
    )
    parser.add_argument("--debug", action="store_true", help="Log MCP transport traffic")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    )
    asyncio.run(main(args.base, args.service_id, args.date))
