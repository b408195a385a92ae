#!/usr/bin/env python3

import asyncio
import json
from typing import Any

import click
import httpx


async def rpc_post(client: httpx.AsyncClient, url: str, payload: dict) -> tuple[int, Any | None]:
    r = await client.post(url, json=payload)
    if not r.content:
        return r.status_code, None
    return r.status_code, r.json()


async def run(base: str, uri: str) -> None:
    default_headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }

    async with httpx.AsyncClient(timeout=20.0, headers=default_headers) as client:
        init = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "initialize",
            "params": {
                "protocolVersion": "2025-06-18",
                "capabilities": {},
                "clientInfo": {"name": "example-client", "version": "0.1.0"},
            },
        }
        status, body = await rpc_post(client, base, init)
        print("initialize:", status, json.dumps(body))

        status, _ = await rpc_post(client, base, {"jsonrpc": "2.0", "method": "notifications/initialized"})
        print("initialized:", status)

        status, body = await rpc_post(client, base, {"jsonrpc": "2.0", "id": 2, "method": "resources/list"})
        print("resources/list:", status, json.dumps(body))

        status, body = await rpc_post(
            client, base, {"jsonrpc": "2.0", "id": 3, "method": "resources/read", "params": {"uri": uri}}
        )
        print("resources/read:", status)
        if body and "result" in body:
            for content in body["result"]["contents"]:
                print(content["text"])
        else:
            print(json.dumps(body))

        # Every request gets its own session, so a GET is rejected at the transport
        r = await client.get(base)
        print("GET:", r.status_code)


@click.command()
@click.option("--base", default="http://127.0.0.1:3000/mcp", help="URL of the bridge endpoint")
@click.option("--uri", default="categories://summary", help="Resource URI to read")
def main(base: str, uri: str) -> None:
    asyncio.run(run(base, uri))


if __name__ == "__main__":
    main()
