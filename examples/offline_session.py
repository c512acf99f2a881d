#!/usr/bin/env python3
"""Offline session example for dracoclient.

Runs a full device session (boot, sign-in, avatar, map update) against
the in-memory MockTransport, then prints every call the fake service saw.
"""

from __future__ import annotations

import asyncio
import logging

from dracoclient import DracoClient, WireBytes, WireInt, WireRecord, WireSequence
from dracoclient.log import configure_logging
from dracoclient.models import Tile
from dracoclient.transport import MockTransport, MockTransportConfig


def auth_result(args: object) -> WireRecord:
    return WireRecord(
        "AuthResult",
        (("info", WireRecord("FAuthInfo", (("userId", WireBytes(b"offline-user")),))),),
    )


def map_update(args: object) -> WireRecord:
    tile = WireRecord("FTile", (("x", WireInt(8529)), ("y", WireInt(5974)), ("zoom", WireInt(15))))
    return WireRecord("FUpdateResponse", (("tileUpdates", WireSequence((tile,))),))


async def run() -> None:
    transport = MockTransport(MockTransportConfig(rotate_tokens=True, latency=0.01))
    transport.on("AuthService", "trySingIn", auth_result)
    transport.on("MapService", "getUpdate", map_update)

    async with DracoClient(transport) as client:
        await client.boot({"userId": "", "deviceId": "0f6c1a4e-offline"})
        await client.login()
        await client.set_avatar(271)
        await client.load()

        cache = {Tile(x=8529, y=5974, zoom=15): 1}
        update = await client.get_map_update(45.4642, 9.19, tiles_cache=cache)

        print(f"User: {client.user.id}, avatar {client.user.avatar}")
        print(f"Session token: {client.session.token}")
        print(f"Tiles updated: {len(update.project('tileUpdates').as_sequence())}")
        print()

    print(f"{len(transport.calls)} calls:")
    for call in transport.calls:
        args = call.args
        if call.method == "onEvent":
            detail = args.project("0").as_text()
        else:
            detail = f"{len(call.payload)} bytes"
        print(f"  {call.service}.{call.method:<18} token={call.token!s:<10} {detail}")


def main() -> None:
    """Run the offline session example."""
    configure_logging(logging.INFO)
    asyncio.run(run())


if __name__ == "__main__":
    main()
