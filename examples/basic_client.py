"""
basic_client.py: minimal restex client example.

Defines one endpoint group, then runs the same cached GET three ways:
blocking, with a callback, and awaited.

Usage:
    export RESTEX_BASE_URL=https://api.example.com/v1
    export RESTEX_ACCESS_TOKEN=...
    python examples/basic_client.py 0TnOYISbd1XYRBk9myaseg
"""

import asyncio
import json
import logging
import os
import sys
import threading
import time

from restex import Endpoint, RestClient, RestSettings, Token, encode


class ArtistsEndpoint(Endpoint):
    def get_artist(self, artist_id: str, market: str | None = None):
        return self.get_action(
            f"artists/{encode(artist_id)}",
            params={"market": market},
            parse=json.loads,
            cache_ttl_s=30.0,
        )


async def fetch_awaited(artists: ArtistsEndpoint, artist_id: str) -> dict:
    return await artists.get_artist(artist_id).acomplete()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    artist_id = sys.argv[1] if len(sys.argv) > 1 else "0TnOYISbd1XYRBk9myaseg"
    token = Token(
        access_token=os.environ["RESTEX_ACCESS_TOKEN"],
        expires_at=time.time() + 3600,
    )

    with RestClient(settings=RestSettings.from_env(), token=token) as client:
        artists = ArtistsEndpoint(client)

        artist = artists.get_artist(artist_id).complete()
        print("blocking:", artist.get("name"))

        done = threading.Event()

        def on_result(value: dict) -> None:
            print("callback (cached):", value.get("name"))
            done.set()

        def on_error(error: Exception) -> None:
            print("callback failed:", error)
            done.set()

        artists.get_artist(artist_id).complete_async(on_result, on_error)
        done.wait(timeout=30)

        awaited = asyncio.run(fetch_awaited(artists, artist_id))
        print("awaited:", awaited.get("name"))


if __name__ == "__main__":
    main()
