"""Keep a headless copy of a page in sync with a development server.

Connects to the server's live-reload socket and applies every change
notification: full reloads, or in-place HTML/CSS patches in diff mode.

    pip install wds-client

    # Watch the site root
    python examples/watch_page.py --url http://127.0.0.1:3000/

    # Force patch mode regardless of the page configuration
    python examples/watch_page.py --url http://127.0.0.1:3000/about/ --diff
"""

import argparse
import asyncio
import logging
import signal

from wds_client import ClientConfig, watch


async def main(url: str, diff: bool | None):
    stop = asyncio.Event()
    loop = asyncio.get_event_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    config = ClientConfig(patch_mode_enabled=True) if diff else None
    client = await watch(url, config)

    if not await client.wait_until_healthy():
        print(f"Server at {client.page.origin} is not answering, watching anyway")

    async with client:
        print(f"Watching {url}")
        print(f"Socket: {client.socket_url} (diff mode: {client.config.patch_mode_enabled})")
        print("Waiting for changes... (Ctrl+C to stop)\n")
        await stop.wait()

    print(f"Page reloaded {client.page.reload_count} time(s)")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="WDS headless live-reload client")
    parser.add_argument("--url", default="http://127.0.0.1:3000/")
    parser.add_argument(
        "--diff",
        action="store_true",
        help="Enable patch mode even if the page does not ask for it",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    asyncio.run(main(args.url, args.diff or None))
