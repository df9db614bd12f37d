#!/usr/bin/env python3
"""
TuneNoodle launcher.
Starts the player API (catalog, playback, search and favourites) and opens
the browser UI.
"""
import argparse
import logging
import threading
import webbrowser

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from shared.constants import DEFAULT_API_PORT

console = Console()


def main():
    parser = argparse.ArgumentParser(description="Run the TuneNoodle player")
    parser.add_argument("--port", type=int, default=DEFAULT_API_PORT)
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--no-browser", action="store_true", help="Do not open a browser window")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )

    from shared.api import start_api

    url = f"http://localhost:{args.port}/api/state"
    console.print(Panel.fit(
        f"[bold cyan]🎵 TuneNoodle[/bold cyan]\n\nLocal: {url}",
        border_style="cyan"
    ))
    if not args.no_browser:
        threading.Timer(1.5, webbrowser.open, args=(url,)).start()

    start_api(port=args.port, host=args.host, debug=args.debug)


if __name__ == "__main__":
    main()
