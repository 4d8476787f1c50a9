"""
Command-line interface tools for the Moodblog service.
"""

import asyncio
import json
from collections.abc import Coroutine
from datetime import datetime
from typing import Any

import httpx
import typer
from httpx_sse import ServerSentEvent, aconnect_sse

from .config import setup_logging
from .models import MoodEvent
from .resolver import resolve_theme, resolve_topics

DEFAULT_BASE_URL = "http://localhost:8000"

app = typer.Typer(help="Moodblog CLI tools")


# MARK: - CLI Entry Points


def cli_set_mood() -> None:
    """Entry point for mood-set CLI command."""
    typer.run(set_mood)


def cli_stream() -> None:
    """Entry point for mood-stream CLI command."""
    typer.run(stream)


# MARK: - Commands


@app.command()
def serve() -> None:
    """Run the Moodblog server (configured through MOODBLOG_* variables)."""
    from .server import main

    main()


@app.command()
def resolve(
    mood: str = typer.Argument(..., help="How you are feeling"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log resolution details"),
) -> None:
    """Resolve a mood offline, using the keyword heuristic only."""
    if verbose:
        setup_logging("moodblog", "debug")

    async def _resolve() -> None:
        if not mood.strip():
            print("Empty mood: theme unchanged, no topics")
            return
        theme = await resolve_theme(mood)
        topics = await resolve_topics(mood)
        print(f"Theme: {theme}")
        print(f"Topics: {', '.join(topics)}")

    asyncio.run(_resolve())


@app.command()
def set_mood(
    mood: str = typer.Argument(..., help="How you are feeling; empty clears filters"),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the Moodblog service"
    ),
) -> None:
    """Submit a mood to the Moodblog service."""

    async def _set_mood() -> None:
        async with httpx.AsyncClient(timeout=None) as client:
            response = await client.put(f"{base_url}/mood", json={"mood": mood})
            response.raise_for_status()
            result = response.json()
            if result.get("alert"):
                print(result["alert"])
            print(f"Theme: {result['theme']} ({result['source']})")

    _run_with_error_handling(_set_mood(), base_url)


@app.command()
def posts(
    mood: str = typer.Option("", "--mood", "-m", help="Filter posts by a mood"),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the Moodblog service"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
) -> None:
    """List posts, optionally filtered by a mood."""

    async def _posts() -> None:
        async with httpx.AsyncClient(timeout=None) as client:
            response = await client.get(f"{base_url}/posts", params={"mood": mood})
            response.raise_for_status()
            result = response.json()

            if json_output:
                print(json.dumps(result, indent=2))
                return

            if result["filtering_active"]:
                print(f"Showing posts related to: {', '.join(result['topics'])}")
            for post in result["posts"]:
                category = f" [{post['category']}]" if post["category"] else ""
                print(f"{post['date'] or '----------'}  {post['title']}{category}")

    _run_with_error_handling(_posts(), base_url)


@app.command()
def stream(
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the Moodblog service"
    ),
) -> None:
    """Stream mood submissions in real-time."""

    async def _stream() -> None:
        print(f"Streaming from {base_url}/mood/stream... (Ctrl+C to stop)")

        async with httpx.AsyncClient(timeout=None) as client:
            async with aconnect_sse(
                client, "GET", f"{base_url}/mood/stream"
            ) as event_source:
                async for sse in event_source.aiter_sse():
                    _handle_sse_event(sse)

    _run_with_error_handling(_stream(), base_url)


# MARK: - Private Helpers


def _format_mood_event(event: MoodEvent) -> str:
    """Format a mood event with optional timestamp."""
    prompt = event.prompt or "(cleared)"
    if not event.timestamp:
        return prompt

    dt = datetime.fromtimestamp(event.timestamp)
    timestamp = dt.strftime("%H:%M:%S")
    return f"{timestamp} > {prompt}"


def _handle_sse_event(sse: ServerSentEvent) -> None:
    """Handle a single SSE event."""
    try:
        if sse.event == "error":
            error_data = json.loads(sse.data)
            print(f"Server error: {error_data.get('error', 'Unknown error')}")
            return

        raw_data = json.loads(sse.data)
        if "error" in raw_data:
            print(f"Server error: {raw_data['error']}")
            return

        event = MoodEvent.model_validate(raw_data)
        print(_format_mood_event(event))

    except json.JSONDecodeError as e:
        print(f"Warning: Could not parse SSE data: {sse.data} - {e}")
    except Exception as e:
        print(f"Warning: Error processing mood data: {e}")


def _run_with_error_handling(coro: Coroutine[Any, Any, Any], base_url: str) -> None:
    """Run an async coroutine with standardized error handling."""
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        print("\nStopped")
        raise typer.Exit(0)
    except httpx.ConnectError:
        print(f"Error: Could not connect to {base_url}")
        raise typer.Exit(1)
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 409:
            print("Error: Still resolving the previous mood, try again shortly")
        else:
            print(f"Error: HTTP {e.response.status_code}")
        raise typer.Exit(1)
    except Exception as e:
        error_msg = str(e) if str(e) else f"Unknown error of type {type(e).__name__}"
        print(f"Error: {error_msg}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
