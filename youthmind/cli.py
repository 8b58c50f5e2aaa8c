"""
Command-line interface tools for the YouthMind service.
"""

import asyncio
import json
from collections.abc import Coroutine
from datetime import datetime
from typing import Any

import httpx
import typer
from httpx_sse import ServerSentEvent, aconnect_sse

from .models import MoodSignal

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_SESSION = "cli"

app = typer.Typer(help="YouthMind CLI tools")

BaseUrl = typer.Option(
    DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the YouthMind service"
)
Session = typer.Option(DEFAULT_SESSION, "--session", "-s", help="Session id")
Language = typer.Option("en", "--lang", "-l", help="Language to respond in")


# MARK: - Commands


@app.command("check-in")
def check_in(
    text: str = typer.Argument(..., help="How you are feeling, in your own words"),
    base_url: str = BaseUrl,
    session: str = Session,
    language: str = Language,
) -> None:
    """Share how you feel and get a supportive reply plus a recommendation."""

    async def _check_in() -> None:
        result = await _post(
            base_url, f"/sessions/{session}/check-in", {"text": text, "language": language}
        )
        if _print_crisis(result):
            return
        body = result["result"]
        print(f"Mood: {body['mood']}")
        print(body["response"])
        if body.get("recommendation"):
            print(f"\nTry this: {body['recommendation']}")

    _run_with_error_handling(_check_in(), base_url)


@app.command()
def chat(
    text: str = typer.Argument(..., help="Message for the counselor"),
    base_url: str = BaseUrl,
    session: str = Session,
    language: str = Language,
) -> None:
    """Send one message to the AI counselor."""

    async def _chat() -> None:
        result = await _post(
            base_url, f"/sessions/{session}/chat", {"text": text, "language": language}
        )
        if not _print_crisis(result):
            print(result["result"]["response"])

    _run_with_error_handling(_chat(), base_url)


@app.command("set-mood")
def set_mood(
    mood: str = typer.Argument(..., help="The mood value to set"),
    base_url: str = BaseUrl,
    session: str = Session,
) -> None:
    """Set the session's mood by hand."""

    async def _set_mood() -> None:
        async with httpx.AsyncClient() as client:
            response = await client.put(
                f"{base_url}/sessions/{session}/mood", json={"mood": mood}
            )
            response.raise_for_status()
            print(f"Mood set to: {response.json()['mood']['mood']}")

    _run_with_error_handling(_set_mood(), base_url)


@app.command("mood")
def get_mood(
    base_url: str = BaseUrl,
    session: str = Session,
    json_output: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
) -> None:
    """Get the session's current mood."""

    async def _get_mood() -> None:
        async with httpx.AsyncClient() as client:
            response = await client.get(f"{base_url}/sessions/{session}/mood")
            response.raise_for_status()
            result = response.json()

            if json_output:
                print(json.dumps(result, indent=2))
                return

            if result["mood"] is None:
                print("No mood set")
            else:
                print(MoodSignal.model_validate(result["mood"]).mood)

    _run_with_error_handling(_get_mood(), base_url)


@app.command()
def stream(base_url: str = BaseUrl, session: str = Session) -> None:
    """Stream the session's mood updates in real-time."""

    async def _stream() -> None:
        url = f"{base_url}/sessions/{session}/mood/stream"
        print(f"Streaming from {url}... (Ctrl+C to stop)")

        async with httpx.AsyncClient(timeout=None) as client:
            async with aconnect_sse(client, "GET", url) as event_source:
                async for sse in event_source.aiter_sse():
                    _handle_sse_event(sse)

    _run_with_error_handling(_stream(), base_url)


@app.command()
def threads(
    base_url: str = BaseUrl,
    session: str | None = typer.Option(
        None, "--session", "-s", help="Narrow to threads matching this session's mood"
    ),
) -> None:
    """List peer support threads, newest first."""

    async def _threads() -> None:
        params = {"session_id": session} if session else {}
        async with httpx.AsyncClient() as client:
            response = await client.get(f"{base_url}/threads", params=params)
            response.raise_for_status()
            for thread in response.json()["threads"]:
                tags = ", ".join(thread["tags"])
                print(f"[{thread['createdAt']}] {thread['title']} ({tags})")

    _run_with_error_handling(_threads(), base_url)


@app.command()
def post(
    title: str = typer.Argument(..., help="Thread title"),
    content: str = typer.Argument(..., help="Thread body"),
    tag: list[str] = typer.Option([], "--tag", "-t", help="Tag, repeatable"),
    base_url: str = BaseUrl,
) -> None:
    """Start a new peer support thread."""

    async def _post_thread() -> None:
        async with httpx.AsyncClient(timeout=None) as client:
            response = await client.post(
                f"{base_url}/threads", json={"title": title, "content": content, "tags": tag}
            )
            if response.status_code == 422:
                print(f"Rejected: {response.json()['detail']}")
                raise typer.Exit(1)
            response.raise_for_status()
            print(f"Posted thread {response.json()['thread']['id']}")

    _run_with_error_handling(_post_thread(), base_url)


# MARK: - Private Helpers


async def _post(base_url: str, path: str, payload: dict[str, Any]) -> dict[str, Any]:
    # Model calls can be slow; no local timeout.
    async with httpx.AsyncClient(timeout=None) as client:
        response = await client.post(f"{base_url}{path}", json=payload)
        response.raise_for_status()
        return response.json()


def _print_crisis(result: dict[str, Any]) -> bool:
    """Print the safety resources if the server short-circuited; return whether it did."""
    if not result.get("crisis"):
        return False
    resources = result["resources"]
    print(resources["title"])
    print(resources["message"])
    for helpline in resources["helplines"]:
        print(f"  {helpline['name']}: {helpline['number']}")
    print(resources["emergency_note"])
    return True


def _format_mood_timestamp(mood: MoodSignal) -> str:
    """Format mood with optional timestamp."""
    if not mood.timestamp:
        return mood.mood

    dt = datetime.fromtimestamp(mood.timestamp)
    timestamp = dt.strftime("%H:%M:%S")
    return f"{timestamp} > {mood.mood} ({mood.source})"


def _handle_sse_event(sse: ServerSentEvent) -> None:
    """Handle a single SSE event."""
    try:
        if sse.event == "error":
            error_data = json.loads(sse.data)
            print(f"Server error: {error_data.get('error', 'Unknown error')}")
            return

        mood = MoodSignal.model_validate(json.loads(sse.data))
        print(_format_mood_timestamp(mood))

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
    except typer.Exit:
        raise
    except httpx.ConnectError:
        print(f"Error: Could not connect to {base_url}")
        raise typer.Exit(1)
    except httpx.HTTPStatusError as e:
        detail = _error_detail(e.response)
        print(f"Error: HTTP {e.response.status_code}{detail}")
        raise typer.Exit(1)
    except Exception as e:
        error_msg = str(e) if str(e) else f"Unknown error of type {type(e).__name__}"
        print(f"Error: {error_msg}")
        raise typer.Exit(1)


def _error_detail(response: httpx.Response) -> str:
    try:
        return f" - {response.json()['detail']}"
    except (ValueError, KeyError, TypeError):
        return ""


def main() -> None:
    """Entry point for the youthmind CLI."""
    app()


if __name__ == "__main__":
    main()
