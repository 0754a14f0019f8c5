"""
Command-line interface tools for the MindWell Companion service.
"""

import asyncio
import json
from collections.abc import Coroutine
from typing import Any

import httpx
import typer

from .models import CompanionResponse, DashboardStats, Mood

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_USER = "me"

app = typer.Typer(help="MindWell Companion CLI tools")


# MARK: - Commands


@app.command()
def chat(
    message: str = typer.Argument(..., help="What you want to tell the companion"),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the MindWell service"
    ),
    user: str = typer.Option(DEFAULT_USER, "--user", help="User id to chat as"),
) -> None:
    """Send a message to the companion and print its reply."""

    async def _chat() -> None:
        async with httpx.AsyncClient(timeout=None) as client:
            response = await client.post(
                f"{base_url}/users/{user}/chat", json={"message": message}
            )
            response.raise_for_status()
            reply = CompanionResponse.model_validate(response.json())
            print(_format_companion_response(reply))

    _run_with_error_handling(_chat(), base_url)


@app.command()
def journal_prompt(
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the MindWell service"
    ),
) -> None:
    """Print a reflective journaling question."""

    async def _journal_prompt() -> None:
        async with httpx.AsyncClient(timeout=None) as client:
            response = await client.get(f"{base_url}/journal/prompt")
            response.raise_for_status()
            print(response.json()["prompt"])

    _run_with_error_handling(_journal_prompt(), base_url)


@app.command()
def log_mood(
    value: int = typer.Argument(
        ..., min=1, max=5, help="Mood from 1 (low) to 5 (high)"
    ),
    note: str | None = typer.Option(None, "--note", "-n", help="Optional note"),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the MindWell service"
    ),
    user: str = typer.Option(DEFAULT_USER, "--user", help="User id to log for"),
) -> None:
    """Log a mood reading."""

    async def _log_mood() -> None:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                f"{base_url}/users/{user}/moods", json={"value": value, "note": note}
            )
            response.raise_for_status()
            mood = Mood.model_validate(response.json())
            print(f"Mood logged: {mood.value}/5")

    _run_with_error_handling(_log_mood(), base_url)


@app.command()
def dashboard(
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the MindWell service"
    ),
    user: str = typer.Option(DEFAULT_USER, "--user", help="User id to summarise"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
) -> None:
    """Show mood score, completed activities and exercises, and the streak."""

    async def _dashboard() -> None:
        async with httpx.AsyncClient() as client:
            response = await client.get(f"{base_url}/users/{user}/dashboard")
            response.raise_for_status()
            result = response.json()

            if json_output:
                print(json.dumps(result, indent=2))
                return

            stats = DashboardStats.model_validate(result)
            print(f"Mood score: {stats.mood_score}")
            print(f"Activities completed: {stats.daily_activities}")
            print(f"Exercises completed: {stats.exercises_completed}")
            print(f"Streak: {stats.streak} day(s)")

    _run_with_error_handling(_dashboard(), base_url)


# MARK: - Private Helpers


def _format_companion_response(response: CompanionResponse) -> str:
    """Render a companion reply for the terminal."""
    lines = [response.message]

    if response.sentiment:
        lines.append(
            f"\nSentiment: {response.sentiment.rating}/5 "
            f"(confidence {response.sentiment.confidence:.2f})"
        )

    if response.suggestions:
        lines.append("\nYou could try:")
        lines.extend(f"  - {s}" for s in response.suggestions)

    return "\n".join(lines)


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
        print(f"Error: HTTP {e.response.status_code}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
