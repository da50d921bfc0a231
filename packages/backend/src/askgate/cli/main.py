"""askgate CLI — run the server, log in, and talk to Gemini through it.

Usage:
    askgate serve                                # Run the API with uvicorn
    askgate register "Ana" ana@example.com       # Create an account, print token
    askgate login ana@example.com                # Print a fresh token
    askgate me --token $TOKEN                    # Who does this token belong to?
    askgate ask "what is a JWT?"                 # One question, no history
    askgate chat                                 # Interactive conversation
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8080"


def _api_url() -> str:
    return os.environ.get("ASKGATE_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the askgate backend."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    # No timeout on /ask: the proxy itself waits as long as Gemini does.
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=None)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous click handler."""
    return asyncio.run(coro)


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _fail(response: httpx.Response) -> None:
    """Print the API's error message and exit non-zero."""
    try:
        message = response.json().get("error", response.text)
    except ValueError:
        message = response.text
    click.secho(f"Error ({response.status_code}): {message}", fg="red", err=True)
    sys.exit(1)


def _require_token(token: Optional[str]) -> str:
    if not token:
        click.secho(
            "Error: --token required (or set ASKGATE_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return token


async def _ask(c: httpx.AsyncClient, question: str, history: list[dict]) -> str:
    r = await c.post("/api/ask", json={"question": question, "chatHistory": history})
    if r.status_code != 200:
        _fail(r)
    return r.json()["answer"]


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="askgate")
def main():
    """askgate — token-authenticated conversational proxy for Gemini."""


@main.command()
@click.option("--host", default=None, help="Bind host (default: ASKGATE_HOST)")
@click.option("--port", "-p", type=int, default=None, help="Bind port (default: ASKGATE_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from askgate.config import settings

    uvicorn.run(
        "askgate.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command()
@click.argument("name")
@click.argument("email")
@click.password_option()
def register(name: str, email: str, password: str):
    """Create an account and print its token."""
    _run(_register_impl(name, email, password))


async def _register_impl(name: str, email: str, password: str):
    async with _client() as c:
        r = await c.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        if r.status_code != 201:
            _fail(r)
        body = r.json()
        click.secho(f"Registered {body['data']['email']}", fg="green", err=True)
        click.echo(body["token"])


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
def login(email: str, password: str):
    """Log in and print a token."""
    _run(_login_impl(email, password))


async def _login_impl(email: str, password: str):
    async with _client() as c:
        r = await c.post(
            "/api/auth/login", json={"email": email, "password": password}
        )
        if r.status_code != 200:
            _fail(r)
        click.echo(r.json()["token"])


@main.command()
@click.option("--token", envvar="ASKGATE_TOKEN", help="Bearer token (or ASKGATE_TOKEN)")
def me(token: Optional[str]):
    """Show the user the token belongs to."""
    _run(_me_impl(_require_token(token)))


async def _me_impl(token: str):
    async with _client(token) as c:
        r = await c.get("/api/auth/me")
        if r.status_code != 200:
            _fail(r)
        click.echo(_pretty_json(r.json()["data"]))


@main.command()
@click.argument("question")
@click.option(
    "--history",
    "history_file",
    type=click.File("r"),
    help='JSON file with prior turns: [{"role": "human", "message": "..."}]',
)
def ask(question: str, history_file):
    """Ask a single question, optionally on top of a saved history."""
    history = json.load(history_file) if history_file else []
    _run(_ask_impl(question, history))


async def _ask_impl(question: str, history: list[dict]):
    async with _client() as c:
        click.echo(await _ask(c, question, history))


@main.command()
def chat():
    """Interactive conversation. History is kept here and resent each turn."""
    _run(_chat_impl())


async def _chat_impl():
    history: list[dict] = []
    click.secho("Chatting with Gemini via askgate. Empty line or Ctrl-D to quit.", bold=True)
    async with _client() as c:
        while True:
            try:
                question = click.prompt("you", default="", show_default=False)
            except (EOFError, click.Abort):
                break
            if not question.strip():
                break
            answer = await _ask(c, question, history)
            click.secho("gemini: ", fg="cyan", nl=False)
            click.echo(answer)
            history.append({"role": "human", "message": question})
            history.append({"role": "assistant", "message": answer})


if __name__ == "__main__":
    main()
