"""CLI tests — click commands against a mocked HTTP backend.

httpx.MockTransport stands in for the server, so these exercise the
request bodies and output handling without running anything.
"""

import json

import httpx
import pytest
from click.testing import CliRunner

from askgate.cli import main as cli


@pytest.fixture()
def backend(monkeypatch):
    """Install a MockTransport-backed client; returns the list of requests seen."""
    seen: list[httpx.Request] = []
    routes = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return routes[(request.method, request.url.path)](request)

    def fake_client(token=None):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        return httpx.AsyncClient(
            base_url="http://askgate.test",
            headers=headers,
            transport=httpx.MockTransport(handler),
        )

    monkeypatch.setattr(cli, "_client", fake_client)
    return seen, routes


def _answer_with_turn_count(request: httpx.Request) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(200, json={"answer": f"turns={len(body['chatHistory'])}"})


def test_register_prints_token(backend):
    seen, routes = backend
    routes[("POST", "/api/auth/register")] = lambda r: httpx.Response(
        201,
        json={"success": True, "token": "tok-123", "data": {"id": "1", "name": "Ana", "email": "a@x.com"}},
    )

    result = CliRunner().invoke(
        cli.main, ["register", "Ana", "a@x.com"], input="secret123\nsecret123\n"
    )

    assert result.exit_code == 0, result.output
    assert "tok-123" in result.output
    assert json.loads(seen[0].content) == {
        "name": "Ana",
        "email": "a@x.com",
        "password": "secret123",
    }


def test_login_failure_shows_api_error(backend):
    _, routes = backend
    routes[("POST", "/api/auth/login")] = lambda r: httpx.Response(
        401, json={"success": False, "error": "Invalid credentials"}
    )

    result = CliRunner().invoke(cli.main, ["login", "a@x.com", "--password", "nope"])

    assert result.exit_code == 1
    assert "Invalid credentials" in result.output


def test_me_sends_bearer_token(backend):
    seen, routes = backend
    routes[("GET", "/api/auth/me")] = lambda r: httpx.Response(
        200, json={"success": True, "data": {"name": "Ana"}}
    )

    result = CliRunner().invoke(cli.main, ["me", "--token", "tok-123"])

    assert result.exit_code == 0, result.output
    assert seen[0].headers["Authorization"] == "Bearer tok-123"
    assert '"name": "Ana"' in result.output


def test_me_without_token_fails(backend, monkeypatch):
    monkeypatch.delenv("ASKGATE_TOKEN", raising=False)
    result = CliRunner().invoke(cli.main, ["me"])
    assert result.exit_code == 1
    assert "--token required" in result.output


def test_ask_with_history_file(backend, tmp_path):
    seen, routes = backend
    routes[("POST", "/api/ask")] = _answer_with_turn_count
    history = [
        {"role": "human", "message": "hi"},
        {"role": "assistant", "message": "hello"},
    ]
    path = tmp_path / "history.json"
    path.write_text(json.dumps(history))

    result = CliRunner().invoke(cli.main, ["ask", "and then?", "--history", str(path)])

    assert result.exit_code == 0, result.output
    assert "turns=2" in result.output
    assert json.loads(seen[0].content) == {"question": "and then?", "chatHistory": history}


def test_chat_resends_growing_history(backend):
    seen, routes = backend
    routes[("POST", "/api/ask")] = _answer_with_turn_count

    result = CliRunner().invoke(cli.main, ["chat"], input="first\nsecond\n\n")

    assert result.exit_code == 0, result.output
    bodies = [json.loads(r.content) for r in seen]
    assert [b["question"] for b in bodies] == ["first", "second"]
    assert bodies[0]["chatHistory"] == []
    assert bodies[1]["chatHistory"] == [
        {"role": "human", "message": "first"},
        {"role": "assistant", "message": "turns=0"},
    ]
