"""
Shared helpers for askgate examples.

Handles the health check and authentication (register + login) so each
example can focus on its own flow.
"""

import sys
import uuid

import httpx

BASE = "http://localhost:8080/api"


def check_backend() -> dict:
    """Verify the backend is reachable and return its health report."""
    try:
        resp = httpx.get(f"{BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Backend not reachable at {BASE}")
        print("Start it with:  askgate serve")
        sys.exit(1)

    if resp.status_code != 200:
        print(f"ERROR: Health check returned {resp.status_code}")
        sys.exit(1)

    health = resp.json()
    print("Backend health:")
    print(f"  Database: {health['database']}")
    print(f"  Gemini:   {health['gemini']}")

    if health["database"] != "ok":
        print("\nERROR: Database is not reachable. Check ASKGATE_DATABASE_URL.")
        sys.exit(1)
    return health


def authenticate() -> tuple[str, dict]:
    """Register a fresh user and log in, returning (token, profile).

    Uses a unique email per run so examples are idempotent.
    """
    run_id = uuid.uuid4().hex[:8]
    email = f"demo-{run_id}@example.com"
    password = "demo-password-123"

    resp = httpx.post(
        f"{BASE}/auth/register",
        json={"name": f"Demo User {run_id}", "email": email, "password": password},
        timeout=10,
    )
    if resp.status_code not in (201, 409):  # 409 = already exists
        print(f"ERROR: Registration failed: {resp.status_code} {resp.text}")
        sys.exit(1)

    resp = httpx.post(
        f"{BASE}/auth/login",
        json={"email": email, "password": password},
        timeout=10,
    )
    if resp.status_code != 200:
        print(f"ERROR: Login failed: {resp.status_code} {resp.text}")
        sys.exit(1)

    body = resp.json()
    return body["token"], body["data"]


def ask(client: httpx.Client, question: str, history: list[dict]) -> str:
    """POST /ask and return the answer, exiting on any error."""
    resp = client.post("/ask", json={"question": question, "chatHistory": history})
    if resp.status_code != 200:
        print(f"ERROR: /ask returned {resp.status_code}: {resp.json().get('error')}")
        sys.exit(1)
    return resp.json()["answer"]
