#!/usr/bin/env python3
"""
askgate Quickstart — the whole API in one script.

Register → login → /auth/me → one question to Gemini.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:8080
"""

import httpx

from _common import BASE, ask, authenticate, check_backend


def main():
    health = check_backend()

    # ── Authenticate ──────────────────────────────────────────────
    print("\n1. Registering and logging in...")
    token, profile = authenticate()
    print(f"   User:  {profile['name']} <{profile['email']}>")
    print(f"   Token: {token[:24]}...")

    client = httpx.Client(
        base_url=BASE,
        timeout=None,
        headers={"Authorization": f"Bearer {token}"},
    )

    # ── Who am I? ─────────────────────────────────────────────────
    print("\n2. Checking /auth/me...")
    resp = client.get("/auth/me")
    assert resp.status_code == 200, f"Failed: {resp.text}"
    me = resp.json()["data"]
    print(f"   id={me['id']} created_at={me['created_at']}")

    # ── Tampered token is rejected ────────────────────────────────
    resp = httpx.get(
        f"{BASE}/auth/me",
        headers={"Authorization": f"Bearer {token[:-2]}xx"},
        timeout=10,
    )
    print(f"   Tampered token → {resp.status_code}")

    # ── Ask ───────────────────────────────────────────────────────
    if health["gemini"] != "ok":
        print("\nGemini is not configured on the server; skipping /ask.")
        return

    print("\n3. Asking Gemini...")
    answer = ask(client, "In one sentence, what is a bearer token?", [])
    print(f"   {answer}")


if __name__ == "__main__":
    main()
