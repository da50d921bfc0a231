#!/usr/bin/env python3
"""
askgate Conversation Example.

The server keeps no conversation state: each /ask call carries the
whole history. This script plays a short scripted conversation and
resends the growing history every turn, so later questions can refer
back to earlier answers.

Run with: python examples/conversation.py

Requires: pip install httpx
Backend must be running: http://localhost:8080
"""

import sys

import httpx

from _common import BASE, ask, check_backend

QUESTIONS = [
    "Pick a random European capital and tell me only its name.",
    "What country is it in?",
    "Name one famous landmark there.",
]


def main():
    health = check_backend()
    if health["gemini"] != "ok":
        print("Gemini is not configured on the server.")
        sys.exit(1)

    client = httpx.Client(base_url=BASE, timeout=None)
    history: list[dict] = []

    for i, question in enumerate(QUESTIONS, 1):
        print(f"\n[{i}] you:    {question}")
        answer = ask(client, question, history)
        print(f"    gemini: {answer.strip()}")
        history.append({"role": "human", "message": question})
        history.append({"role": "assistant", "message": answer})

    print(f"\nSent {len(history)} turns of history on the last call.")


if __name__ == "__main__":
    main()
