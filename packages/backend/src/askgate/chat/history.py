"""Client history → Gemini content reshaping.

The client speaks in {role, message} turns with roles human/assistant
(the older frontend sends user/bot). Gemini wants
{"role": "user"|"model", "parts": [{"text": ...}]}.

Turn order is conversation order: it is kept exactly, nothing is
reordered or deduplicated.
"""

from typing import Iterable, Mapping

from askgate.errors import BadRequest

UPSTREAM_USER = "user"
UPSTREAM_MODEL = "model"

ROLE_MAP = {
    "human": UPSTREAM_USER,
    "user": UPSTREAM_USER,
    "assistant": UPSTREAM_MODEL,
    "bot": UPSTREAM_MODEL,
    "model": UPSTREAM_MODEL,
}


def upstream_role(role: str) -> str:
    try:
        return ROLE_MAP[role.strip().lower()]
    except (KeyError, AttributeError):
        raise BadRequest(f"Unknown chat history role: {role!r}")


def reshape_history(turns: Iterable[Mapping[str, str]]) -> list[dict]:
    """Convert client turns to Gemini contents, preserving order."""
    return [
        {
            "role": upstream_role(turn["role"]),
            "parts": [{"text": turn.get("message") or ""}],
        }
        for turn in turns
    ]
