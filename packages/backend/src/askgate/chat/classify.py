"""Upstream failure classification.

An ordered tuple of rules, each a predicate over an UpstreamSignal
(HTTP-ish status + message text) and the AppError it turns into. The
first match wins; the last rule always matches. Rules are plain data so
they can be tested without a live Gemini call.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from askgate.errors import (
    AppError,
    RateLimited,
    UpstreamCredentialsRejected,
    UpstreamFailure,
    UpstreamUnavailable,
)


@dataclass(frozen=True)
class UpstreamSignal:
    """What we can observe about an upstream failure."""

    status: Optional[int]
    message: Optional[str]

    @classmethod
    def from_exception(cls, exc: BaseException) -> "UpstreamSignal":
        """Read status/message off google.api_core errors and look-alikes.

        api_core exceptions expose the HTTP status as ``code`` and the
        text as ``message``; other clients use ``status_code``/``status``.
        """
        status = None
        for attr in ("code", "status_code", "status"):
            value = getattr(exc, attr, None)
            if isinstance(value, int) and not isinstance(value, bool):
                status = int(value)
                break

        message = getattr(exc, "message", None)
        if not isinstance(message, str) or not message:
            message = str(exc) or None
        return cls(status=status, message=message)

    @property
    def text(self) -> str:
        return self.message or ""


@dataclass(frozen=True)
class UpstreamFailureRule:
    name: str
    matches: Callable[[UpstreamSignal], bool]
    error: Callable[[str], AppError]
    template: str

    def build(self, signal: UpstreamSignal) -> AppError:
        return self.error(self.template.format(message=signal.text))


def _invalid_credentials(signal: UpstreamSignal) -> bool:
    return "API key not valid" in signal.text or signal.status == 403


def _quota_exceeded(signal: UpstreamSignal) -> bool:
    return "quota" in signal.text.lower() or signal.status == 429


def _unavailable(signal: UpstreamSignal) -> bool:
    return "Error fetching from" in signal.text or (
        signal.status is not None and signal.status >= 500
    )


def _always(signal: UpstreamSignal) -> bool:
    return True


DEFAULT_RULES: tuple[UpstreamFailureRule, ...] = (
    UpstreamFailureRule(
        name="invalid_credentials",
        matches=_invalid_credentials,
        error=UpstreamCredentialsRejected,
        template=(
            "Invalid API Key or insufficient permissions. Please check your "
            "configuration and Google Cloud Console."
        ),
    ),
    UpstreamFailureRule(
        name="quota_exceeded",
        matches=_quota_exceeded,
        error=RateLimited,
        template="API Quota exceeded. Please check your Google Cloud Console.",
    ),
    UpstreamFailureRule(
        name="upstream_unavailable",
        matches=_unavailable,
        error=UpstreamUnavailable,
        template="Failed to communicate with Gemini service: {message}",
    ),
    UpstreamFailureRule(
        name="upstream_failed",
        matches=_always,
        error=UpstreamFailure,
        template="Failed to get answer from Gemini: {message}",
    ),
)


def match_rule(
    signal: UpstreamSignal,
    rules: tuple[UpstreamFailureRule, ...] = DEFAULT_RULES,
) -> UpstreamFailureRule:
    for rule in rules:
        if rule.matches(signal):
            return rule
    # Only reachable with a custom rule set that has no catch-all.
    return DEFAULT_RULES[-1]
