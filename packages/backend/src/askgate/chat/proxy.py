"""Conversation proxy — question + history in, answer out.

The proxy owns the decisions around the upstream call: it refuses
early when unconfigured (503) or when there is no question (400), it
reshapes the history, makes exactly one upstream call, and maps any
failure through the classification rules. It never retries.
"""

from typing import Iterable, Mapping, Optional, Protocol

import structlog

from askgate.chat.classify import (
    DEFAULT_RULES,
    UpstreamFailureRule,
    UpstreamSignal,
    match_rule,
)
from askgate.chat.history import reshape_history
from askgate.errors import BadRequest, Internal, ServiceUnavailable

logger = structlog.get_logger()


class ChatUpstream(Protocol):
    async def send(self, history: list[dict], question: str) -> str: ...


class ConversationProxy:
    def __init__(
        self,
        upstream: Optional[ChatUpstream],
        rules: tuple[UpstreamFailureRule, ...] = DEFAULT_RULES,
    ):
        self.upstream = upstream
        self.rules = rules

    @property
    def configured(self) -> bool:
        return self.upstream is not None

    async def ask(
        self,
        question: Optional[str],
        history: Iterable[Mapping[str, str]] = (),
    ) -> str:
        if self.upstream is None:
            logger.error("ask.not_configured")
            raise ServiceUnavailable(
                "Gemini service is unavailable due to a configuration error. "
                "Please check server logs."
            )

        if not question or not question.strip():
            raise BadRequest("Question is required")

        contents = reshape_history(history or ())

        try:
            answer = await self.upstream.send(contents, question)
        except Exception as e:
            raise self._classify(e) from e

        logger.info("ask.answered", turns=len(contents), preview=answer[:100])
        return answer

    def _classify(self, exc: Exception) -> Exception:
        signal = UpstreamSignal.from_exception(exc)
        if signal.message is None:
            # Nothing to inspect; don't echo anything upstream-specific.
            logger.exception("ask.upstream_error", kind="unknown", status=signal.status)
            return Internal()

        rule = match_rule(signal, self.rules)
        logger.warning(
            "ask.upstream_error",
            kind=rule.name,
            status=signal.status,
            error=signal.message,
        )
        return rule.build(signal)
