"""ConversationProxy tests without HTTP."""

import pytest

from askgate.chat.proxy import ConversationProxy
from askgate.errors import (
    BadRequest,
    Internal,
    RateLimited,
    ServiceUnavailable,
    UpstreamCredentialsRejected,
    UpstreamFailure,
)
from conftest import FakeUpstream, StubUpstreamError


@pytest.mark.asyncio
async def test_ask_returns_upstream_text():
    upstream = FakeUpstream(answer="42")
    proxy = ConversationProxy(upstream)
    answer = await proxy.ask(
        "meaning of life?", [{"role": "human", "message": "hi"}]
    )
    assert answer == "42"
    assert upstream.calls == [
        {
            "history": [{"role": "user", "parts": [{"text": "hi"}]}],
            "question": "meaning of life?",
        }
    ]


@pytest.mark.asyncio
async def test_unconfigured_proxy_refuses_before_validating():
    proxy = ConversationProxy(None)
    assert not proxy.configured
    with pytest.raises(ServiceUnavailable):
        await proxy.ask("")


@pytest.mark.asyncio
async def test_empty_question_never_reaches_upstream():
    upstream = FakeUpstream()
    with pytest.raises(BadRequest):
        await ConversationProxy(upstream).ask("")
    assert upstream.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, expected",
    [
        (StubUpstreamError("quota exceeded", 429), RateLimited),
        (StubUpstreamError("API key not valid"), UpstreamCredentialsRejected),
        (StubUpstreamError("who knows"), UpstreamFailure),
        (StubUpstreamError(None), Internal),
    ],
)
async def test_failures_raise_classified_errors(error, expected):
    proxy = ConversationProxy(FakeUpstream(error=error))
    with pytest.raises(expected) as exc:
        await proxy.ask("hi")
    assert exc.value.__cause__ is error
