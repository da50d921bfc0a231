"""Ask API — forward a question and its history to Gemini.

POST /ask {question, chatHistory: [{role, message}]} → {answer}
Failures come back as {success: false, error} with the status the
conversation proxy classified them into.
"""

from fastapi import APIRouter, Depends, Request

from askgate.chat.proxy import ConversationProxy
from askgate.schemas.chat import AskRequest, AskResponse

router = APIRouter()


def get_conversation_proxy(request: Request) -> ConversationProxy:
    return request.app.state.proxy


@router.post("/ask", response_model=AskResponse)
async def ask(
    body: AskRequest,
    proxy: ConversationProxy = Depends(get_conversation_proxy),
):
    history = [turn.model_dump() for turn in body.chat_history or []]
    answer = await proxy.ask(body.question, history)
    return AskResponse(answer=answer)
