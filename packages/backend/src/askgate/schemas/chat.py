"""Pydantic schemas for the /ask endpoint.

The wire format is camelCase (chatHistory) to match the browser client.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ChatTurn(BaseModel):
    role: str
    message: str = ""


class AskRequest(BaseModel):
    question: Optional[str] = None
    chat_history: Optional[list[ChatTurn]] = Field(None, alias="chatHistory")

    model_config = {"populate_by_name": True}


class AskResponse(BaseModel):
    answer: str
