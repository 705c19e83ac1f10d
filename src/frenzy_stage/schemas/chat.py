"""Pydantic schemas for realtime chat events."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Identity(BaseModel):
    """A connected participant as shown in presence listings."""

    address: str = Field(..., description="Wallet-style address, stored as supplied")
    username: str = Field(..., description="Trimmed display name")
    is_online: bool = Field(True, alias="isOnline")
    joined_at: int = Field(..., alias="joinedAt", description="Epoch milliseconds")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ReplyQuote(BaseModel):
    """Client-supplied snapshot of an earlier message."""

    id: str
    username: str
    message: str

    model_config = ConfigDict(frozen=True)


class ChatMessage(BaseModel):
    """A stored, broadcast chat message. Immutable once created."""

    id: str
    address: str
    username: str
    message: str
    timestamp: int = Field(..., description="Server epoch milliseconds")
    reply_to: ReplyQuote | None = Field(None, alias="replyTo")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class AuthenticateRequest(BaseModel):
    """Inbound ``authenticate`` payload.

    Fields are left untyped so the chat validators, not pydantic, decide what
    counts as a bad address or username.
    """

    address: Any = None
    username: Any = None

    model_config = ConfigDict(extra="ignore")


class SendMessageRequest(BaseModel):
    """Inbound ``sendMessage`` payload."""

    message: Any = None
    reply_to: Any = Field(None, alias="replyTo")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class OnlineUserStats(BaseModel):
    username: str
    joined_at: int = Field(..., alias="joinedAt")

    model_config = ConfigDict(populate_by_name=True)


def dump_event(model: BaseModel) -> dict[str, Any]:
    """Serialize a schema into its camelCase wire form."""
    return model.model_dump(mode="json", by_alias=True)
