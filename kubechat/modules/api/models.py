"""
HTTP adapter data models.

The command endpoint is a generic chat adapter: it receives the raw message
of one platform channel and answers with the Message tree to render.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from ..config import CommPlatformIntegration
from ..executor import Origin
from ..interactive import Message

MAX_TEXT_LENGTH = 4000


class CommandRequest(BaseModel):
    """One inbound chat message."""

    group: str = Field(..., description="Communication group name", min_length=1)
    platform: CommPlatformIntegration = Field(..., description="Chat platform the message came from")
    channel: str = Field(..., description="Channel name on the platform", min_length=1)
    text: str = Field(..., description="Raw message text, including the bot mention")
    user: str = Field("", description="Display name of the sender")
    origin: Origin = Field(default=Origin.TYPED_MESSAGE, description="How the command was triggered")
    state: Optional[Dict[str, Any]] = Field(None, description="Opaque interactive state from the platform")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v):
        """Reject oversized messages before parsing them."""
        if len(v) > MAX_TEXT_LENGTH:
            raise ValueError(f"Message too long: {len(v)} characters (max {MAX_TEXT_LENGTH})")
        return v


class CommandResponse(BaseModel):
    """Response to render; None when the message was not addressed to the bot."""

    message: Optional[Message] = None


class HealthResponse(BaseModel):
    status: str
    version: str
    cluster_name: str
    persistence: str
