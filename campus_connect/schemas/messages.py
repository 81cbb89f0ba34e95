"""
Pydantic models for direct messaging request validation.
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field


MessageType = Literal["text", "image", "file", "link"]
RelatedToType = Literal["opportunity", "collaboration", "event", "general"]


# =============================================================================
# Request Schemas
# =============================================================================

class Attachment(BaseModel):
    """File attached to a message."""
    name: str
    url: str
    type: Optional[str] = None  # image, pdf, etc.
    size: Optional[int] = Field(default=None, ge=0)  # in bytes


class RelatedTo(BaseModel):
    """Entity a message is about."""
    type: RelatedToType = "general"
    id: Optional[str] = None


class SendMessageRequest(BaseModel):
    """POST /api/v1/messages request body."""
    receiver: str = Field(..., min_length=1)
    # trimmed and length-checked against MESSAGE_MAX_LENGTH by MessageService
    content: str = Field(..., min_length=1)
    messageType: MessageType = "text"
    attachments: List[Attachment] = Field(default_factory=list)
    relatedTo: Optional[RelatedTo] = None


class MarkAllReadRequest(BaseModel):
    """PUT /api/v1/messages/mark-all-read request body."""
    userId: str = Field(..., min_length=1)
