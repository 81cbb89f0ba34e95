"""
Pydantic models for the in-app notification inbox.

Each notification type carries its own payload model; the ``type`` field is
the discriminator, so a payload can only be built for a known type.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter


class NotificationType(str, Enum):
    """Domain events that produce a notification."""

    OPPORTUNITY_APPLICATION = "opportunity_application"
    COLLABORATION_INTEREST = "collaboration_interest"
    EVENT_REGISTRATION = "event_registration"
    EVENT_REMINDER = "event_reminder"
    MESSAGE_RECEIVED = "message_received"
    PROFILE_VIEW = "profile_view"
    SKILL_MATCH = "skill_match"


# =============================================================================
# Payload variants
# =============================================================================

class _PayloadBase(BaseModel):
    """Fields every notification shows in the inbox."""
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=1000)
    link: Optional[str] = None


class OpportunityApplicationPayload(_PayloadBase):
    """A student applied to a recruiter's opportunity."""
    type: Literal["opportunity_application"] = "opportunity_application"
    opportunityId: str
    applicantId: str


class CollaborationInterestPayload(_PayloadBase):
    """Someone expressed interest in a collaboration project."""
    type: Literal["collaboration_interest"] = "collaboration_interest"
    collaborationId: str
    interestedUserId: str


class EventRegistrationPayload(_PayloadBase):
    type: Literal["event_registration"] = "event_registration"
    eventId: str
    attendeeId: str


class EventReminderPayload(_PayloadBase):
    type: Literal["event_reminder"] = "event_reminder"
    eventId: str
    startsAt: datetime


class MessageReceivedPayload(_PayloadBase):
    """A direct message arrived; ``message`` holds a preview of its content."""
    type: Literal["message_received"] = "message_received"
    messageId: str
    senderId: str
    senderName: Optional[str] = None


class ProfileViewPayload(_PayloadBase):
    type: Literal["profile_view"] = "profile_view"
    viewerId: str


class SkillMatchPayload(_PayloadBase):
    """An opportunity matches skills on the user's profile."""
    type: Literal["skill_match"] = "skill_match"
    opportunityId: str
    matchedSkills: List[str] = Field(default_factory=list)
    score: Optional[float] = Field(default=None, ge=0, le=1)


NotificationPayload = Annotated[
    Union[
        OpportunityApplicationPayload,
        CollaborationInterestPayload,
        EventRegistrationPayload,
        EventReminderPayload,
        MessageReceivedPayload,
        ProfileViewPayload,
        SkillMatchPayload,
    ],
    Field(discriminator="type"),
]

notification_payload_adapter = TypeAdapter(NotificationPayload)


def parse_notification_payload(data: Dict[str, Any]):
    """Build the payload variant matching ``data["type"]``."""
    return notification_payload_adapter.validate_python(data)


# =============================================================================
# Stored record
# =============================================================================

class Notification(BaseModel):
    """A notification as held in a user's inbox."""
    id: str
    payload: NotificationPayload
    is_read: bool = False
    created_at: datetime

    @property
    def type(self) -> NotificationType:
        return NotificationType(self.payload.type)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the payload into the record, as the frontend expects it."""
        data: Dict[str, Any] = {"id": self.id}
        data.update(self.payload.model_dump(mode="json", exclude_none=True))
        data["isRead"] = self.is_read
        data["createdAt"] = self.created_at.isoformat()
        return data


# =============================================================================
# Request Schemas
# =============================================================================

class CreateNotificationRequest(BaseModel):
    """POST /api/v1/notifications request body (internal event producers)."""
    userId: str = Field(..., min_length=1)
    notification: NotificationPayload
