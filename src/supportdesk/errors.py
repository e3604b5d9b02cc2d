"""Domain exceptions raised by the service layer.

The route layer maps these to HTTP status codes; nothing below the
service layer raises them.
"""

from __future__ import annotations


class SupportDeskError(Exception):
    """Base class for domain errors."""

    status_code = 500


class ConversationNotFoundError(SupportDeskError):
    """Conversation id does not exist."""

    status_code = 404

    def __init__(self, conversation_id: str) -> None:
        super().__init__("Conversation not found")
        self.conversation_id = conversation_id


class ConversationAccessError(SupportDeskError):
    """Conversation exists but belongs to another user."""

    status_code = 403

    def __init__(self, conversation_id: str) -> None:
        super().__init__("Unauthorized access to conversation")
        self.conversation_id = conversation_id
