"""Notification payload published to the pub/sub topic."""

from pydantic import BaseModel


class NotificationMessage(BaseModel):
    """Subject and body of one push notification email."""

    subject: str
    message: str
