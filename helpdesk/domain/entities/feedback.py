"""Feedback entity — a requester's rating of how their ticket was handled."""

from dataclasses import dataclass
from datetime import datetime

from helpdesk.domain.value_objects.enums import FeedbackRating


@dataclass
class Feedback:
    id: int | None
    ticket_id: int
    created_by: int
    agent_id: int
    rating: FeedbackRating
    comment: str | None = None
    created_at: datetime | None = None
