"""Meeting link generation for newly inserted sessions."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from coach_scheduler.config.settings import settings


class MeetingLinkFactory(Protocol):
    def generate_link(self, coach_id: str, client_id: str, occurrence_index: int) -> str: ...


class JitsiMeetingLinkFactory:
    """Builds Jitsi room URLs of the form {base}/{coach}-{client}-{stamp}-{index}.

    The stamp is fixed when the factory is created, so links from one factory
    differ only by occurrence index. Use a fresh factory per batch.
    """

    def __init__(self, base_url: str | None = None, stamp: str | None = None) -> None:
        self.base_url = (base_url or settings.meeting_link_base_url).rstrip("/")
        self.stamp = stamp or str(int(datetime.now().timestamp() * 1000))

    def generate_link(self, coach_id: str, client_id: str, occurrence_index: int) -> str:
        return f"{self.base_url}/{coach_id}-{client_id}-{self.stamp}-{occurrence_index}"
