"""Fake email adapter: records sent emails for testing and local runs."""
from uuid import uuid4

from src.bk_common.errors import NotificationError
from src.bk_notify.channel.email_port import OutgoingEmail


class FakeEmailAdapter:
    """Email adapter that keeps messages in memory for test assertions."""

    def __init__(self) -> None:
        self.sent_emails: list[OutgoingEmail] = []
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"

    def configure(
        self, should_succeed: bool = True, failure_reason: str = "Email delivery failed"
    ) -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    async def send(self, email: OutgoingEmail) -> str:
        if not self.should_succeed:
            raise NotificationError(self.failure_reason)
        self.sent_emails.append(email)
        return f"email-{uuid4().hex[:12]}"

    def reset(self) -> None:
        self.sent_emails.clear()
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
