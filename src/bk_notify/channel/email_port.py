"""Email channel port: interface every email adapter implements."""
from dataclasses import dataclass, field
from typing import Protocol


@dataclass
class OutgoingEmail:
    to: str
    subject: str
    text_body: str
    html_body: str | None = None
    cc: list[str] = field(default_factory=list)


class EmailChannel(Protocol):
    async def send(self, email: OutgoingEmail) -> str:
        """Deliver ``email`` and return a message id.

        Raises NotificationError when delivery fails.
        """
        ...
