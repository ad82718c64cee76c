"""Delivery notification dispatch.

Runs after the status change has been committed. Every failure is logged and
swallowed here: a sale marked "Entregado" stays delivered whether or not the
email goes out. There is no retry.
"""
import logging

from config.settings import settings
from src.bk_notify.channel.email_port import EmailChannel, OutgoingEmail
from src.bk_notify.channel.registry import get_email_channel
from src.bk_notify.receipt import build_sale_receipt
from src.bk_sales.domain.models import Sale

logger = logging.getLogger("bk.notify")


class NotificationDispatcher:
    def __init__(self, channel: EmailChannel | None = None) -> None:
        self._channel = channel

    @property
    def channel(self) -> EmailChannel:
        return self._channel or get_email_channel()

    async def notify_delivered(self, sale: Sale) -> bool:
        """Email the sale receipt to the admin inbox, customer in CC.

        Returns True when the channel accepted the message, False otherwise.
        """
        try:
            receipt = build_sale_receipt(sale)
            email = OutgoingEmail(
                to=settings.ADMIN_EMAIL,
                cc=[sale.user_email] if sale.user_email else [],
                subject=receipt.subject,
                text_body=receipt.text_body,
                html_body=receipt.html_body,
            )
            message_id = await self.channel.send(email)
        except Exception:
            logger.exception("Delivery email failed for sale %s", sale.id)
            return False

        logger.info(
            "Delivery email sent for sale %s (ref=%s, message_id=%s)",
            sale.id,
            receipt.reference,
            message_id,
        )
        return True
