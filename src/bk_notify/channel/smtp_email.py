"""SMTP email adapter built on aiosmtplib.

Credentials and host come from settings (SMTP_*). Every transport error is
re-raised as NotificationError so callers deal with one failure type.
"""
from email.message import EmailMessage
from email.utils import make_msgid

import aiosmtplib

from config.settings import settings
from src.bk_common.errors import NotificationError
from src.bk_notify.channel.email_port import OutgoingEmail


class SmtpEmailAdapter:
    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        username: str | None = None,
        password: str | None = None,
        sender: str | None = None,
        use_tls: bool | None = None,
        timeout: float | None = None,
    ) -> None:
        self._host = host or settings.SMTP_HOST
        self._port = port or settings.SMTP_PORT
        self._username = username if username is not None else settings.SMTP_USER
        self._password = password if password is not None else settings.SMTP_PASSWORD
        self._sender = sender or settings.SMTP_USER or settings.EMAIL_FROM
        self._use_tls = settings.SMTP_USE_TLS if use_tls is None else use_tls
        self._timeout = timeout or settings.SMTP_TIMEOUT

    def build_message(self, email: OutgoingEmail) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._sender
        message["To"] = email.to
        if email.cc:
            message["Cc"] = ", ".join(email.cc)
        message["Subject"] = email.subject
        message["Message-ID"] = make_msgid(domain=self._sender.rpartition("@")[2] or None)
        message.set_content(email.text_body)
        if email.html_body:
            message.add_alternative(email.html_body, subtype="html")
        return message

    async def send(self, email: OutgoingEmail) -> str:
        message = self.build_message(email)
        try:
            await aiosmtplib.send(
                message,
                hostname=self._host,
                port=self._port,
                username=self._username or None,
                password=self._password or None,
                start_tls=self._use_tls,
                timeout=self._timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as exc:
            raise NotificationError(str(exc)) from exc
        return str(message["Message-ID"])
