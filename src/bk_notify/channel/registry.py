"""Email channel registry: one adapter instance per process.

EMAIL_BACKEND selects the adapter: "smtp" (default) or "fake".
"""
from config.settings import settings
from src.bk_notify.channel.email_port import EmailChannel
from src.bk_notify.channel.fake_email import FakeEmailAdapter
from src.bk_notify.channel.smtp_email import SmtpEmailAdapter

_channel: EmailChannel | None = None


def get_email_channel() -> EmailChannel:
    global _channel  # noqa: PLW0603
    if _channel is None:
        backend = settings.EMAIL_BACKEND.lower()
        if backend == "smtp":
            _channel = SmtpEmailAdapter()
        elif backend == "fake":
            _channel = FakeEmailAdapter()
        else:
            raise ValueError(f"Unknown EMAIL_BACKEND: {settings.EMAIL_BACKEND}")
    return _channel


def reset_email_channel() -> None:
    global _channel  # noqa: PLW0603
    _channel = None
