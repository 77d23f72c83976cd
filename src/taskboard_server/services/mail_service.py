"""Outbound mail collaborator.

Mail is only ever sent from event subscribers. Senders raise on transport
failure; the event bus logs the failure and the triggering command still
succeeds.
"""

from email.message import EmailMessage
from typing import Protocol

import aiosmtplib
from loguru import logger
from pydantic import BaseModel, ConfigDict

from taskboard_server.settings import Settings


class MailMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_address: str
    to: str
    subject: str
    html: str


class MailSender(Protocol):
    async def send(self, message: MailMessage) -> None: ...


class SmtpMailSender:
    """Sends mail through an SMTP relay with aiosmtplib, one connection per message."""

    def __init__(self, settings: Settings):
        self.settings = settings

    @staticmethod
    def _build_mime(message: MailMessage) -> EmailMessage:
        mime = EmailMessage()
        mime["From"] = message.from_address
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime.set_content("This message requires an HTML capable mail client.")
        mime.add_alternative(message.html, subtype="html")
        return mime

    async def send(self, message: MailMessage) -> None:
        logger.debug(f"Sending mail '{message.subject}' to {message.to} via {self.settings.smtp_host}")
        await aiosmtplib.send(
            self._build_mime(message),
            hostname=self.settings.smtp_host,
            port=self.settings.smtp_port,
            username=self.settings.smtp_username,
            password=self.settings.smtp_password,
            start_tls=self.settings.smtp_start_tls,
        )
        logger.info(f"Mail '{message.subject}' sent to {message.to}")


class ConsoleMailSender:
    """Logs mail instead of sending it (development default)."""

    async def send(self, message: MailMessage) -> None:
        logger.info(f"[mail] to={message.to} subject='{message.subject}'")
        logger.debug(f"[mail] body:\n{message.html}")


def build_mail_sender(settings: Settings) -> MailSender:
    """Select the mail transport configured by ``mail_backend``."""
    if settings.mail_backend == "smtp":
        return SmtpMailSender(settings)
    return ConsoleMailSender()
