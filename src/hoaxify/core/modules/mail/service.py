import asyncio
import smtplib
from email.message import EmailMessage

import structlog

from hoaxify.config import Config
from hoaxify.core.core import Service
from hoaxify.errors import MailDeliveryError

logger = structlog.get_logger(__name__)


def build_message(sender: str, to_email: str, subject: str, body: str) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = sender
    msg["To"] = to_email
    msg.set_content(body)
    return msg


def deliver(config: Config, host: str, msg: EmailMessage) -> None:
    """Send a message over SMTP. Blocking; run it in a worker thread."""
    with smtplib.SMTP(host, config.smtp_port, timeout=30) as server:
        if config.smtp_starttls:
            server.starttls()
        if config.smtp_username and config.smtp_password:
            server.login(config.smtp_username, config.smtp_password)
        server.send_message(msg)


class MailService(Service):
    """Outgoing account e-mails (activation and password reset)."""

    async def send_account_activation(self, to_email: str, activation_token: str) -> None:
        await self._send(
            to_email,
            "Account Activation",
            f"Welcome to Hoaxify!\n\nYour activation token is {activation_token}\n",
        )

    async def send_password_reset(self, to_email: str, reset_token: str) -> None:
        await self._send(
            to_email,
            "Password Reset",
            f"We received a password reset request for your account.\n\nYour password reset token is {reset_token}\n",
        )

    async def _send(self, to_email: str, subject: str, body: str) -> None:
        config = self.core.config
        host = config.smtp_host
        if host is None:
            logger.warning("mail_delivery_disabled", subject=subject)
            return

        msg = build_message(config.smtp_from, to_email, subject, body)
        try:
            await asyncio.to_thread(deliver, config, host, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.exception("mail_delivery_failed", subject=subject)
            raise MailDeliveryError from e
        logger.info("mail_sent", subject=subject)
