"""
Outbound mail transports.

A transport is built once at startup and shared by every request. Each send
opens its own provider connection, so a single transport instance can be used
from several worker threads at once.
"""

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import parseaddr
from typing import Protocol

import resend

from .config import Settings
from .email_service import OutboundMessage

logger = logging.getLogger(__name__)

SMTP_TIMEOUT = 30


class MailTransport(Protocol):
    def send(self, message: OutboundMessage) -> None: ...


class SmtpTransport:
    """Deliver through an SMTP account (Gmail by default)"""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str,
        use_tls: bool = True,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.use_tls = use_tls

    def _connect(self) -> smtplib.SMTP:
        if self.port == 465:
            context = ssl.create_default_context()
            return smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=SMTP_TIMEOUT)

        server = smtplib.SMTP(self.host, self.port, timeout=SMTP_TIMEOUT)
        if self.use_tls:
            server.starttls(context=ssl.create_default_context())
        return server

    def send(self, message: OutboundMessage) -> None:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = message.subject
        msg["From"] = self.sender
        msg["To"] = message.recipient
        msg.attach(MIMEText(message.body_html, "html", "utf-8"))

        server = self._connect()
        try:
            server.login(self.username, self.password)
            server.sendmail(parseaddr(self.sender)[1], [message.recipient], msg.as_string())
        finally:
            try:
                server.quit()
            except smtplib.SMTPException as e:
                logger.debug(f"SMTP quit failed after send attempt: {e}")


class ResendTransport:
    """Deliver through the Resend API"""

    def __init__(self, api_key: str, sender: str):
        resend.api_key = api_key
        self.sender = sender

    def send(self, message: OutboundMessage) -> None:
        response = resend.Emails.send(
            {
                "from": self.sender,
                "to": [message.recipient],
                "subject": message.subject,
                "html": message.body_html,
            }
        )
        logger.debug(f"Resend response: {response}")


def build_transport(settings: Settings) -> MailTransport:
    logger.info(
        f"📧 Configuring {settings.mail_provider} mail transport for {settings.mail_user}"
    )
    if settings.mail_provider == "resend":
        return ResendTransport(api_key=settings.resend_api_key, sender=settings.sender)

    return SmtpTransport(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.mail_user,
        password=settings.mail_password,
        sender=settings.sender,
    )
