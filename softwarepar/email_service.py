"""
Notification dispatcher for SoftwarePar transactional emails.

Each notification intent is rendered by a pure MJML template and delivered
through a single `Mailer.send` primitive backed by an injected transport.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from mjml import mjml_to_html

from .email_templates import (
    contact_confirmation_template,
    contact_notification_template,
    partner_commission_template,
    welcome_email_template,
)

if TYPE_CHECKING:
    from .email_transport import MailTransport

logger = logging.getLogger(__name__)


class MailError(Exception):
    """Base class for outbound mail failures"""


class MailDeliveryError(MailError):
    """The mail provider did not accept the message"""


@dataclass(frozen=True)
class OutboundMessage:
    recipient: str
    subject: str
    body_html: str


@dataclass(frozen=True)
class ContactPayload:
    full_name: str
    email: str
    subject: str
    message: str
    phone: Optional[str] = None


@dataclass(frozen=True)
class WelcomeIntent:
    name: str


@dataclass(frozen=True)
class ContactAdminIntent:
    contact: ContactPayload


@dataclass(frozen=True)
class ContactConfirmIntent:
    client_name: str


@dataclass(frozen=True)
class PartnerCommissionIntent:
    partner_name: str
    commission_amount: str
    project_name: str


NotificationIntent = Union[
    WelcomeIntent, ContactAdminIntent, ContactConfirmIntent, PartnerCommissionIntent
]


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    result = mjml_to_html(mjml_content)
    # mjml_to_html returns a dict-like object with 'html' and 'errors' keys
    if isinstance(result, dict):
        if result.get("errors"):
            logger.warning(f"MJML compilation warnings: {result['errors']}")
        return result.get("html", "")
    html = getattr(result, "html", None)
    return html if html is not None else str(result)


def render_notification(intent: NotificationIntent) -> tuple[str, str]:
    """Map an intent to its (subject, html body)"""
    if isinstance(intent, WelcomeIntent):
        subject = "¡Bienvenido a SoftwarePar!"
        mjml_content = welcome_email_template(intent.name)
    elif isinstance(intent, ContactAdminIntent):
        contact = intent.contact
        subject = f"Nueva consulta: {contact.subject} - {contact.full_name}"
        mjml_content = contact_notification_template(
            full_name=contact.full_name,
            email=contact.email,
            subject=contact.subject,
            message=contact.message,
            phone=contact.phone,
        )
    elif isinstance(intent, ContactConfirmIntent):
        subject = "Confirmación de tu consulta - SoftwarePar"
        mjml_content = contact_confirmation_template(intent.client_name)
    elif isinstance(intent, PartnerCommissionIntent):
        subject = f"¡Nueva comisión de ${intent.commission_amount} generada!"
        mjml_content = partner_commission_template(
            partner_name=intent.partner_name,
            commission_amount=intent.commission_amount,
            project_name=intent.project_name,
        )
    else:
        raise TypeError(f"Unknown notification intent: {type(intent).__name__}")

    return subject, compile_mjml_to_html(mjml_content)


def build_message(intent: NotificationIntent, recipient: str) -> OutboundMessage:
    subject, body_html = render_notification(intent)
    return OutboundMessage(recipient=recipient, subject=subject, body_html=body_html)


class Mailer:
    """Sends SoftwarePar notifications through one shared transport"""

    def __init__(self, transport: "MailTransport", contact_inbox: str):
        self.transport = transport
        self.contact_inbox = contact_inbox

    async def send(self, message: OutboundMessage) -> None:
        """
        Deliver one message, exactly one attempt.

        Provider errors are logged with their detail and surfaced to the caller
        only as a generic MailDeliveryError.
        """
        logger.info(f"📧 Sending email to: {message.recipient}, subject: {message.subject}")
        try:
            await asyncio.to_thread(self.transport.send, message)
        except Exception as e:
            logger.error(f"❌ Email send error to {message.recipient}: {e}", exc_info=True)
            raise MailDeliveryError("Error sending email") from None
        logger.info(f"✅ Email sent successfully to: {message.recipient}")

    async def send_welcome(self, email: str, name: str) -> None:
        await self.send(build_message(WelcomeIntent(name=name), email))

    async def send_contact_admin_notice(self, contact: ContactPayload) -> None:
        logger.info(
            f"📧 Sending contact notice to {self.contact_inbox} for {contact.full_name}"
        )
        await self.send(build_message(ContactAdminIntent(contact=contact), self.contact_inbox))

    async def send_contact_confirmation(self, client_email: str, client_name: str) -> None:
        logger.info(f"📧 Sending contact confirmation to: {client_email}")
        await self.send(build_message(ContactConfirmIntent(client_name=client_name), client_email))

    async def send_partner_commission_notice(
        self,
        partner_email: str,
        partner_name: str,
        commission_amount: str,
        project_name: str,
    ) -> None:
        logger.info(
            f"📧 Sending commission notice to {partner_email} for {partner_name} "
            f"on project {project_name}"
        )
        intent = PartnerCommissionIntent(
            partner_name=partner_name,
            commission_amount=commission_amount,
            project_name=project_name,
        )
        await self.send(build_message(intent, partner_email))
