"""Contact form route - no authentication required"""

import asyncio
import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field, field_validator

from ..email_service import ContactPayload, MailError, Mailer
from ..email_templates import whatsapp_link

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contact", tags=["Contact"])

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


class ContactRequest(BaseModel):
    fullName: str = Field(..., min_length=1, max_length=255)
    email: str
    phone: Optional[str] = None
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v: str) -> str:
        v = v.strip()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email address")
        return v

    @field_validator("phone")
    @classmethod
    def blank_phone_is_missing(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    def to_payload(self) -> ContactPayload:
        return ContactPayload(
            full_name=self.fullName.strip(),
            email=self.email,
            phone=self.phone,
            subject=self.subject.strip(),
            message=self.message.strip(),
        )


class ContactResponse(BaseModel):
    success: bool
    message: str
    whatsappUrl: str


def build_whatsapp_message(contact: ContactPayload) -> str:
    lines = [
        "Hola, soy " + contact.full_name + ".",
        "Asunto: " + contact.subject,
        "Email: " + contact.email,
    ]
    if contact.phone:
        lines.append("Teléfono: " + contact.phone)
    lines.append("Mensaje: " + contact.message)
    return "\n".join(lines)


@router.post("", response_model=ContactResponse)
async def submit_contact_form(data: ContactRequest, mailer: Mailer = Depends(get_mailer)):
    """
    Notify the operator mailbox and confirm receipt to the client.

    Email failures are logged but do not fail the submission: the client is
    redirected to WhatsApp either way.
    """
    contact = data.to_payload()
    logger.info(f"📨 Contact form submitted by {contact.full_name} <{contact.email}>")

    results = await asyncio.gather(
        mailer.send_contact_admin_notice(contact),
        mailer.send_contact_confirmation(contact.email, contact.full_name),
        return_exceptions=True,
    )
    for label, result in zip(("admin notice", "client confirmation"), results):
        if isinstance(result, MailError):
            logger.warning(f"⚠️ Contact {label} not delivered for {contact.email}: {result}")
        elif isinstance(result, BaseException):
            raise result

    return ContactResponse(
        success=True,
        message="Gracias por tu consulta. Te contactaremos en las próximas 24 horas.",
        whatsappUrl=whatsapp_link(build_whatsapp_message(contact)),
    )
