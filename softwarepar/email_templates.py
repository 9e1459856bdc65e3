"""
MJML Email Templates
Transactional emails for SoftwarePar, written in MJML for cross-client rendering.
Every template is a pure function of its arguments.
"""

from html import escape
from typing import Optional
from urllib.parse import quote

# Brand colors - Blue/Emerald scheme
THEME = {
    "primary": "#1e40af",
    "primary_dark": "#1e3a8a",
    "primary_light": "#eff6ff",
    "success": "#059669",
    "success_dark": "#047857",
    "success_light": "#f0fdf4",
    "info_light": "#e0f2fe",
    "info_text": "#0369a1",
    "whatsapp": "#25d366",
    "background": "#f8fafc",
    "text_primary": "#0f172a",
    "text_secondary": "#374151",
    "text_muted": "#666666",
    "border": "#eeeeee",
}

SITE_URL = "https://softwarepar.lat"
CONTACT_EMAIL = "softwarepar.lat@gmail.com"
WHATSAPP_NUMBER = "595985990046"
WHATSAPP_DISPLAY = "+595 985 990 046"
WHATSAPP_FOLLOW_UP_TEXT = (
    "Hola, he realizado una consulta y enviado los detalles con el formulario. "
    "Me gustaría obtener más información."
)

MISSING_PHONE_PLACEHOLDER = "No proporcionado"


def whatsapp_link(text: str) -> str:
    return f"https://wa.me/{WHATSAPP_NUMBER}?text={quote(text)}"


def get_base_template(
    title: str,
    preview_text: str,
    header_title: str,
    content_sections: str,
    header_subtitle: Optional[str] = None,
    header_color: str = THEME["primary"],
    footer_lines: tuple = (),
) -> str:
    """Base MJML template wrapper for all emails"""

    subtitle = ""
    if header_subtitle:
        subtitle = f"""
            <mj-text align="center" color="#ffffff" font-size="16px" padding="10px 0 0 0">
              {header_subtitle}
            </mj-text>
        """

    footer = ""
    if footer_lines:
        lines = "\n".join(
            f'<mj-text align="center" font-size="14px" color="{THEME["text_muted"]}" padding="4px 0">{line}</mj-text>'
            for line in footer_lines
        )
        footer = f"""
        <mj-section padding="20px 0" border-top="1px solid {THEME['border']}">
          <mj-column>
            {lines}
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body width="600px">
        <!-- Header -->
        <mj-section background-color="{header_color}" border-radius="10px" padding="30px 20px">
          <mj-column>
            <mj-text align="center" color="#ffffff" font-size="28px" font-weight="700" padding="0">
              {header_title}
            </mj-text>
            {subtitle}
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section padding="30px 0">
          <mj-column>
            {content_sections}
          </mj-column>
        </mj-section>

        {footer}
      </mj-body>
    </mjml>
    """


def _button(url: str, label: str, color: str) -> str:
    return f"""
    <mj-button href="{url}" background-color="{color}" color="#ffffff" border-radius="5px" padding="30px 0" inner-padding="12px 30px">
      {label}
    </mj-button>
    """


def _signature(closing: str = "Saludos") -> str:
    return f"""
    <mj-text padding="30px 0 0 0">
      {closing},<br/><strong>El equipo de SoftwarePar</strong>
    </mj-text>
    """


def welcome_email_template(name: str) -> str:
    """Welcome email MJML template"""
    content = f"""
    <mj-text font-size="22px" font-weight="600" color="{THEME['primary']}">
      Hola {escape(name)},
    </mj-text>

    <mj-text>
      Gracias por unirte a SoftwarePar. Estamos emocionados de tenerte en nuestra plataforma.
    </mj-text>

    <mj-text>
      Con tu cuenta puedes:
    </mj-text>

    <mj-text color="{THEME['text_muted']}" padding="0 0 0 20px">
      • Solicitar cotizaciones para tus proyectos<br/>
      • Hacer seguimiento del progreso de tus desarrollos<br/>
      • Acceder a soporte técnico especializado<br/>
      • Gestionar tus facturas y pagos
    </mj-text>

    {_button(SITE_URL, "Acceder a mi Dashboard", THEME['primary'])}

    <mj-text>
      Si tienes alguna pregunta, no dudes en contactarnos.
    </mj-text>

    {_signature()}
    """

    return get_base_template(
        title="Bienvenido a SoftwarePar",
        preview_text="Tu cuenta ha sido creada exitosamente",
        header_title="¡Bienvenido a SoftwarePar!",
        header_subtitle="Tu cuenta ha sido creada exitosamente",
        content_sections=content,
        footer_lines=(
            "SoftwarePar - Desarrollo de Software Profesional",
            f"Itapúa, Carlos Antonio López, Paraguay | {CONTACT_EMAIL}",
        ),
    )


def contact_notification_template(
    full_name: str,
    email: str,
    subject: str,
    message: str,
    phone: Optional[str] = None,
) -> str:
    """Internal notice for the operator mailbox when the contact form is submitted"""
    cell = f'style="padding: 10px; border-bottom: 1px solid {THEME["border"]};"'
    label = f'style="padding: 10px; border-bottom: 1px solid {THEME["border"]}; font-weight: bold;"'
    rows = [
        ("Nombre", full_name),
        ("Email", email),
        ("Teléfono", phone or MISSING_PHONE_PLACEHOLDER),
        ("Asunto", subject),
    ]
    table_rows = "\n".join(
        f"<tr><td {label}>{name}:</td><td {cell}>{escape(value)}</td></tr>" for name, value in rows
    )

    content = f"""
    <mj-text font-size="22px" font-weight="600">
      Detalles del Contacto:
    </mj-text>

    <mj-text>
      <table style="width: 100%; border-collapse: collapse;">
        {table_rows}
      </table>
    </mj-text>

    <mj-text font-size="18px" font-weight="600" padding="20px 0 0 0">
      Mensaje:
    </mj-text>

    <mj-text container-background-color="#f5f5f5" padding="15px">
      {escape(message)}
    </mj-text>

    <mj-text container-background-color="{THEME['info_light']}" color="{THEME['info_text']}" padding="15px">
      <strong>💡 Acción Requerida:</strong><br/>
      El cliente será redirigido a WhatsApp con esta información. Responde rápidamente para una mejor experiencia.
    </mj-text>
    """

    return get_base_template(
        title="Nueva Consulta - SoftwarePar",
        preview_text=f"Nueva consulta de {escape(full_name)}",
        header_title="Nueva Consulta Recibida",
        content_sections=content,
    )


def contact_confirmation_template(client_name: str) -> str:
    """Acknowledgement sent to the person who filled in the contact form"""
    content = f"""
    <mj-text font-size="22px" font-weight="600" color="{THEME['primary']}">
      Hola {escape(client_name)},
    </mj-text>

    <mj-text>
      Gracias por contactar a SoftwarePar. Hemos recibido tu consulta y nuestro equipo la está revisando.
    </mj-text>

    <mj-text container-background-color="{THEME['success_light']}" padding="20px">
      <strong style="color: {THEME['success']};">¿Qué sigue ahora?</strong><br/>
      • Revisaremos tu consulta en detalle<br/>
      • Te contactaremos en las próximas 24 horas<br/>
      • Prepararemos una propuesta personalizada<br/>
      • Coordinaremos una reunión para discutir tu proyecto
    </mj-text>

    <mj-text container-background-color="{THEME['primary_light']}" padding="20px">
      <strong style="color: {THEME['primary']};">💬 ¿Necesitas respuesta inmediata?</strong><br/>
      También puedes contactarnos directamente por WhatsApp:
    </mj-text>

    {_button(whatsapp_link(WHATSAPP_FOLLOW_UP_TEXT), "📱 Contactar por WhatsApp", THEME['whatsapp'])}

    {_signature("Saludos cordiales")}
    """

    return get_base_template(
        title="Confirmación de Consulta - SoftwarePar",
        preview_text="Hemos recibido tu consulta exitosamente",
        header_title="¡Gracias por contactarnos!",
        header_subtitle="Hemos recibido tu consulta exitosamente",
        content_sections=content,
        footer_lines=(
            "SoftwarePar - Desarrollo de Software Profesional",
            "Itapúa, Carlos Antonio López, Paraguay",
            f"📧 {CONTACT_EMAIL} | 📱 {WHATSAPP_DISPLAY}",
        ),
    )


def partner_commission_template(
    partner_name: str,
    commission_amount: str,
    project_name: str,
) -> str:
    """Commission notice for a partner; the amount is shown exactly as given"""
    amount = escape(commission_amount)
    project = escape(project_name)

    content = f"""
    <mj-text font-size="22px" font-weight="600" color="{THEME['success']}">
      ¡Felicitaciones {escape(partner_name)}!
    </mj-text>

    <mj-text>
      Has generado una nueva comisión por la venta del proyecto <strong>"{project}"</strong>.
    </mj-text>

    <mj-text container-background-color="{THEME['success_light']}" padding="20px">
      <strong style="color: {THEME['success']};">Detalles de la comisión:</strong><br/>
      <strong>Proyecto:</strong> {project}<br/>
      <strong>Comisión:</strong> ${amount}<br/>
      <strong>Estado:</strong> Procesada
    </mj-text>

    {_button(SITE_URL, "Ver Dashboard", THEME['success'])}

    <mj-text>
      ¡Sigue refiriendo clientes y genera más ingresos!
    </mj-text>

    {_signature()}
    """

    return get_base_template(
        title="Nueva Comisión - SoftwarePar",
        preview_text=f"Nueva comisión de ${amount}",
        header_title="¡Nueva Comisión Generada!",
        header_subtitle=f"${amount}",
        header_color=THEME["success"],
        content_sections=content,
    )
