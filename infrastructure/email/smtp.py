"""SMTP implementation of EmailProvider.

Messages are multipart: a plain-text body plus a Jinja2-rendered HTML body.
Delivery uses aiosmtplib with implicit TLS on port 465 and opportunistic
STARTTLS on any other port.
"""

import os
from email.message import EmailMessage
from typing import Optional

import aiosmtplib
from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import SmtpSettings
from shared.generators import RESET_CODE_TTL
from shared.logging import get_logger

log = get_logger(__name__)

_DEFAULT_TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
    "templates",
    "emails",
)

RESET_CODE_TTL_MINUTES = int(RESET_CODE_TTL.total_seconds() // 60)


class SmtpEmailProvider:
    def __init__(
        self,
        settings: SmtpSettings,
        app_name: str = "Wassl",
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
    ) -> None:
        self._settings = settings
        self._app_name = app_name
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def _build_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: Optional[str] = None,
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._settings.sender
        message["To"] = to_email
        message["Subject"] = subject
        message.set_content(text_body)
        if html_body:
            message.add_alternative(html_body, subtype="html")
        return message

    async def _send(self, message: EmailMessage) -> bool:
        port = self._settings.smtp_port
        try:
            await aiosmtplib.send(
                message,
                hostname=self._settings.smtp_host,
                port=port,
                username=self._settings.smtp_user,
                password=self._settings.smtp_pass,
                use_tls=port == 465,
                timeout=self._settings.smtp_timeout_seconds,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            log.error(
                "email_send_error",
                to_email=message["To"],
                subject=message["Subject"],
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        log.info("email_sent_success", to_email=message["To"], subject=message["Subject"])
        return True

    async def send_password_reset_email(
        self, email: str, user_name: Optional[str], code: str
    ) -> bool:
        subject = f"{self._app_name} - Reset Password Code"
        template = self._jinja.get_template("password_reset.html")
        html_body = template.render(
            reset_code=code,
            user_name=user_name,
            app_name=self._app_name,
            ttl_minutes=RESET_CODE_TTL_MINUTES,
        )
        text_body = (
            f"رمز إعادة تعيين كلمة المرور هو: {code}\n"
            f"ينتهي خلال {RESET_CODE_TTL_MINUTES} دقائق.\n\n"
            f"Your password reset code is: {code}\n"
            f"It expires in {RESET_CODE_TTL_MINUTES} minutes."
        )
        message = self._build_message(email, subject, text_body, html_body)
        return await self._send(message)


def build_email_provider(
    settings: SmtpSettings, app_name: str = "Wassl"
) -> Optional[SmtpEmailProvider]:
    """Return an SMTP provider, or None when SMTP is not fully configured."""
    if not settings.is_configured:
        return None
    return SmtpEmailProvider(settings, app_name=app_name)
