import asyncio
import html
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any

from mindwell_config.settings import Settings
from mindwell_identity.infrastructure.email.templates import (
    PASSWORD_RESET_EMAIL,
    VERIFICATION_EMAIL,
    EmailTemplate,
)

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when an email could not be handed to the SMTP server."""

    def __init__(self, to_email: str, reason: str):
        self.to_email = to_email
        super().__init__(f"Failed to send email to {to_email}: {reason}")


class EmailService:
    """Outbound transactional email over SMTP.

    The blocking SMTP exchange runs in a worker thread so callers can await
    it. Delivery problems surface as ``EmailDeliveryError``; whether that
    is fatal is the caller's decision.
    """

    def __init__(self, settings: Settings):
        self._settings = settings

    def _create_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self._settings.smtp_from_name} <{self._settings.smtp_from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))

        return msg

    def _send_email(self, to_email: str, message: MIMEMultipart) -> None:
        if not self._settings.smtp_host:
            raise EmailDeliveryError(to_email, "SMTP host not configured")

        smtp_password = (
            self._settings.smtp_password.get_secret_value()
            if self._settings.smtp_password
            else ""
        )

        try:
            if self._settings.smtp_use_tls and not self._settings.smtp_starttls:
                # Implicit TLS (port 465)
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                    context=context,
                ) as server:
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)
            else:
                # STARTTLS (port 587) or plain
                with smtplib.SMTP(
                    self._settings.smtp_host,
                    self._settings.smtp_port,
                ) as server:
                    if self._settings.smtp_starttls:
                        context = ssl.create_default_context()
                        server.starttls(context=context)
                    if self._settings.smtp_user:
                        server.login(self._settings.smtp_user, smtp_password)
                    server.send_message(message)

            logger.info("Email sent to %s", to_email)

        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            raise EmailDeliveryError(to_email, str(e)) from e

    async def send(
        self,
        to_email: str,
        template: EmailTemplate,
        params: dict[str, Any],
    ) -> None:
        """Render a template and deliver it.

        Parameters
        ----------
        to_email
            Recipient address
        template
            Subject plus text and HTML bodies
        params
            Values substituted into the template bodies

        Raises
        ------
        EmailDeliveryError
            If the SMTP server could not be reached or rejected the message
        """
        if not self._settings.smtp_enabled:
            logger.warning(
                "SMTP disabled, skipping '%s' email to %s",
                template.subject,
                to_email,
            )
            return

        text_body = template.text.format(**params)
        html_body = template.html.format(
            **{key: html.escape(str(value)) for key, value in params.items()}
        )
        message = self._create_message(
            to_email=to_email,
            subject=template.subject,
            text_body=text_body,
            html_body=html_body,
        )

        await asyncio.to_thread(self._send_email, to_email, message)

    async def send_verification_email(
        self,
        to_email: str,
        name: str,
        code: str,
        ttl_minutes: int,
    ) -> None:
        if not self._settings.smtp_enabled:
            logger.warning(
                "SMTP disabled, skipping verification email to %s (code: %s)",
                to_email,
                code,
            )
            return

        await self.send(
            to_email,
            VERIFICATION_EMAIL,
            {"name": name, "email": to_email, "code": code, "ttl_minutes": ttl_minutes},
        )

    async def send_password_reset_email(
        self,
        to_email: str,
        name: str,
        reset_link: str,
        ttl_minutes: int,
    ) -> None:
        if not self._settings.smtp_enabled:
            logger.warning(
                "SMTP disabled, skipping password reset email to %s",
                to_email,
            )
            return

        await self.send(
            to_email,
            PASSWORD_RESET_EMAIL,
            {
                "name": name,
                "email": to_email,
                "reset_link": reset_link,
                "ttl_minutes": ttl_minutes,
            },
        )
