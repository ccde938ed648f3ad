# contact_service/core/mailer.py
import html
import logging
from typing import Optional

import httpx

from contact_service.core.settings import settings
from contact_service.lib.validation import ContactFormData

log = logging.getLogger("uvicorn.error")


class EmailDeliveryError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


# -----------------------
# Console (development)
# -----------------------
class ConsoleNotifier:
    async def deliver(self, data: ContactFormData) -> None:
        log.info("📧 New Contact Form Submission:")
        log.info(f"Name: {data.name}")
        log.info(f"Email: {data.email}")
        log.info(f"Project Type: {data.project_type}")
        log.info(f"Selected Package: {data.selected_package or 'None'}")
        log.info(f"Message: {data.message}")
        log.info("---")


# -----------------------
# Resend (production)
# -----------------------
def build_subject(data: ContactFormData) -> str:
    return f"פנייה חדשה מ-{data.name} - {data.project_type}"


def build_html(data: ContactFormData) -> str:
    e = html.escape
    package = (
        f"<p><strong>חבילה נבחרת:</strong> {e(data.selected_package)}</p>"
        if data.selected_package
        else ""
    )
    return (
        '<div dir="rtl" style="font-family: Arial, sans-serif;">'
        "<h2>פנייה חדשה מהאתר</h2>"
        f"<p><strong>שם:</strong> {e(data.name)}</p>"
        f"<p><strong>אימייל:</strong> {e(data.email)}</p>"
        f"<p><strong>סוג פרויקט:</strong> {e(data.project_type)}</p>"
        f"{package}"
        "<p><strong>הודעה:</strong></p>"
        f'<p style="background: #f5f5f5; padding: 15px; border-radius: 5px;">{e(data.message)}</p>'
        "</div>"
    )


class ResendNotifier:
    def __init__(
        self,
        api_key: Optional[str],
        from_email: str,
        to_email: str,
        api_url: str = "https://api.resend.com/emails",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.from_email = from_email
        self.to_email = to_email
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport

    async def deliver(self, data: ContactFormData) -> None:
        if not self.api_key:
            raise RuntimeError(
                "RESEND_API_KEY is not set. Put it in your environment or .env file, "
                "or set EMAIL_SERVICE=console."
            )

        payload = {
            "from": self.from_email,
            "to": self.to_email,
            "subject": build_subject(data),
            "html": build_html(data),
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(
                    self.api_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as exc:
            raise EmailDeliveryError(f"Failed to send email: {exc}") from exc

        if not resp.is_success:
            raise EmailDeliveryError(
                f"Failed to send email: provider returned {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )


def get_notifier():
    if settings.email_service.lower() == "console":
        return ConsoleNotifier()
    return ResendNotifier(
        api_key=settings.resend_api_key,
        from_email=settings.from_email,
        to_email=settings.to_email,
        api_url=settings.resend_api_url,
        timeout=settings.email_timeout_seconds,
    )

__all__ = ["get_notifier", "ConsoleNotifier", "ResendNotifier", "EmailDeliveryError"]
