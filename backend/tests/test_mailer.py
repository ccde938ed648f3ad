import json
import logging

import httpx
import pytest

from contact_service.core import mailer
from contact_service.core.mailer import ConsoleNotifier, EmailDeliveryError, ResendNotifier, get_notifier
from contact_service.lib.validation import ContactFormData


def _form(**overrides):
    data = {
        "name": "שרה לוי",
        "email": "sara@example.com",
        "project_type": "אתרי חברה",
        "message": "אני מעוניינת באתר חברה & <מקצועי>",
        "selected_package": None,
    }
    data.update(overrides)
    return ContactFormData(**data)


@pytest.mark.asyncio
async def test_console_notifier_logs_record(caplog):
    caplog.set_level(logging.INFO, logger="uvicorn.error")
    await ConsoleNotifier().deliver(_form(selected_package="פרו"))
    lines = [r.getMessage() for r in caplog.records if r.name == "uvicorn.error"]
    assert lines == [
        "📧 New Contact Form Submission:",
        "Name: שרה לוי",
        "Email: sara@example.com",
        "Project Type: אתרי חברה",
        "Selected Package: פרו",
        "Message: אני מעוניינת באתר חברה & <מקצועי>",
        "---",
    ]


@pytest.mark.asyncio
async def test_console_notifier_shows_none_for_missing_package(caplog):
    caplog.set_level(logging.INFO, logger="uvicorn.error")
    await ConsoleNotifier().deliver(_form())
    assert "Selected Package: None" in [r.getMessage() for r in caplog.records]


@pytest.mark.asyncio
async def test_resend_notifier_posts_email():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "email-1"})

    notifier = ResendNotifier(
        api_key="re_test",
        from_email="noreply@site.co.il",
        to_email="owner@site.co.il",
        transport=httpx.MockTransport(handler),
    )
    await notifier.deliver(_form(selected_package="פרו"))

    assert seen["url"] == "https://api.resend.com/emails"
    assert seen["auth"] == "Bearer re_test"
    body = seen["body"]
    assert body["from"] == "noreply@site.co.il"
    assert body["to"] == "owner@site.co.il"
    assert body["subject"] == "פנייה חדשה מ-שרה לוי - אתרי חברה"
    assert 'dir="rtl"' in body["html"]
    assert "חבילה נבחרת:</strong> פרו" in body["html"]
    assert "&amp; &lt;מקצועי&gt;" in body["html"]


def test_html_omits_package_paragraph_when_absent():
    assert "חבילה נבחרת" not in mailer.build_html(_form())


@pytest.mark.asyncio
async def test_resend_notifier_raises_on_provider_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(422, json={"message": "invalid from"}))
    notifier = ResendNotifier(api_key="re_test", from_email="a@b.co", to_email="c@d.co", transport=transport)
    with pytest.raises(EmailDeliveryError) as excinfo:
        await notifier.deliver(_form())
    assert excinfo.value.status_code == 422


@pytest.mark.asyncio
async def test_resend_notifier_wraps_transport_errors():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    notifier = ResendNotifier(
        api_key="re_test", from_email="a@b.co", to_email="c@d.co", transport=httpx.MockTransport(handler)
    )
    with pytest.raises(EmailDeliveryError):
        await notifier.deliver(_form())


@pytest.mark.asyncio
async def test_resend_notifier_requires_api_key():
    notifier = ResendNotifier(api_key=None, from_email="a@b.co", to_email="c@d.co")
    with pytest.raises(RuntimeError):
        await notifier.deliver(_form())


def test_get_notifier_follows_email_service(monkeypatch):
    monkeypatch.setattr(mailer.settings, "email_service", "console")
    assert isinstance(get_notifier(), ConsoleNotifier)
    monkeypatch.setattr(mailer.settings, "email_service", "resend")
    monkeypatch.setattr(mailer.settings, "resend_api_key", "re_live")
    notifier = get_notifier()
    assert isinstance(notifier, ResendNotifier)
    assert notifier.api_key == "re_live"
