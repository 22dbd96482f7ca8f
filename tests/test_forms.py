import datetime as dt

import pytest
from pydantic import ValidationError

from visioncare.site.forms import (
    INVALID_EMAIL_MESSAGE,
    REQUIRED_FIELDS_MESSAGE,
    SUCCESS_MESSAGE,
    AppointmentRequest,
    ContactFormHandler,
    appointment_link,
    build_appointment_message,
)


def test_appointment_message_uses_service_label():
    req = AppointmentRequest(name=" Asha ", phone="9876543210", date="2026-11-02", service="lasik")

    assert req.name == "Asha"
    assert req.date == dt.date(2026, 11, 2)
    assert build_appointment_message(req) == (
        "Hi, I'd like to book an appointment.\n"
        "Name: Asha\n"
        "Phone: 9876543210\n"
        "Date: 2026-11-02\n"
        "Service: LASIK Consultation"
    )


def test_appointment_link_targets_whatsapp(links):
    req = AppointmentRequest(name="Asha", phone="1", date="2026-11-02", service="eye-test")
    url = appointment_link(req, links)

    assert url.startswith("https://wa.me/917055502333?text=Hi%2C%20I'd%20like")
    assert "Service%3A%20Eye%20Test" in url


@pytest.mark.parametrize(
    "data",
    [
        {"name": "", "phone": "1", "date": "2026-11-02", "service": "lasik"},
        {"name": "Asha", "phone": "1", "date": "not-a-date", "service": "lasik"},
        {"name": "Asha", "phone": "1", "date": "2026-11-02", "service": "botox"},
        {"name": "Asha", "date": "2026-11-02", "service": "lasik"},
    ],
)
def test_appointment_rejects_incomplete_requests(data):
    with pytest.raises(ValidationError):
        AppointmentRequest(**data)


@pytest.mark.parametrize(
    "email,valid",
    [
        ("patient@example.com", True),
        ("a.b@clinic.co.in", True),
        ("no-at-sign.com", False),
        ("two@@example.com", False),
        ("spaces in@example.com", False),
        ("missing@tld", False),
    ],
)
def test_email_validation(email, valid):
    assert ContactFormHandler.is_valid_email(email) is valid


def test_contact_validation_messages():
    handler = ContactFormHandler(delay_seconds=0)

    ok, error = handler.validate({"name": "A", "email": "a@b.co", "subject": " ", "message": "Hi"})
    assert (ok, error) == (False, REQUIRED_FIELDS_MESSAGE)

    ok, error = handler.validate({"name": "A", "email": "a@b", "subject": "S", "message": "Hi"})
    assert (ok, error) == (False, INVALID_EMAIL_MESSAGE)

    assert handler.validate({"name": "A", "email": "a@b.co", "subject": "S", "message": "Hi", "phone": None}) == (True, None)


@pytest.mark.asyncio
async def test_contact_submit_simulates_success():
    handler = ContactFormHandler(delay_seconds=0)

    result = await handler.submit({"name": "A", "email": "a@b.co", "subject": "S", "message": "Hi"})
    failed = await handler.submit({"name": "A"})

    assert result.status == "success" and result.message == SUCCESS_MESSAGE
    assert failed.status == "error" and failed.message == REQUIRED_FIELDS_MESSAGE
