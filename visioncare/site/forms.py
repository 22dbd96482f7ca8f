"""
Appointment booking and contact form handling.

Neither form reaches a backend: appointments are handed to WhatsApp as a
pre-filled message, and contact submissions only simulate a delivery delay.
"""

from __future__ import annotations

import asyncio
import logging
import re
import datetime as dt
from typing import Dict, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from visioncare.site.messaging import MessagingLinks

logger = logging.getLogger(__name__)

SERVICE_LABELS: Dict[str, str] = {
    "eye-test": "Eye Test",
    "lasik": "LASIK Consultation",
    "cataract": "Cataract Checkup",
    "glasses": "Glasses Fitting",
    "other": "Other",
}

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields."
INVALID_EMAIL_MESSAGE = "Please enter a valid email address."
SUCCESS_MESSAGE = "Thank you! Your message has been sent successfully."


class AppointmentRequest(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    date: dt.date
    service: Literal["eye-test", "lasik", "cataract", "glasses", "other"]

    @field_validator("name", "phone", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @property
    def service_label(self) -> str:
        return SERVICE_LABELS[self.service]


def build_appointment_message(request: AppointmentRequest) -> str:
    return (
        "Hi, I'd like to book an appointment.\n"
        f"Name: {request.name}\n"
        f"Phone: {request.phone}\n"
        f"Date: {request.date.isoformat()}\n"
        f"Service: {request.service_label}"
    )


def appointment_link(request: AppointmentRequest, links: MessagingLinks) -> str:
    return links.whatsapp_url(build_appointment_message(request))


class ContactResult(BaseModel):
    status: Literal["success", "error"]
    message: str


class ContactFormHandler:
    """Validates contact submissions and simulates sending them."""

    def __init__(self, delay_seconds: float = 1.0):
        self.delay_seconds = delay_seconds

    @staticmethod
    def is_valid_email(email: str) -> bool:
        return bool(EMAIL_PATTERN.match(email or ""))

    def validate(self, data: Dict[str, Optional[str]]) -> Tuple[bool, Optional[str]]:
        values = {k: (v or "").strip() for k, v in data.items()}
        if not all(values.get(k) for k in ("name", "email", "subject", "message")):
            return False, REQUIRED_FIELDS_MESSAGE
        if not self.is_valid_email(values["email"]):
            return False, INVALID_EMAIL_MESSAGE
        return True, None

    async def submit(self, data: Dict[str, Optional[str]]) -> ContactResult:
        ok, error = self.validate(data)
        if not ok:
            return ContactResult(status="error", message=error)

        logger.info("Contact form submitted (subject=%s); no backend configured", (data.get("subject") or "").strip())
        await asyncio.sleep(self.delay_seconds)
        return ContactResult(status="success", message=SUCCESS_MESSAGE)
