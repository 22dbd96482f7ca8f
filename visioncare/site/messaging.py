"""WhatsApp and phone action links."""

from __future__ import annotations

from urllib.parse import quote

WHATSAPP_BASE = "https://wa.me"

# Characters encodeURIComponent leaves alone, beyond the always-safe set.
_URI_COMPONENT_SAFE = "!*'()"


def encode_uri_component(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


class MessagingLinks:
    def __init__(self, whatsapp_phone: str, call_phone: str) -> None:
        self.whatsapp_phone = whatsapp_phone.lstrip("+")
        self.call_phone = call_phone

    def whatsapp_url(self, message: str) -> str:
        return f"{WHATSAPP_BASE}/{self.whatsapp_phone}?text={encode_uri_component(message)}"

    def tel_url(self) -> str:
        return f"tel:{self.call_phone}"

    def product_inquiry(self, product_name: str) -> str:
        return self.whatsapp_url(f"I am interested in {product_name}")

    def surgery_consultation(self, surgery_name: str) -> str:
        return self.whatsapp_url(f"Consultation for {surgery_name}")
