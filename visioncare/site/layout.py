"""
Page shell: navigation, mount-point sections, the appointment booking widget
and the global error banner.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from visioncare.site.forms import SERVICE_LABELS
from visioncare.site.renderer import esc

NAV_LINKS = [
    ("/", "Home"),
    ("/products", "Products"),
    ("/gallery", "Gallery"),
    ("/contact", "Contact"),
]

FONT_AWESOME_CSS = "https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.4.0/css/all.min.css"


def render_banner(banner: Optional[Mapping]) -> str:
    if not banner:
        return ""
    return (
        f'<div class="global-error" role="alert" data-dismiss-after="{int(banner.get("dismiss_after_ms", 5000))}">'
        f'{esc(banner.get("message", ""))}</div>'
    )


def render_nav(active_path: str) -> str:
    items = []
    for href, label in NAV_LINKS:
        css = ' class="active"' if href == active_path else ""
        items.append(f'<li><a href="{href}"{css}>{label}</a></li>')
    return (
        '<nav class="navbar">'
        '<button class="hamburger" aria-label="Menu"><span></span><span></span><span></span></button>'
        f'<ul class="nav-menu">{"".join(items)}</ul>'
        "</nav>"
    )


def render_appointment_widget() -> str:
    options = "".join(f'<option value="{value}">{label}</option>' for value, label in SERVICE_LABELS.items())
    return (
        '<button class="appointment-fab" aria-label="Book Appointment">'
        '<i class="fas fa-calendar-check"></i><span>Book Now</span></button>'
        '<div id="appointment-modal" class="appt-modal"><div class="appt-modal-content">'
        '<div class="appt-modal-header"><h2><i class="fas fa-calendar-check"></i> Book Appointment</h2>'
        '<button class="appt-close" aria-label="Close">&times;</button></div>'
        '<form id="globalAppointmentForm" class="appt-form" method="post" action="/appointment" target="_blank">'
        '<div class="appt-field"><label><i class="fas fa-user"></i> Full Name</label>'
        '<input type="text" name="name" placeholder="Your full name" required></div>'
        '<div class="appt-field"><label><i class="fas fa-phone"></i> Phone Number</label>'
        '<input type="tel" name="phone" placeholder="Your phone number" required></div>'
        '<div class="appt-field"><label><i class="fas fa-calendar"></i> Preferred Date</label>'
        '<input type="date" name="date" required></div>'
        '<div class="appt-field"><label><i class="fas fa-stethoscope"></i> Service</label>'
        f'<select name="service" required><option value="">Select Service</option>{options}</select></div>'
        '<button type="submit" class="appt-submit"><i class="fab fa-whatsapp"></i> Confirm via WhatsApp</button>'
        "</form></div></div>"
    )


def render_page(
    title: str,
    business_name: str,
    sections: Dict[str, str],
    active_path: str = "/",
    banner: Optional[Mapping] = None,
    heading: Optional[str] = None,
) -> str:
    """Full HTML document; each section is emitted under its mount-point id."""
    body = "".join(f'<section id="{esc(mount)}">{markup}</section>' for mount, markup in sections.items())
    page_heading = f'<h1 id="detail-page-title">{esc(heading)}</h1>' if heading else ""
    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1">'
        f"<title>{esc(title)}</title>"
        f'<link rel="stylesheet" href="{FONT_AWESOME_CSS}">'
        '<link rel="stylesheet" href="/static/styles.css">'
        "</head><body>"
        f"{render_banner(banner)}"
        f"{render_nav(active_path)}"
        f"<main>{page_heading}{body}</main>"
        f"{render_appointment_widget()}"
        f'<footer><p>&copy; {esc(business_name)}</p></footer>'
        '<script src="/static/app.js" defer></script>'
        "</body></html>"
    )
