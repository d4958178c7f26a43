from __future__ import annotations
from html import escape
from typing import NamedTuple


class RenderedEmail(NamedTuple):
    subject: str
    body_text: str
    body_html: str


# Keyed by language; anything unknown falls back to "en".
_SUBJECTS = {
    "en": "Booking redirect from {name}",
}

_BODIES = {
    "en": (
        "Hi,\n\n"
        "{name} will be out of office on {dates} and has asked for their "
        "bookings to be redirected to you during that time.\n\n"
        "No action is needed on your part.\n"
    ),
}


def render_booking_redirect_notification(*, language: str, to_name: str, dates: str) -> RenderedEmail:
    lang = (language or "en").split("-")[0].lower()
    if lang not in _SUBJECTS:
        lang = "en"

    name = to_name or "A teammate"
    subject = _SUBJECTS[lang].format(name=name)
    text = _BODIES[lang].format(name=name, dates=dates)
    html = "".join(f"<p>{escape(p).replace(chr(10), '<br>')}</p>" for p in text.strip().split("\n\n"))
    return RenderedEmail(subject=subject, body_text=text, body_html=html)
