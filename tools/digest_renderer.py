"""
Missed Dose Digest Renderer
Formats a caretaker's missed-dose list into email subject, text and HTML bodies
"""

from html import escape
from typing import List
from dataclasses import dataclass, field
from datetime import date

from config import settings


@dataclass
class MissedDoseItem:
    """One overdue medication"""
    name: str
    dosage: str
    scheduled_time: str


@dataclass
class CaretakerDigest:
    """Missed doses of one patient, addressed to that patient's caretaker"""
    caretaker_email: str
    patient_email: str
    items: List[MissedDoseItem] = field(default_factory=list)


@dataclass
class RenderedNotification:
    subject: str
    text: str
    html: str


MISSED_DOSE_TEMPLATES = {
    "subject": "⚠️ Missed Medication Alert - {patient_email}",
    "text_item": "• {name} ({dosage}) - scheduled at {scheduled_time}",
    "text_body": """Hi,

Your patient {patient_email} has not taken the following medication(s) today:

{items}

Date: {report_date}

- {app_name}""",
    "html_item": "<li><strong>{name}</strong> ({dosage}) - scheduled at {scheduled_time}</li>",
    "html_body": """
<div style="font-family:sans-serif;max-width:520px;margin:0 auto;padding:24px;background:#f9fafb;border-radius:12px;">
  <h2 style="color:#b45309;margin-bottom:8px;">⚠️ Missed Medication Alert</h2>
  <p style="color:#374151;">Your patient <strong>{patient_email}</strong> has not taken the following medication(s) today:</p>
  <ul style="background:#fff;border:1px solid #e5e7eb;border-radius:8px;padding:16px 16px 16px 32px;color:#374151;line-height:1.8;">
    {items}
  </ul>
  <p style="color:#6b7280;font-size:14px;">Date: {report_date}</p>
  <p style="color:#6b7280;font-size:13px;margin-top:24px;border-top:1px solid #e5e7eb;padding-top:12px;">- {app_name} Alerts</p>
</div>
""",
}


def render_missed_dose_alert(
    digest: CaretakerDigest,
    report_date: date
) -> RenderedNotification:
    """Render both bodies from the same digest"""
    templates = MISSED_DOSE_TEMPLATES
    day = report_date.isoformat()

    text_items = "\n".join(
        templates["text_item"].format(
            name=item.name,
            dosage=item.dosage,
            scheduled_time=item.scheduled_time
        )
        for item in digest.items
    )
    html_items = "".join(
        templates["html_item"].format(
            name=escape(item.name),
            dosage=escape(item.dosage),
            scheduled_time=escape(item.scheduled_time)
        )
        for item in digest.items
    )

    return RenderedNotification(
        subject=templates["subject"].format(patient_email=digest.patient_email),
        text=templates["text_body"].format(
            patient_email=digest.patient_email,
            items=text_items,
            report_date=day,
            app_name=settings.APP_NAME
        ),
        html=templates["html_body"].format(
            patient_email=escape(digest.patient_email),
            items=html_items,
            report_date=day,
            app_name=escape(settings.APP_NAME)
        )
    )
