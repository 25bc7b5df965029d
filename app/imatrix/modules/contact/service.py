from __future__ import annotations

import logging
import smtplib
from email.mime.text import MIMEText
from typing import TYPE_CHECKING

from flask import current_app

from app.imatrix.audit import audit_log
from app.imatrix.modules.contact.models import ContactMessage

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.imatrix.models import User
    from app.imatrix.modules.contact.schemas import ContactIn

logger = logging.getLogger(__name__)


def _header_safe(value: str) -> str:
    return " ".join((value or "").split())


def submit_message(s: "Session", payload: "ContactIn") -> ContactMessage:
    msg = ContactMessage(
        name=payload.name,
        email=str(payload.email),
        phone=payload.phone or None,
        company=payload.company or None,
        message=payload.message,
    )
    s.add(msg)
    s.commit()

    notify_new_message(msg)
    return msg


def notify_new_message(msg: ContactMessage) -> tuple[bool, str]:
    """
    Email the site owner about a new contact form message.

    Only runs when SMTP_HOST and CONTACT_NOTIFY_EMAIL are set. Failures are logged;
    the submission itself has already been stored.
    """
    cfg = current_app.config
    smtp_host = (cfg.get("SMTP_HOST") or "").strip()
    notify_to = (cfg.get("CONTACT_NOTIFY_EMAIL") or "").strip()
    if not smtp_host or not notify_to:
        return False, "not configured"

    lines = [
        f"Name: {msg.name}",
        f"Email: {msg.email}",
        f"Phone: {msg.phone or '-'}",
        f"Company: {msg.company or '-'}",
        "",
        msg.message,
    ]
    mime = MIMEText("\n".join(lines), "plain")
    mime["Subject"] = f"New contact message from {_header_safe(msg.name)}"
    mime["From"] = (cfg.get("SMTP_FROM") or "").strip() or notify_to
    mime["To"] = notify_to
    mime["Reply-To"] = _header_safe(msg.email)

    try:
        with smtplib.SMTP(smtp_host, int(cfg.get("SMTP_PORT") or 587), timeout=10) as server:
            server.starttls()
            username = (cfg.get("SMTP_USERNAME") or "").strip()
            password = cfg.get("SMTP_PASSWORD") or ""
            if username and password:
                server.login(username, password)
            server.send_message(mime)
    except (smtplib.SMTPException, OSError, ValueError) as e:
        # ValueError covers email.errors.HeaderParseError raised while flattening
        logger.exception("Contact notification failed (message_id=%s)", msg.id)
        return False, str(e)

    logger.info("Contact notification sent to %s (message_id=%s)", notify_to, msg.id)
    return True, "sent"


def delete_message(s: "Session", msg: ContactMessage, user: "User") -> None:
    msg_id, email = msg.id, msg.email
    s.delete(msg)
    s.commit()

    audit_log(user.email, "DELETE", "ContactMessage", msg_id, {"email": email})
