# storefront/utils/emailing.py
import os
import smtplib
import uuid
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from jinja2 import Environment, FileSystemLoader, select_autoescape

from storefront.utils import settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_templates_dir = os.path.join(os.path.dirname(__file__), "..", "templates")
_jinja_env = Environment(
    loader=FileSystemLoader(_templates_dir),
    autoescape=select_autoescape(["html", "xml"]),
)


def render_email(template_name: str, **context) -> str:
    base = {"brand": settings.STORE_BRAND, "frontend_url": settings.FRONTEND_URL}
    base.update(context)
    return _jinja_env.get_template(template_name).render(**base)


def send_email_smtp(to_addr: str, subject: str, html: str, reply_to: str | None = None) -> bool:
    """Sends one HTML email. Returns False (and logs) instead of raising."""
    if not settings.SMTP_HOST or not settings.MAIL_FROM:
        logger.error(f"SMTP not configured; cannot send email to {to_addr}")
        return False

    sender = settings.MAIL_FROM.strip()
    domain = sender.split("@")[-1] if "@" in sender else "localhost"

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.STORE_BRAND} <{sender}>"
    msg["To"] = to_addr
    msg["Message-ID"] = f"<{uuid.uuid4()}@{domain}>"
    msg["Date"] = datetime.now(timezone.utc).strftime("%a, %d %b %Y %H:%M:%S +0000")
    if reply_to:
        msg["Reply-To"] = reply_to
    msg.attach(MIMEText(html, "html", _charset="utf-8"))

    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=15) as smtp:
            smtp.starttls()
            if settings.SMTP_USER:
                smtp.login(settings.SMTP_USER, settings.SMTP_PASS)
            smtp.sendmail(sender, [to_addr], msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"SMTP send to {to_addr} failed: {e}")
        return False

    logger.info(f"Email '{subject}' sent to {to_addr}")
    return True
