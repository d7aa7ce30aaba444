"""Transactional email over SMTP (expiry reminders, autopay payment receipts)."""
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional
from app.config import settings
from app.core.utils import parse_timestamp
import logging

logger = logging.getLogger(__name__)

SITE_URL = "https://celite.in"


def subscription_expiring_email(user_name: str, plan: str, expiry_date: str):
    """(subject, html) for the 'subscription ending soon' reminder"""
    plan_label = "Yearly" if plan == "yearly" else "Monthly"
    expiry = parse_timestamp(expiry_date)
    expiry_label = expiry.strftime("%d %B %Y") if expiry else expiry_date
    subject = "Your Celite Subscription is Ending Soon"
    html = f"""
    <html>
      <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
          <h1>Subscription Ending Soon</h1>
          <p>Hi {user_name},</p>
          <p>This is a friendly reminder that your Celite <strong>{plan_label}</strong> subscription
          will expire on <strong>{expiry_label}</strong>.</p>
          <p>To continue enjoying unlimited access to premium templates, please renew your subscription before it expires.</p>
          <a href="{SITE_URL}/pricing">Renew Subscription</a>
          <p style="color: #666; font-size: 14px;">Best regards,<br>The Celite Team</p>
        </div>
      </body>
    </html>
    """
    return subject, html


def subscription_payment_email(user_name: str, plan: str, amount: float, next_billing_date: str):
    plan_label = "Yearly" if plan == "yearly" else "Monthly"
    next_billing = parse_timestamp(next_billing_date)
    next_billing_label = next_billing.strftime("%d %B %Y") if next_billing else next_billing_date
    subject = "Payment Received - Celite Subscription"
    html = f"""
    <html>
      <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
          <h1>Payment Received</h1>
          <p>Hi {user_name},</p>
          <p>We've successfully processed your payment for your Celite subscription.</p>
          <p>Plan: <strong>{plan_label} Pro</strong><br>
          Amount: <strong>&#8377;{amount:,.0f}</strong><br>
          Next billing date: <strong>{next_billing_label}</strong></p>
          <a href="{SITE_URL}/profile">Manage Subscription</a>
          <p style="color: #666; font-size: 14px;">Best regards,<br>The Celite Team</p>
        </div>
      </body>
    </html>
    """
    return subject, html


def send_email(to: str, subject: str, html: str, bcc: Optional[str] = None) -> bool:
    """Send one HTML email; False when SMTP is not configured or delivery fails"""
    if not settings.smtp_user or not settings.smtp_password:
        logger.warning(f"SMTP not configured, skipping email to {to}: {subject}")
        return False

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = formataddr((settings.email_from_name, settings.email_from))
    msg["To"] = to
    if bcc:
        msg["Bcc"] = bcc
    msg.attach(MIMEText(html, "html"))

    try:
        if settings.smtp_secure:
            with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, timeout=30) as s:
                s.login(settings.smtp_user, settings.smtp_password)
                s.send_message(msg)
        else:
            with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as s:
                s.starttls()
                s.login(settings.smtp_user, settings.smtp_password)
                s.send_message(msg)
        logger.info(f"Email sent to {to}: {subject}")
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Error sending email to {to}: {e}")
        return False
