"""Outbound email over SMTP.

Status notifications are sent as a plain-text part plus a branded HTML
rendering of the same text. Failures are raised as typed
``EmailDeliveryError`` subclasses so callers can tell a provider sending
limit apart from other problems.
"""
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Optional

from pydantic import BaseModel

from campus_suite.core.config import settings
from campus_suite.core.errors import EmailDeliveryError, EmailNotConfigured, EmailRateLimited
from campus_suite.core.logging import get_logger
from campus_suite.utils.text import text_to_html

logger = get_logger(__name__)

# Provider responses that mean "try again later" rather than "bad message"
RATE_LIMIT_MARKERS = (
    "sending limit",
    "rate limit",
    "too many messages",
    "quota exceeded",
)


class EmailReceipt(BaseModel):
    recipient: str
    subject: str
    message_id: str


def _is_rate_limited(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in RATE_LIMIT_MARKERS)


def render_html(text: str, brand: str) -> str:
    """Wrap a plain-text body in the branded email layout."""
    year = datetime.now().year
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; border: 1px solid #e0e0e0; border-radius: 5px;">
  <div style="background-color: #f8f9fa; padding: 15px; text-align: center; border-bottom: 1px solid #e0e0e0; margin-bottom: 20px;">
    <h2 style="color: #2c3e50; margin: 0;">{brand}</h2>
  </div>
  {text_to_html(text)}
  <div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #e0e0e0; font-size: 12px; color: #7f8c8d;">
    <p>This is an automated message, please do not reply directly to this email.</p>
    <p>&copy; {year} {brand}. All rights reserved.</p>
  </div>
</div>
"""


class EmailSender:
    """SMTP email collaborator.

    Example:
        >>> sender = EmailSender()
        >>> sender.send("student@example.com", "Order Shipped", "Dear Ama, ...")
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: Optional[str] = None,
        timeout: Optional[float] = None,
        use_ssl: Optional[bool] = None,
    ):
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.username = username or settings.smtp_username
        self.password = password or settings.smtp_password
        self.from_email = from_email or settings.smtp_from_email or self.username
        self.from_name = from_name or settings.smtp_from_name
        self.timeout = timeout or settings.smtp_timeout
        self.use_ssl = settings.smtp_use_ssl if use_ssl is None else use_ssl

    @property
    def is_configured(self) -> bool:
        return bool(self.username and self.password)

    def build_message(self, to: str, subject: str, text: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = to
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid()
        msg.attach(MIMEText(text, "plain", "utf-8"))
        msg.attach(MIMEText(render_html(text, self.from_name), "html", "utf-8"))
        return msg

    def _connect(self) -> smtplib.SMTP:
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        server.starttls()
        return server

    def send(self, to: str, subject: str, text: str) -> EmailReceipt:
        """Deliver one message.

        Raises:
            EmailNotConfigured: SMTP credentials are missing
            EmailRateLimited: the provider refused because of sending limits
            EmailDeliveryError: any other SMTP or network failure
        """
        if not self.is_configured:
            logger.warning(
                f"SMTP not configured - email '{subject}' to {to} not sent",
                extra={"recipient": to},
            )
            raise EmailNotConfigured("Email service configuration is incomplete")

        msg = self.build_message(to, subject, text)
        try:
            with self._connect() as server:
                server.login(self.username, self.password)
                server.send_message(msg)
        except smtplib.SMTPResponseException as e:
            reply = e.smtp_error.decode(errors="replace") if isinstance(e.smtp_error, bytes) else str(e.smtp_error)
            if _is_rate_limited(reply):
                logger.warning(
                    f"Email provider sending limit reached, '{subject}' to {to} skipped",
                    extra={"recipient": to, "error_type": "rate_limited"},
                )
                raise EmailRateLimited(f"{e.smtp_code} {reply}") from e
            raise EmailDeliveryError(f"SMTP error {e.smtp_code}: {reply}") from e
        except smtplib.SMTPRecipientsRefused as e:
            replies = " ".join(
                (message.decode(errors="replace") if isinstance(message, bytes) else str(message))
                for _, message in e.recipients.values()
            )
            if _is_rate_limited(replies):
                raise EmailRateLimited(replies) from e
            raise EmailDeliveryError(f"Recipient refused: {replies}") from e
        except (smtplib.SMTPException, OSError) as e:
            raise EmailDeliveryError(f"Email delivery failed: {e}") from e

        logger.info(
            f"Email '{subject}' sent to {to}",
            extra={"recipient": to},
        )
        return EmailReceipt(recipient=to, subject=subject, message_id=msg["Message-ID"])


_email_sender: Optional[EmailSender] = None


def get_email_sender() -> EmailSender:
    global _email_sender
    if _email_sender is None:
        _email_sender = EmailSender()
    return _email_sender
