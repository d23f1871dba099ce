"""
Booking confirmation emails over SMTP (Flask-Mail).
"""
import logging
import smtplib
import socket
from contextlib import contextmanager
from dataclasses import dataclass

from flask_mail import Message

from garage_booking.errors import ConfigurationError, EmailError

logger = logging.getLogger(__name__)

CONFIRMATION_SUBJECT = "Your Garage Service Booking is Confirmed!"
AUTH_FAILURE_MARKERS = ("535", "authentication failed", "username and password not accepted")
AUTH_FAILURE_HINT = (
    "Email send failed: SMTP authentication failed. "
    "Use a valid Gmail App Password or a valid Brevo SMTP key."
)


def is_gmail_host(host) -> bool:
    return bool(host) and "gmail.com" in host.lower()


def normalize_password(password, host) -> str:
    """Gmail app passwords are often pasted with spaces; Gmail wants none."""
    password = (password or "").strip()
    if is_gmail_host(host):
        return password.replace(" ", "")
    return password


@contextmanager
def socket_timeout(seconds):
    """
    Bound connect, read and write waits on sockets opened inside the block.

    Flask-Mail opens its SMTP connection without a timeout, so the default
    socket timeout is the only way to reach it.
    """
    previous = socket.getdefaulttimeout()
    socket.setdefaulttimeout(seconds)
    try:
        yield
    finally:
        socket.setdefaulttimeout(previous)


def describe_smtp_failure(error: Exception) -> str:
    message = str(error) or ""
    lower = message.lower()
    if isinstance(error, smtplib.SMTPAuthenticationError) or any(
        marker in lower for marker in AUTH_FAILURE_MARKERS
    ):
        return AUTH_FAILURE_HINT
    return "Email send failed: " + (message if message.strip() else "Unknown SMTP error.")


@dataclass
class SmtpConfig:
    host: str
    port: int
    user: str
    password: str
    sender: str
    secure: bool
    timeout: float = 15.0

    @classmethod
    def from_settings(cls, settings) -> "SmtpConfig":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=normalize_password(settings.smtp_pass, settings.smtp_host),
            sender=settings.smtp_from or settings.smtp_user,
            secure=bool(settings.smtp_secure),
            timeout=settings.smtp_timeout,
        )

    def missing(self):
        required = (("SMTP_USER", self.user), ("SMTP_PASS", self.password), ("SMTP_FROM", self.sender))
        return [key for key, value in required if not value]

    def flask_config(self) -> dict:
        """Translate into the ``MAIL_*`` keys Flask-Mail reads."""
        return {
            "MAIL_SERVER": self.host,
            "MAIL_PORT": self.port,
            "MAIL_USE_SSL": self.secure,
            "MAIL_USE_TLS": not self.secure,
            "MAIL_USERNAME": self.user or None,
            "MAIL_PASSWORD": self.password or None,
            "MAIL_DEFAULT_SENDER": self.sender or None,
        }


def booking_confirmation(name, vehicle, service, appointment, cost, business=None) -> str:
    """Plain-text body of the booking confirmation email."""
    rule = "━" * 32
    team = business.business_name if business is not None else "Your Garage Services"
    lines = [
        "Welcome to Our Garage Services!",
        "",
        f"Dear {name},",
        "",
        "Great news! Your service booking has been confirmed.",
        "",
        rule,
        "BOOKING DETAILS",
        rule,
        f"Vehicle Type: {vehicle}",
        f"Service Package: {service}",
    ]
    if appointment:
        lines.append(f"Appointment: {appointment}")
    lines += [
        f"Total Cost: Rs. {cost:.2f}",
        rule,
        "",
        "What's Next?",
        "• Our team will contact you shortly to confirm your appointment",
        "• Please bring your vehicle at the scheduled time",
        "• Our expert technicians will take care of everything!",
        "",
        "Need to reschedule or have questions?",
        "Feel free to reach out to us anytime.",
    ]
    if business is not None:
        lines += [
            "",
            "Our contact details:",
            f"Phone: {business.business_phone}",
            f"Email: {business.business_email}",
        ]
    lines += [
        "",
        "Thank you for choosing our services! We look forward to serving you.",
        "",
        "Best regards,",
        f"{team} Team",
        rule,
    ]
    return "\n".join(lines)


class MailNotifier:
    """Sends single plain-text messages through the app's Flask-Mail instance."""

    def __init__(self, mail, settings):
        self.mail = mail
        self.smtp = SmtpConfig.from_settings(settings)

    def require_config(self):
        missing = self.smtp.missing()
        if missing:
            raise ConfigurationError(
                "Missing required SMTP configuration: " + ", ".join(missing)
                + ". Set either GARAGE_SMTP_* or SMTP_* values in .env."
            )

    def send_email(self, to, subject, body):
        self.require_config()
        message = Message(subject=subject, recipients=[to], body=body, sender=self.smtp.sender)
        try:
            with socket_timeout(self.smtp.timeout):
                self.mail.send(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Email to %s failed: %s", to, e)
            raise EmailError(describe_smtp_failure(e)) from e
        logger.info("Email sent successfully to %s", to)

    def verify(self):
        """Open and authenticate an SMTP connection without sending anything."""
        self.require_config()
        try:
            with socket_timeout(self.smtp.timeout), self.mail.connect():
                pass
        except (smtplib.SMTPException, OSError) as e:
            raise EmailError(describe_smtp_failure(e)) from e
        logger.info("SMTP connection verified for %s:%s", self.smtp.host, self.smtp.port)
