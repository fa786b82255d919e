# boutique/mailer.py
import logging
import smtplib
import threading
from email.message import EmailMessage
from typing import Callable, List, Optional, Protocol

from .config import Settings
from .core import _is_number
from .errors import ServiceUnavailable, ValidationError
from .models import OrderIn

logger = logging.getLogger(__name__)

SHOP_NAME = "Card Boutique"
NOT_CONFIGURED = (
    "Email is not configured on the server. "
    "Please contact us directly using the contact details on the website."
)
SEND_FAILED = "We could not send emails right now. Please try again later or contact us directly."


class MailTransport(Protocol):
    def send(self, message: EmailMessage) -> None:
        ...


class SmtpTransport:
    """Opens one SMTP connection per message; settings never change after init."""

    def __init__(self, host: str, port: int, user: str, password: str,
                 secure: bool = False, timeout: float = 10.0):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.secure = secure
        self.timeout = timeout

    def send(self, message: EmailMessage) -> None:
        if self.secure:
            smtp = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        else:
            smtp = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        with smtp:
            if not self.secure:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls()
                    smtp.ehlo()
            smtp.login(self.user, self.password)
            smtp.send_message(message)


def build_transport(settings: Settings) -> Optional[SmtpTransport]:
    if not settings.mail_configured:
        logger.warning("Email is not fully configured (MAIL_HOST/MAIL_PORT/MAIL_USER/MAIL_PASS).")
        return None
    return SmtpTransport(
        settings.MAIL_HOST,
        settings.MAIL_PORT,
        settings.MAIL_USER,
        settings.MAIL_PASS,
        secure=settings.MAIL_SECURE,
        timeout=settings.MAIL_TIMEOUT,
    )


def order_summary(order: OrderIn) -> List[str]:
    quantity = order.quantity
    if not (_is_number(quantity) and quantity > 0):
        quantity = None
    lines = [
        f"Name: {order.name}",
        f"Email: {order.email}",
        f"Phone: {order.phone}" if order.phone else None,
        f"Card type: {order.card_type}" if order.card_type else None,
        f"Quantity: {quantity}" if quantity else None,
        "",
        "Order details:",
        order.message,
    ]
    return [line for line in lines if line is not None]


def _message(sender: Optional[str], to: str, subject: str, body: str) -> EmailMessage:
    msg = EmailMessage()
    if sender:
        msg["From"] = sender
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content(body)
    return msg


class OrderRelay:
    """
    Forwards an order request as two emails: a copy for the shop admin and an
    acknowledgment for the customer. One failed send fails the whole relay.
    """

    def __init__(self, admin_email: str, sender: Optional[str] = None,
                 transport: Optional[MailTransport] = None,
                 transport_factory: Optional[Callable[[], Optional[MailTransport]]] = None):
        self.admin_email = admin_email
        self.sender = sender
        self._transport = transport
        self._transport_factory = transport_factory
        self._lock = threading.Lock()

    @property
    def transport(self) -> Optional[MailTransport]:
        # created on first use, then shared; a missing config is retried next time
        if self._transport is None and self._transport_factory is not None:
            with self._lock:
                if self._transport is None:
                    self._transport = self._transport_factory()
        return self._transport

    def build_messages(self, order: OrderIn) -> List[EmailMessage]:
        summary = order_summary(order)
        admin_mail = _message(
            self.sender,
            self.admin_email,
            "New card order request from your website",
            "\n".join(summary),
        )
        customer_mail = _message(
            self.sender,
            order.email,
            "We received your card order request",
            "\n".join([
                f"Hi {order.name},",
                "",
                "Thank you for reaching out about your card order. Here is a copy of what you sent us:",
                "",
                *summary,
                "",
                "We will review your request and get back to you as soon as possible "
                "with options, pricing, and next steps.",
                "",
                "Best regards,",
                SHOP_NAME,
            ]),
        )
        return [admin_mail, customer_mail]

    def relay(self, order: OrderIn) -> None:
        if not order.name or not order.email or not order.message:
            raise ValidationError("Name, email, and order details are required.")
        transport = self.transport
        if transport is None:
            raise ServiceUnavailable(NOT_CONFIGURED)

        try:
            messages = self.build_messages(order)
        except ValueError as exc:
            # header values with line breaks are refused by EmailMessage
            raise ValidationError("Invalid order details.") from exc

        for msg in messages:
            try:
                transport.send(msg)
            except (smtplib.SMTPException, OSError) as exc:
                logger.error("Error sending order emails to %s: %s", msg["To"], exc)
                raise ServiceUnavailable(SEND_FAILED) from exc
        logger.info("relayed order from %s", order.email)
