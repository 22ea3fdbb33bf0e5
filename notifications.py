"""
Order e-mail notifications.

The SMTP settings are read once when the notifier is built at startup. Without
MAIL_USER / MAIL_PASSWORD the notifier stays usable but every send is skipped
and reported as False.
"""
import logging
import os
import smtplib
from email.message import EmailMessage
from typing import Optional

logger = logging.getLogger(__name__)


class NotificationError(Exception):
    pass


def short_order_id(order: dict) -> str:
    return str(order["_id"])[-8:].upper()


def _vendor_name(order: dict) -> str:
    vendor = order.get("vendor") or {}
    return vendor.get("restaurant_name") or vendor.get("name") or "the restaurant"


def _meal_name(order: dict) -> str:
    meal = order.get("meal") or {}
    return meal.get("name", "your meal")


class MailNotifier:
    def __init__(self, host: str = "smtp.gmail.com", port: int = 587, user: Optional[str] = None,
                 password: Optional[str] = None, sender: Optional[str] = None,
                 app_name: str = "Food Delivery App", timeout: float = 10.0,
                 use_ssl: Optional[bool] = None):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender = sender or user
        self.app_name = app_name
        self.timeout = timeout
        # 465 is implicit TLS; other ports upgrade with STARTTLS
        self.use_ssl = port == 465 if use_ssl is None else use_ssl
        if not self.enabled:
            logger.warning("Mail credentials not found. Email notifications will be skipped.")

    @classmethod
    def from_env(cls) -> "MailNotifier":
        secure = os.getenv("MAIL_SECURE")
        return cls(
            host=os.getenv("MAIL_HOST", "smtp.gmail.com"),
            port=int(os.getenv("MAIL_PORT", 587)),
            user=os.getenv("MAIL_USER"),
            password=os.getenv("MAIL_PASSWORD"),
            sender=os.getenv("MAIL_FROM"),
            app_name=os.getenv("APP_NAME", "Food Delivery App"),
            use_ssl=None if secure is None else secure.lower() in ("1", "true", "yes"),
        )

    @property
    def enabled(self) -> bool:
        return bool(self.user and self.password)

    def send_email(self, to: str, subject: str, body: str) -> bool:
        if not self.enabled:
            logger.warning("Mail transport not configured. Skipping email to %s", to)
            return False

        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = f"{self.app_name} <{self.sender}>"
        message["To"] = to
        message.set_content(body)

        try:
            transport = smtplib.SMTP_SSL if self.use_ssl else smtplib.SMTP
            with transport(self.host, self.port, timeout=self.timeout) as smtp:
                if not self.use_ssl:
                    smtp.starttls()
                smtp.login(self.user, self.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to, e)
            raise NotificationError(f"Failed to send email to {to}") from e

        logger.info("Email sent to %s: %s", to, subject)
        return True

    def send_order_invoice(self, to: str, order: dict) -> bool:
        meal = order.get("meal") or {}
        lines = [
            "Order Confirmation - thank you for your order!",
            "",
            f"Order ID: {short_order_id(order)}",
            f"Meal: {_meal_name(order)}",
            f"Quantity: {order['quantity']}",
        ]
        if "price" in meal:
            lines.append(f"Unit Price: ${meal['price']:.2f}")
        lines += [
            f"Total Amount: ${order['total_price']:.2f}",
            f"Restaurant: {_vendor_name(order)}",
            "",
            "We'll notify you when your order status updates.",
        ]
        return self.send_email(to, f"Order Invoice #{short_order_id(order)}", "\n".join(lines))

    def send_order_status_update(self, to: str, order: dict, label: str) -> bool:
        body = "\n".join([
            f"Your order status has changed to: {label}",
            "",
            f"Order ID: {short_order_id(order)}",
            f"Meal: {_meal_name(order)}",
            f"Quantity: {order['quantity']}",
            f"Restaurant: {_vendor_name(order)}",
        ])
        return self.send_email(to, f"Order Update - #{short_order_id(order)}", body)

    def send_delivery_notification(self, to: str, order: dict) -> bool:
        body = "\n".join([
            "Order delivered successfully!",
            "",
            f"Order ID: {short_order_id(order)}",
            f"Meal: {_meal_name(order)}",
            f"Restaurant: {_vendor_name(order)}",
            "",
            "Thank you for choosing our service!",
        ])
        return self.send_email(to, f"Order Delivered - #{short_order_id(order)}", body)
