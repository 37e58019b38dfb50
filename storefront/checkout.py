# storefront/checkout.py
"""
State machine behind the checkout modal.

The flow walks details -> payment -> status. For a UPI payment the page calls
``tick`` about once a second and ``poll_due``/``apply_status`` every
POLL_SECONDS; the flow leaves the payment step on completion, failure or when
the QR code expires. A Razorpay payment waits in the payment step until the
gateway callback is verified.
"""
from datetime import datetime, timezone
from typing import List, Optional

POLL_SECONDS = 3
TICK_SECONDS = 1

PAYMENT_METHODS = ("UPI", "Razorpay")

REQUIRED_FIELDS = {
    "buyer_name": "Full name",
    "buyer_phone": "Phone",
    "buyer_email": "Email",
    "buyer_address": "Delivery address",
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_timestamp(value) -> datetime:
    """ISO string or datetime -> naive UTC datetime."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def format_time(milliseconds: int) -> str:
    minutes = milliseconds // 60000
    seconds = (milliseconds % 60000) // 1000
    return f"{minutes}:{seconds:02d}"


def missing_fields(details: dict) -> List[str]:
    return [label for key, label in REQUIRED_FIELDS.items() if not (details.get(key) or "").strip()]


class CheckoutFlow:
    def __init__(self, product: dict):
        self.product = product
        self.step = "details"
        self.details = {key: "" for key in REQUIRED_FIELDS}
        self.method = "UPI"
        self.qr: Optional[dict] = None
        self.order: Optional[dict] = None
        self.breakdown: Optional[dict] = None
        self.status: Optional[dict] = None
        self.time_left_ms = 0
        self._expires_at: Optional[datetime] = None
        self._last_poll: Optional[datetime] = None

    def payment_details(self) -> dict:
        return {
            "amount": self.product["price"],
            "product_id": self.product.get("id"),
            "product_name": self.product.get("name", ""),
            "artisan_id": self.product.get("artisan_id"),
            "artisan_name": self.product.get("artisan_name", ""),
            **{key: value.strip() for key, value in self.details.items()},
        }

    def start_payment(self, qr: dict, now: Optional[datetime] = None) -> None:
        self.qr = qr
        self.status = None
        self._expires_at = parse_timestamp(qr["expires_at"])
        self._last_poll = None
        self.step = "payment"
        self.tick(now)

    def start_razorpay(self, order: dict) -> None:
        self.order = order
        self.qr = None
        self._expires_at = None
        self.status = None
        self.step = "payment"

    @property
    def transaction_id(self) -> Optional[str]:
        return (self.qr or self.order or {}).get("transaction_id")

    def tick(self, now: Optional[datetime] = None) -> bool:
        """Update the countdown; returns True if the QR code just expired."""
        if self.step != "payment" or self._expires_at is None:
            return False
        now = now or utcnow()
        remaining = max(0, int((self._expires_at - now).total_seconds() * 1000))
        self.time_left_ms = remaining
        if remaining == 0:
            self._finish({
                "transaction_id": self.qr["transaction_id"],
                "status": "expired",
                "amount": self.qr["amount"],
                "timestamp": now.isoformat(),
                "payment_method": "UPI",
            })
            return True
        return False

    def poll_due(self, now: Optional[datetime] = None) -> bool:
        if self.step != "payment":
            return False
        now = now or utcnow()
        if self._last_poll is None or (now - self._last_poll).total_seconds() >= POLL_SECONDS:
            self._last_poll = now
            return True
        return False

    def apply_status(self, status: dict) -> bool:
        """Feed a polled status; returns True if the flow moved to the status step."""
        if self.step != "payment":
            return False
        if status.get("status") in ("completed", "failed", "expired"):
            self._finish(status)
            return True
        return False

    def retry(self) -> None:
        self.step = "details"
        self.qr = None
        self.order = None
        self.status = None
        self.time_left_ms = 0
        self._expires_at = None

    @property
    def succeeded(self) -> bool:
        return self.step == "status" and bool(self.status) and self.status.get("status") == "completed"

    def _finish(self, status: dict) -> None:
        self.status = status
        self.step = "status"
