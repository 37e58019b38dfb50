# kalasetu/payments.py
"""
Payment service: fee breakdown, UPI QR sessions with expiry, status polling,
buyer history, and Razorpay order creation/signature verification.
"""
import hashlib
import hmac
import logging
import uuid
from datetime import datetime, timedelta
from typing import List, Optional
from urllib.parse import quote, urlencode

import requests
from sqlalchemy import func
from sqlalchemy.orm import Session

from . import config
from .models import Payment, utcnow
from .schemas import PaymentBreakdown, PaymentDetails, PaymentStatus, RazorpayOrder, UPIQRData
from .store import payment_service

logger = logging.getLogger(__name__)

QR_SERVICE_URL = "https://api.qrserver.com/v1/create-qr-code/"
RAZORPAY_ORDERS_URL = "https://api.razorpay.com/v1/orders"

TERMINAL_STATES = ("completed", "failed", "expired")


class PaymentStateError(ValueError):
    """Raised when a payment can no longer move to the requested state."""


class SignatureError(ValueError):
    """Raised when a gateway callback fails signature verification."""


def calculate_payment_breakdown(amount: float) -> PaymentBreakdown:
    platform_fee = round(amount * config.PLATFORM_FEE_PERCENT / 100, 2)
    gateway_fee = round(amount * config.GATEWAY_FEE_PERCENT / 100, 2)
    return PaymentBreakdown(
        product_price=round(amount, 2),
        platform_fee=platform_fee,
        payment_gateway_fee=gateway_fee,
        artisan_share=round(amount - platform_fee - gateway_fee, 2),
        total_amount=round(amount, 2),
    )


def new_transaction_id() -> str:
    return f"TXN{uuid.uuid4().hex[:16].upper()}"


def build_upi_uri(amount: float, transaction_id: str, note: str = "") -> str:
    params = {
        "pa": config.UPI_ID,
        "pn": config.UPI_PAYEE_NAME,
        "am": f"{amount:.2f}",
        "cu": "INR",
        "tn": note or f"Payment {transaction_id}",
        "tr": transaction_id,
    }
    return "upi://pay?" + urlencode(params, quote_via=quote)


def qr_code_url(data: str, size: int = 250) -> str:
    return f"{QR_SERVICE_URL}?size={size}x{size}&data={quote(data, safe='')}"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def open_payment(db: Session, details: PaymentDetails, transaction_id: str, payment_method: str, **extra) -> Payment:
    """Persist a pending payment that expires after the configured window."""
    data = details.model_dump(include=set(PaymentDetails.model_fields))
    data.update(
        transaction_id=transaction_id,
        status="pending",
        payment_method=payment_method,
        buyer_email=normalize_email(details.buyer_email),
        expires_at=utcnow() + timedelta(minutes=config.PAYMENT_EXPIRY_MINUTES),
        **extra,
    )
    return payment_service.create(db, data)


def generate_upi_qr(db: Session, details: PaymentDetails) -> UPIQRData:
    transaction_id = new_transaction_id()
    note = f"{details.product_name} by {details.artisan_name}" if details.product_name else ""
    uri = build_upi_uri(details.amount, transaction_id, note.strip())
    expires_at = open_payment(db, details, transaction_id, "UPI", upi_uri=uri).expires_at
    logger.info("UPI session %s opened for %.2f INR, expires %s", transaction_id, details.amount, expires_at.isoformat())

    return UPIQRData(
        transaction_id=transaction_id,
        upi_id=config.UPI_ID,
        upi_uri=uri,
        qr_code_url=qr_code_url(uri),
        amount=details.amount,
        expires_at=expires_at,
    )


def get_payment(db: Session, transaction_id: str) -> Optional[Payment]:
    return db.query(Payment).filter(Payment.transaction_id == transaction_id).first()


def _expire_if_due(db: Session, payment: Payment, now: Optional[datetime] = None) -> Payment:
    now = now or utcnow()
    if payment.status == "pending" and payment.expires_at is not None and now >= payment.expires_at:
        payment.status = "expired"
        db.add(payment)
        db.commit()
        db.refresh(payment)
        logger.info("Payment %s expired", payment.transaction_id)
    return payment


def check_payment_status(db: Session, transaction_id: str, now: Optional[datetime] = None) -> Optional[Payment]:
    payment = get_payment(db, transaction_id)
    if payment is None:
        return None
    return _expire_if_due(db, payment, now)


def confirm_payment(
    db: Session,
    transaction_id: str,
    status: str = "completed",
    gateway_payment_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Optional[Payment]:
    """Record the gateway's verdict for a pending payment."""
    payment = check_payment_status(db, transaction_id, now)
    if payment is None:
        return None
    if payment.status != "pending":
        raise PaymentStateError(f"Payment {transaction_id} is already {payment.status}")
    payment.status = status
    payment.gateway_payment_id = gateway_payment_id
    db.add(payment)
    db.commit()
    db.refresh(payment)
    logger.info("Payment %s marked %s", transaction_id, status)
    return payment


def get_payment_history(db: Session, buyer_email: str) -> List[Payment]:
    payments = (
        db.query(Payment)
        .filter(func.lower(Payment.buyer_email) == normalize_email(buyer_email))
        .order_by(Payment.created_at.desc())
        .all()
    )
    return [_expire_if_due(db, p) for p in payments]


def to_status(payment: Payment) -> PaymentStatus:
    return PaymentStatus(
        transaction_id=payment.transaction_id,
        status=payment.status,
        amount=payment.amount,
        payment_method=payment.payment_method or "UPI",
        timestamp=payment.updated_at or payment.created_at,
        product_id=payment.product_id,
        product_name=payment.product_name or "",
        artisan_name=payment.artisan_name or "",
        buyer_name=payment.buyer_name or "",
        buyer_email=payment.buyer_email or "",
    )


# ---------- Razorpay ----------

def get_payment_by_order(db: Session, order_id: str) -> Optional[Payment]:
    return db.query(Payment).filter(Payment.gateway_order_id == order_id).first()


def _gateway_order(amount_paise: int, currency: str, receipt: str) -> RazorpayOrder:
    if not (config.RAZORPAY_KEY_ID and config.RAZORPAY_KEY_SECRET):
        order_id = f"order_{uuid.uuid4().hex[:14]}"
        logger.info("Razorpay keys not set; simulated order %s", order_id)
        return RazorpayOrder(order_id=order_id, amount=amount_paise, currency=currency, simulated=True)

    resp = requests.post(
        RAZORPAY_ORDERS_URL,
        auth=(config.RAZORPAY_KEY_ID, config.RAZORPAY_KEY_SECRET),
        json={"amount": amount_paise, "currency": currency, "receipt": receipt},
        timeout=20,
    )
    resp.raise_for_status()
    body = resp.json()
    return RazorpayOrder(
        order_id=body["id"],
        amount=body.get("amount", amount_paise),
        currency=body.get("currency", currency),
        key_id=config.RAZORPAY_KEY_ID,
    )


def create_order(db: Session, details: PaymentDetails, currency: str = "INR", receipt: Optional[str] = None) -> RazorpayOrder:
    """
    Create a Razorpay order and record it as a pending payment keyed by the
    gateway order id. Without API keys a local order id is issued so the
    checkout can still be exercised end to end.
    """
    transaction_id = new_transaction_id()
    amount_paise = int(round(details.amount * 100))
    order = _gateway_order(amount_paise, currency, receipt or transaction_id)
    open_payment(db, details, transaction_id, "Razorpay", gateway_order_id=order.order_id)
    logger.info("Razorpay order %s recorded as %s", order.order_id, transaction_id)
    order.transaction_id = transaction_id
    return order


def razorpay_signature(order_id: str, payment_id: str, key_secret: str) -> str:
    message = f"{order_id}|{payment_id}".encode()
    return hmac.new(key_secret.encode(), message, hashlib.sha256).hexdigest()


def verify_payment(order_id: str, payment_id: str, signature: str, key_secret: Optional[str] = None) -> bool:
    key_secret = key_secret if key_secret is not None else config.RAZORPAY_KEY_SECRET
    if not key_secret:
        logger.warning("Cannot verify Razorpay payment %s: RAZORPAY_KEY_SECRET not set", payment_id)
        return False
    expected = razorpay_signature(order_id, payment_id, key_secret)
    ok = hmac.compare_digest(expected, signature or "")
    if not ok:
        logger.warning("Razorpay signature mismatch for order %s", order_id)
    return ok


def complete_order(
    db: Session,
    order_id: str,
    payment_id: str,
    signature: str,
    key_secret: Optional[str] = None,
) -> Optional[Payment]:
    """Check the checkout callback's signature and mark the order's payment completed."""
    payment = get_payment_by_order(db, order_id)
    if payment is None:
        return None
    if not verify_payment(order_id, payment_id, signature, key_secret):
        raise SignatureError(f"Payment verification failed for order {order_id}")
    return confirm_payment(db, payment.transaction_id, "completed", payment_id)
