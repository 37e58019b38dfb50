# kalasetu/models.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.types import JSON

from .db import Base


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    # naive UTC; SQLite drops tzinfo on the way back anyway
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Document:
    """Columns shared by every collection: string id and timestamps."""

    id = Column(String(32), primary_key=True, default=new_id)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}


class Artisan(Document, Base):
    __tablename__ = "artisans"
    name = Column(String, index=True, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, default="")
    location = Column(String, index=True, default="")
    craft = Column(String, index=True, default="")
    experience = Column(Integer, default=0)
    bio = Column(Text, default="")
    profile_image = Column(String, default="")
    rating = Column(Float, default=5.0)
    review_count = Column(Integer, default=0)
    specialties = Column(JSON, default=list)
    verified = Column(Boolean, default=False)


class Product(Document, Base):
    __tablename__ = "products"
    name = Column(String, index=True, nullable=False)
    description = Column(Text, default="")
    price = Column(Float, nullable=False)
    images = Column(JSON, default=list)             # list[str] of URLs
    artisan_id = Column(String(32), index=True)     # reference only, no FK
    artisan_name = Column(String, default="")
    craft = Column(String, default="")
    category = Column(String, index=True, default="")
    materials = Column(JSON, default=list)
    stock = Column(Integer, default=0)
    status = Column(String, default="active")
    in_stock = Column(Boolean, default=True)
    featured = Column(Boolean, default=False)


class Story(Document, Base):
    __tablename__ = "stories"
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    artisan_id = Column(String(32), index=True)
    artisan_name = Column(String, default="")
    craft = Column(String, index=True, default="")
    location = Column(String, default="")
    images = Column(JSON, default=list)
    tags = Column(JSON, default=list)
    views = Column(Integer, default=0)
    likes = Column(Integer, default=0)
    ai_enhanced = Column(Boolean, default=False)
    ai_summary = Column(Text, nullable=True)
    featured = Column(Boolean, default=False)


class Payment(Document, Base):
    __tablename__ = "payments"
    transaction_id = Column(String, unique=True, index=True, nullable=False)
    status = Column(String, default="pending", index=True)  # pending|completed|failed|expired
    amount = Column(Float, nullable=False)
    payment_method = Column(String, default="UPI")
    product_id = Column(String(32), nullable=True)
    product_name = Column(String, default="")
    artisan_id = Column(String(32), nullable=True)
    artisan_name = Column(String, default="")
    buyer_name = Column(String, default="")
    buyer_email = Column(String, index=True, default="")
    buyer_phone = Column(String, default="")
    buyer_address = Column(Text, default="")
    upi_uri = Column(Text, default="")
    gateway_order_id = Column(String, nullable=True)
    gateway_payment_id = Column(String, nullable=True)
    expires_at = Column(DateTime, nullable=True)
