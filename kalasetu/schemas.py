"""
Request/response schemas for the Kalasetu API.

Create models carry the required fields, Update models make everything
optional so PUT can patch a subset, Out models mirror the stored documents.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

ProductCategory = Literal["Textiles", "Pottery", "Jewelry", "Woodwork", "Metalwork", "Art"]
ProductStatus = Literal["active", "inactive", "sold_out"]
PaymentState = Literal["pending", "completed", "failed", "expired"]


class OrmModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


def reject_null(value):
    # omitted means unchanged; null would blank a column the Out models require
    if value is None:
        raise ValueError("may be omitted but not set to null")
    return value


# ---------- Artisans ----------

class ArtisanIn(BaseModel):
    name: str = Field(..., min_length=1, description="Full name")
    email: EmailStr = Field(..., description="Contact email")
    phone: str = Field("", description="Phone number")
    location: str = Field(..., min_length=1, description="City, State")
    craft: str = Field(..., min_length=1, description="Primary craft")
    experience: int = Field(0, ge=0, description="Years of experience")
    bio: str = ""
    profile_image: str = ""
    rating: float = Field(5, ge=0, le=5)
    review_count: int = Field(0, ge=0)
    specialties: List[str] = Field(default_factory=list)
    verified: bool = False


class ArtisanUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    location: Optional[str] = Field(None, min_length=1)
    craft: Optional[str] = Field(None, min_length=1)
    experience: Optional[int] = Field(None, ge=0)
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    review_count: Optional[int] = Field(None, ge=0)
    specialties: Optional[List[str]] = None
    verified: Optional[bool] = None

    @field_validator("*", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class ArtisanOut(OrmModel):
    id: str
    name: str
    email: str
    phone: str = ""
    location: str = ""
    craft: str = ""
    experience: int = 0
    bio: str = ""
    profile_image: str = ""
    rating: float = 5
    review_count: int = 0
    specialties: List[str] = Field(default_factory=list)
    verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------- Products ----------

class ProductIn(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    price: float = Field(..., ge=0, description="Price in INR")
    images: List[str] = Field(default_factory=list)
    artisan_id: str = Field(..., description="Owning artisan id")
    category: Optional[ProductCategory] = None
    materials: List[str] = Field(default_factory=list)
    stock: int = Field(0, ge=0)
    status: ProductStatus = "active"
    in_stock: bool = True
    featured: bool = False


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    images: Optional[List[str]] = None
    artisan_id: Optional[str] = Field(None, min_length=1)
    category: Optional[ProductCategory] = None
    materials: Optional[List[str]] = None
    stock: Optional[int] = Field(None, ge=0)
    status: Optional[ProductStatus] = None
    in_stock: Optional[bool] = None
    featured: Optional[bool] = None

    @field_validator(
        "name", "description", "price", "images", "artisan_id", "materials",
        "stock", "status", "in_stock", "featured", mode="before",
    )
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class ProductOut(OrmModel):
    id: str
    name: str
    description: str = ""
    price: float
    images: List[str] = Field(default_factory=list)
    artisan_id: Optional[str] = None
    artisan_name: str = ""
    craft: str = ""
    category: Optional[str] = None
    materials: List[str] = Field(default_factory=list)
    stock: int = 0
    status: str = "active"
    in_stock: bool = True
    featured: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------- Stories ----------

class StoryIn(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    artisan_id: str
    images: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    ai_enhanced: bool = False
    ai_summary: Optional[str] = None
    featured: bool = False
    views: int = Field(0, ge=0)
    likes: int = Field(0, ge=0)


class StoryUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    artisan_id: Optional[str] = Field(None, min_length=1)
    images: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    ai_enhanced: Optional[bool] = None
    ai_summary: Optional[str] = None
    featured: Optional[bool] = None
    views: Optional[int] = Field(None, ge=0)
    likes: Optional[int] = Field(None, ge=0)

    @field_validator(
        "title", "content", "artisan_id", "images", "tags",
        "ai_enhanced", "featured", "views", "likes", mode="before",
    )
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class StoryOut(OrmModel):
    id: str
    title: str
    content: str
    artisan_id: Optional[str] = None
    artisan_name: str = ""
    craft: str = ""
    location: str = ""
    images: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    views: int = 0
    likes: int = 0
    ai_enhanced: bool = False
    ai_summary: Optional[str] = None
    featured: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ArtisanDetail(ArtisanOut):
    products: List[ProductOut] = Field(default_factory=list)
    stories: List[StoryOut] = Field(default_factory=list)


class Facets(BaseModel):
    crafts: List[str] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)


# ---------- AI ----------

class AIResponse(BaseModel):
    text: str = ""
    success: bool
    error: Optional[str] = None


class EnhanceStoryIn(BaseModel):
    content: str = Field(..., min_length=1)
    craft: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)


class ProductDescriptionIn(BaseModel):
    name: str = Field(..., min_length=1)
    craft: str = Field(..., min_length=1)
    materials: List[str] = Field(..., min_length=1)


class ArtisanBioIn(BaseModel):
    name: str = Field(..., min_length=1)
    craft: str = Field(..., min_length=1)
    experience: int = Field(0, ge=0)
    location: str = Field(..., min_length=1)


class StorySummaryIn(BaseModel):
    content: str = Field(..., min_length=1)


# ---------- Payments ----------

class PaymentDetails(BaseModel):
    amount: float = Field(..., gt=0, description="Amount in INR")
    product_id: Optional[str] = None
    product_name: str = ""
    artisan_id: Optional[str] = None
    artisan_name: str = ""
    buyer_name: str = Field(..., min_length=1)
    buyer_email: EmailStr
    buyer_phone: str = Field(..., min_length=1)
    buyer_address: str = Field(..., min_length=1)


class PaymentBreakdown(BaseModel):
    product_price: float
    platform_fee: float
    payment_gateway_fee: float
    artisan_share: float
    total_amount: float


class UPIQRData(BaseModel):
    transaction_id: str
    upi_id: str
    upi_uri: str
    qr_code_url: str
    amount: float
    expires_at: datetime


class PaymentStatus(OrmModel):
    transaction_id: str
    status: PaymentState
    amount: float
    payment_method: str = "UPI"
    timestamp: datetime
    product_id: Optional[str] = None
    product_name: str = ""
    artisan_name: str = ""
    buyer_name: str = ""
    buyer_email: str = ""


class ConfirmPaymentIn(BaseModel):
    status: Literal["completed", "failed"] = "completed"
    gateway_payment_id: Optional[str] = None


class RazorpayOrderIn(PaymentDetails):
    currency: str = "INR"
    receipt: Optional[str] = None


class RazorpayOrder(BaseModel):
    order_id: str
    amount: int = Field(..., description="Amount in paise")
    transaction_id: Optional[str] = None
    currency: str
    key_id: Optional[str] = None
    simulated: bool = False


class RazorpayVerifyIn(BaseModel):
    order_id: str
    payment_id: str
    signature: str


class DashboardSummary(BaseModel):
    artisans: int
    stories: int
    products: int
    total_views: int
    ai_enhanced_stories: int
    featured_products: int
