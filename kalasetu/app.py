# kalasetu/app.py
import logging
from typing import List, Optional

import requests
from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import ai, catalog, config, payments
from .db import Base, engine, get_db
from .media import absolute_image_url, save_image_and_enhance
from .models import Product, Story
from .schemas import (
    AIResponse,
    ArtisanBioIn,
    ArtisanDetail,
    ArtisanIn,
    ArtisanOut,
    ArtisanUpdate,
    ConfirmPaymentIn,
    DashboardSummary,
    EnhanceStoryIn,
    Facets,
    PaymentBreakdown,
    PaymentDetails,
    PaymentStatus,
    ProductDescriptionIn,
    ProductIn,
    ProductOut,
    ProductUpdate,
    RazorpayOrder,
    RazorpayOrderIn,
    RazorpayVerifyIn,
    StoryIn,
    StoryOut,
    StorySummaryIn,
    StoryUpdate,
    UPIQRData,
)
from .store import artisan_fields, artisan_service, product_service, story_service

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Kalasetu API")

# Expose media files under /static so the storefront can fetch them
config.MEDIA_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/static", StaticFiles(directory=str(config.MEDIA_DIR)), name="static")

# Initialize DB schema
Base.metadata.create_all(bind=engine)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Database unavailable, please try again later"})


# -------- Helpers --------
def _artisan_or_404(db: Session, artisan_id: str):
    artisan = artisan_service.get_by_id(db, artisan_id)
    if not artisan:
        raise HTTPException(status_code=404, detail="Artisan not found")
    return artisan


def _product_or_404(db: Session, product_id: str):
    product = product_service.get_by_id(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def _story_or_404(db: Session, story_id: str):
    story = story_service.get_by_id(db, story_id)
    if not story:
        raise HTTPException(status_code=404, detail="Story not found")
    return story


def _owner_fields(db: Session, artisan_id: str, with_location: bool) -> dict:
    fields = artisan_fields(db, artisan_id)
    if fields is None:
        raise HTTPException(status_code=404, detail="Artisan not found")
    if not with_location:
        fields.pop("location")
    return fields


# -------- Routes --------
@app.get("/")
def read_root():
    return {
        "message": "Kalasetu API is running",
        "gemini_loaded": ai.is_available(),
        "static_mounted": True,
        "backend_origin": config.BACKEND_ORIGIN or None,
    }


@app.get("/check-gemini")
def check_gemini():
    key_present = bool(config.GEMINI_API_KEY)
    client_error = None
    if key_present and not ai.is_available():
        client_error = "client failed to initialise; see server log"
    return {"key_present": key_present, "client_init_ok": ai.is_available(), "client_error": client_error}


# ---- Artisans ----
@app.get("/artisans", response_model=List[ArtisanOut])
def list_artisans(q: str = "", craft: str = "all", location: str = "all", db: Session = Depends(get_db)):
    records = [a.to_dict() for a in artisan_service.get_all(db)]
    return catalog.filter_artisans(records, search=q, craft=craft, location=location)


@app.get("/artisans/facets", response_model=Facets)
def artisan_facets(db: Session = Depends(get_db)):
    records = [a.to_dict() for a in artisan_service.get_all(db)]
    return Facets(crafts=catalog.craft_types(records), locations=catalog.locations(records))


@app.post("/artisans", response_model=ArtisanOut, status_code=201)
def create_artisan(payload: ArtisanIn, db: Session = Depends(get_db)):
    return artisan_service.create(db, payload.model_dump())


@app.get("/artisans/{artisan_id}", response_model=ArtisanDetail)
def get_artisan(artisan_id: str, db: Session = Depends(get_db)):
    artisan = _artisan_or_404(db, artisan_id)
    detail = ArtisanDetail.model_validate(artisan)
    detail.products = [ProductOut.model_validate(p) for p in product_service.get_by_artisan(db, artisan_id)]
    detail.stories = [StoryOut.model_validate(s) for s in story_service.get_by_artisan(db, artisan_id)]
    return detail


@app.put("/artisans/{artisan_id}", response_model=ArtisanOut)
def update_artisan(artisan_id: str, payload: ArtisanUpdate, db: Session = Depends(get_db)):
    artisan = artisan_service.update(db, artisan_id, payload.model_dump(exclude_unset=True))
    if not artisan:
        raise HTTPException(status_code=404, detail="Artisan not found")
    return artisan


@app.delete("/artisans/{artisan_id}")
def delete_artisan(artisan_id: str, db: Session = Depends(get_db)):
    if not artisan_service.delete(db, artisan_id):
        raise HTTPException(status_code=404, detail="Artisan not found")
    return {"status": "deleted", "id": artisan_id}


@app.get("/artisans/{artisan_id}/products", response_model=List[ProductOut])
def artisan_products(artisan_id: str, db: Session = Depends(get_db)):
    _artisan_or_404(db, artisan_id)
    return product_service.get_by_artisan(db, artisan_id)


@app.get("/artisans/{artisan_id}/stories", response_model=List[StoryOut])
def artisan_stories(artisan_id: str, db: Session = Depends(get_db)):
    _artisan_or_404(db, artisan_id)
    return story_service.get_by_artisan(db, artisan_id)


# ---- Products ----
@app.get("/products", response_model=List[ProductOut])
def list_products(
    q: str = "",
    category: str = "all",
    status: str = "all",
    artisan_id: Optional[str] = None,
    featured: Optional[bool] = None,
    db: Session = Depends(get_db),
):
    records = [p.to_dict() for p in product_service.get_all(db)]
    return catalog.filter_products(
        records, search=q, category=category, status=status, artisan_id=artisan_id, featured=featured
    )


@app.post("/products", response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    data = payload.model_dump()
    data.update(_owner_fields(db, payload.artisan_id, with_location=False))
    return product_service.create(db, data)


@app.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    return _product_or_404(db, product_id)


@app.put("/products/{product_id}", response_model=ProductOut)
def update_product(product_id: str, payload: ProductUpdate, db: Session = Depends(get_db)):
    _product_or_404(db, product_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("artisan_id"):
        data.update(_owner_fields(db, data["artisan_id"], with_location=False))
    return product_service.update(db, product_id, data)


@app.delete("/products/{product_id}")
def delete_product(product_id: str, db: Session = Depends(get_db)):
    if not product_service.delete(db, product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    return {"status": "deleted", "id": product_id}


@app.post("/products/{product_id}/images", response_model=ProductOut)
async def upload_product_image(product_id: str, file: UploadFile = File(...), db: Session = Depends(get_db)):
    product = _product_or_404(db, product_id)
    try:
        saved_path = save_image_and_enhance(file)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    images = list(product.images or []) + [absolute_image_url(saved_path.name)]
    return product_service.update(db, product_id, {"images": images})


# ---- Stories ----
@app.get("/stories", response_model=List[StoryOut])
def list_stories(q: str = "", craft: str = "all", db: Session = Depends(get_db)):
    records = [s.to_dict() for s in story_service.get_all(db)]
    return catalog.filter_stories(records, search=q, craft=craft)


@app.get("/stories/facets", response_model=Facets)
def story_facets(db: Session = Depends(get_db)):
    records = [s.to_dict() for s in story_service.get_all(db)]
    return Facets(crafts=catalog.craft_types(records), locations=catalog.locations(records))


@app.post("/stories", response_model=StoryOut, status_code=201)
def create_story(payload: StoryIn, db: Session = Depends(get_db)):
    data = payload.model_dump()
    data.update(_owner_fields(db, payload.artisan_id, with_location=True))
    return story_service.create(db, data)


@app.get("/stories/{story_id}", response_model=StoryOut)
def get_story(story_id: str, db: Session = Depends(get_db)):
    return _story_or_404(db, story_id)


@app.put("/stories/{story_id}", response_model=StoryOut)
def update_story(story_id: str, payload: StoryUpdate, db: Session = Depends(get_db)):
    _story_or_404(db, story_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("artisan_id"):
        data.update(_owner_fields(db, data["artisan_id"], with_location=True))
    return story_service.update(db, story_id, data)


@app.delete("/stories/{story_id}")
def delete_story(story_id: str, db: Session = Depends(get_db)):
    if not story_service.delete(db, story_id):
        raise HTTPException(status_code=404, detail="Story not found")
    return {"status": "deleted", "id": story_id}


@app.post("/stories/{story_id}/views")
def add_story_view(story_id: str, db: Session = Depends(get_db)):
    views = story_service.increment_views(db, story_id)
    if views is None:
        raise HTTPException(status_code=404, detail="Story not found")
    return {"id": story_id, "views": views}


@app.post("/stories/{story_id}/like")
def like_story(story_id: str, db: Session = Depends(get_db)):
    likes = story_service.increment_likes(db, story_id)
    if likes is None:
        raise HTTPException(status_code=404, detail="Story not found")
    return {"id": story_id, "likes": likes}


@app.post("/stories/{story_id}/enhance", response_model=StoryOut)
def enhance_story(story_id: str, db: Session = Depends(get_db)):
    story = _story_or_404(db, story_id)
    enhanced = ai.enhance_story(story.content, story.craft, story.location)
    if not enhanced.success:
        raise HTTPException(status_code=502, detail=f"Story enhancement failed: {enhanced.error}")
    summary = ai.generate_story_summary(enhanced.text)
    data = {"content": enhanced.text, "ai_enhanced": True}
    if summary.success:
        data["ai_summary"] = summary.text
    return story_service.update(db, story_id, data)


# ---- AI ----
@app.post("/ai/enhance-story", response_model=AIResponse)
def ai_enhance_story(payload: EnhanceStoryIn):
    return ai.enhance_story(payload.content, payload.craft, payload.location)


@app.post("/ai/product-description", response_model=AIResponse)
def ai_product_description(payload: ProductDescriptionIn):
    return ai.generate_product_description(payload.name, payload.craft, payload.materials)


@app.post("/ai/artisan-bio", response_model=AIResponse)
def ai_artisan_bio(payload: ArtisanBioIn):
    return ai.generate_artisan_bio(payload.name, payload.craft, payload.experience, payload.location)


@app.post("/ai/story-summary", response_model=AIResponse)
def ai_story_summary(payload: StorySummaryIn):
    return ai.generate_story_summary(payload.content)


# ---- Payments ----
@app.get("/payments/breakdown", response_model=PaymentBreakdown)
def payment_breakdown(amount: float):
    if amount < 0:
        raise HTTPException(status_code=400, detail="Amount must not be negative")
    return payments.calculate_payment_breakdown(amount)


@app.post("/payments/upi", response_model=UPIQRData, status_code=201)
def create_upi_payment(payload: PaymentDetails, db: Session = Depends(get_db)):
    return payments.generate_upi_qr(db, payload)


@app.get("/payments/history", response_model=List[PaymentStatus])
def payment_history(email: str, db: Session = Depends(get_db)):
    return [payments.to_status(p) for p in payments.get_payment_history(db, email)]


@app.get("/payments/{transaction_id}/status", response_model=PaymentStatus)
def payment_status(transaction_id: str, db: Session = Depends(get_db)):
    payment = payments.check_payment_status(db, transaction_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payments.to_status(payment)


@app.post("/payments/{transaction_id}/confirm", response_model=PaymentStatus)
def confirm_payment(transaction_id: str, payload: ConfirmPaymentIn, db: Session = Depends(get_db)):
    try:
        payment = payments.confirm_payment(db, transaction_id, payload.status, payload.gateway_payment_id)
    except payments.PaymentStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payments.to_status(payment)


@app.post("/payments/razorpay/order", response_model=RazorpayOrder, status_code=201)
def razorpay_order(payload: RazorpayOrderIn, db: Session = Depends(get_db)):
    try:
        return payments.create_order(db, payload, payload.currency, payload.receipt)
    except (requests.RequestException, KeyError) as e:
        logger.error("Razorpay order creation failed: %s", e)
        raise HTTPException(status_code=502, detail="Payment gateway unavailable")


@app.post("/payments/razorpay/verify", response_model=PaymentStatus)
def razorpay_verify(payload: RazorpayVerifyIn, db: Session = Depends(get_db)):
    try:
        payment = payments.complete_order(db, payload.order_id, payload.payment_id, payload.signature)
    except payments.SignatureError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except payments.PaymentStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not payment:
        raise HTTPException(status_code=404, detail="Order not found")
    return payments.to_status(payment)


# ---- Dashboard ----
@app.get("/dashboard/summary", response_model=DashboardSummary)
def dashboard_summary(db: Session = Depends(get_db)):
    return DashboardSummary(
        artisans=artisan_service.count(db),
        stories=story_service.count(db),
        products=product_service.count(db),
        total_views=story_service.total_views(db),
        ai_enhanced_stories=story_service.count(db, Story.ai_enhanced.is_(True)),
        featured_products=product_service.count(db, Product.featured.is_(True)),
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
