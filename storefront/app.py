# storefront/app.py
import io
import logging
import time
from pathlib import Path
from typing import List

import streamlit as st
from dotenv import load_dotenv

# -------------------------
# Load .env from project root
# -------------------------
proj_root = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=proj_root / ".env")

from kalasetu import catalog, config  # noqa: E402
from storefront.api import (  # noqa: E402
    api_delete,
    api_get,
    api_post,
    api_put,
    error_detail,
    json_or_none,
    to_abs,
)
from storefront.checkout import PAYMENT_METHODS, TICK_SECONDS, CheckoutFlow, format_time, missing_fields  # noqa: E402
from storefront.samples import SAMPLE_ARTISANS, SAMPLE_STORIES, is_sample  # noqa: E402

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

PRODUCT_CATEGORIES = ["Textiles", "Pottery", "Jewelry", "Woodwork", "Metalwork", "Art"]
PRODUCT_STATUSES = ["active", "inactive", "sold_out"]
PAGES = ["Artisans", "Stories", "Marketplace", "Dashboard", "Orders"]
PLACEHOLDER_IMAGE = "https://placehold.co/400x300?text=Kalasetu"

# -------------------------
# Page config & styling
# -------------------------
st.set_page_config(page_title="Kalasetu", layout="wide", page_icon="🧵")

st.markdown(
    """
<style>
:root{ --bg:#faf6f0; --accent:#b07a45; --muted:#6f6259; --teal:#1f4e5a; }
.hero h1{ color:var(--teal); margin:0; }
.muted{ color:var(--muted); }
.badge{ display:inline-block; padding:2px 10px; border-radius:999px; font-size:0.8rem; color:#fff; }
.badge-completed{ background:#6b8f71; } .badge-pending{ background:#d4a574; color:#1f4e5a; }
.badge-failed{ background:#b5473a; } .badge-expired{ background:#8b6f5a; }
.price{ color:var(--accent); font-weight:700; font-size:1.1rem; }
</style>
""",
    unsafe_allow_html=True,
)

# -------------------------
# Session init
# -------------------------
for key, default in {
    "page": "Artisans",
    "artisan_id": None,
    "story_id": None,
    "checkout": None,
    "viewed_stories": set(),
    "orders_email": "",
}.items():
    if key not in st.session_state:
        st.session_state[key] = default


# -------------------------
# Helpers
# -------------------------
def split_list(text: str) -> List[str]:
    return [part.strip() for part in (text or "").split(",") if part.strip()]


def seed(key: str, value):
    if key not in st.session_state:
        st.session_state[key] = value


def apply_pending(key: str):
    """Move AI output parked under pending_<key> into the widget before it renders."""
    pending = st.session_state.pop(f"pending_{key}", None)
    if pending is not None:
        st.session_state[key] = pending


def go(page: str, **state):
    st.session_state.update(state)
    st.session_state["page"] = page
    st.rerun()


def first_image(record: dict) -> str:
    images = record.get("images") or []
    if record.get("profile_image"):
        return to_abs(record["profile_image"])
    return to_abs(images[0]) if images else PLACEHOLDER_IMAGE


def status_badge(status: str) -> str:
    return f"<span class='badge badge-{status}'>{status.replace('_', ' ').title()}</span>"


def load_artisans(q: str = "", craft: str = "all", location: str = "all"):
    """Backend artisans, or the filtered samples when there are none."""
    data = json_or_none(api_get("/artisans", params={"q": q, "craft": craft, "location": location}))
    if data:
        return data, False
    if data is None or not (q or craft != "all" or location != "all"):
        return catalog.filter_artisans(SAMPLE_ARTISANS, q, craft, location), True
    return [], False


def load_stories(q: str = "", craft: str = "all"):
    data = json_or_none(api_get("/stories", params={"q": q, "craft": craft}))
    if data:
        return data, False
    if data is None or not (q or craft != "all"):
        return catalog.filter_stories(SAMPLE_STORIES, q, craft), True
    return [], False


def open_checkout(product: dict):
    go("Checkout", checkout=CheckoutFlow(product))


def product_card(product: dict, key_prefix: str):
    st.image(first_image(product), use_container_width=True)
    st.markdown(f"**{product['name']}**")
    st.caption(f"by {product.get('artisan_name') or 'Unknown artisan'} · {product.get('category') or product.get('craft', '')}")
    st.markdown(f"<span class='price'>₹{product['price']:,.0f}</span>", unsafe_allow_html=True)
    can_buy = product.get("status", "active") == "active" and product.get("in_stock", True)
    if st.button("Buy now", key=f"{key_prefix}_buy_{product['id']}", disabled=not can_buy):
        open_checkout(product)


# -------------------------
# Navigation
# -------------------------
with st.sidebar:
    st.markdown("## 🧵 Kalasetu")
    current = st.session_state["page"]
    choice = st.radio("Navigate", PAGES, index=PAGES.index(current) if current in PAGES else 0)
    if current in PAGES and choice != current:
        go(choice, artisan_id=None, story_id=None)
    if current not in PAGES and st.button("Back to browsing"):
        go(choice, checkout=None)

st.markdown(
    '<div class="hero"><h1>Kalasetu</h1>'
    '<p class="muted">Meet the makers, read their stories, and buy directly from artisans.</p></div>',
    unsafe_allow_html=True,
)


# -------------------------
# Artisans
# -------------------------
def artisans_page():
    if st.session_state["artisan_id"]:
        return artisan_detail(st.session_state["artisan_id"])

    st.header("Meet Our Talented Artisans")
    facets = json_or_none(api_get("/artisans/facets")) or {
        "crafts": catalog.craft_types(SAMPLE_ARTISANS),
        "locations": catalog.locations(SAMPLE_ARTISANS),
    }
    c1, c2, c3 = st.columns([2, 1, 1])
    q = c1.text_input("Search artisans by name or craft...", key="artisan_q")
    craft = c2.selectbox("Craft", ["all"] + facets["crafts"], format_func=lambda v: "All Crafts" if v == "all" else v)
    location = c3.selectbox("Location", ["all"] + facets["locations"], format_func=lambda v: "All Locations" if v == "all" else v)

    artisans, from_samples = load_artisans(q, craft, location)
    if from_samples:
        st.info("Showing sample artisans.", icon="ℹ️")
    if not artisans:
        st.write("No artisans match your search.")
        return

    cols = st.columns(3)
    for i, a in enumerate(artisans):
        with cols[i % 3]:
            st.image(first_image(a), use_container_width=True)
            verified = " ✅" if a.get("verified") else ""
            st.markdown(f"**{a['name']}**{verified}")
            st.caption(f"{a.get('craft', '')} · 📍 {a.get('location', '')}")
            st.write(f"⭐ {a.get('rating', 5):.1f} ({a.get('review_count', 0)} reviews) · {a.get('experience', 0)} yrs")
            if a.get("specialties"):
                st.caption(", ".join(a["specialties"]))
            if not is_sample(a) and st.button("View profile", key=f"view_artisan_{a['id']}"):
                go("Artisans", artisan_id=a["id"])


def artisan_detail(artisan_id: str):
    if st.button("← All artisans"):
        go("Artisans", artisan_id=None)
    resp = api_get(f"/artisans/{artisan_id}")
    if resp is not None and resp.status_code == 404:
        st.error("Artisan not found")
        return
    artisan = json_or_none(resp)
    if not artisan:
        st.error("Failed to load artisan")
        return

    left, right = st.columns([1, 2])
    with left:
        st.image(first_image(artisan), use_container_width=True)
    with right:
        st.subheader(artisan["name"] + (" ✅" if artisan.get("verified") else ""))
        st.markdown(f"**Craft:** {artisan.get('craft', '')}  \n**Location:** {artisan.get('location', '')}")
        st.markdown(f"**Experience:** {artisan.get('experience', 0)} years · ⭐ {artisan.get('rating', 5):.1f}")
        st.write(artisan.get("bio") or "")
        if artisan.get("specialties"):
            st.caption("Specialties: " + ", ".join(artisan["specialties"]))

    st.markdown("---")
    st.subheader("Products")
    products = artisan.get("products") or []
    if not products:
        st.write("No products listed yet.")
    cols = st.columns(3)
    for i, p in enumerate(products):
        with cols[i % 3]:
            product_card(p, "artisan")

    if artisan.get("stories"):
        st.subheader("Stories")
        for s in artisan["stories"]:
            if st.button(s["title"], key=f"artisan_story_{s['id']}"):
                go("Stories", story_id=s["id"])


# -------------------------
# Stories
# -------------------------
def stories_page():
    if st.session_state["story_id"]:
        return story_detail(st.session_state["story_id"])

    st.header("Stories of Craft")
    facets = json_or_none(api_get("/stories/facets")) or {"crafts": catalog.craft_types(SAMPLE_STORIES)}
    c1, c2 = st.columns([2, 1])
    q = c1.text_input("Search stories...", key="story_q")
    craft = c2.selectbox("Category", ["all"] + facets["crafts"], format_func=lambda v: "All Categories" if v == "all" else v)

    stories, from_samples = load_stories(q, craft)
    if from_samples:
        st.info("Showing sample stories.", icon="ℹ️")
    if not stories:
        st.write("No stories found.")
        return

    hero, rest = catalog.split_featured(stories)
    if hero:
        st.markdown("### ✨ Featured")
        if hero.get("ai_enhanced"):
            st.caption("AI enhanced")
        st.markdown(f"## {hero['title']}")
        st.write(catalog.story_excerpt(hero))
        st.caption(f"{hero.get('artisan_name', '')} · 👁 {hero.get('views', 0)} · ❤️ {hero.get('likes', 0)}")
        if not is_sample(hero) and st.button("Read story", key=f"read_{hero['id']}"):
            go("Stories", story_id=hero["id"])
        st.markdown("---")

    for s in rest:
        img, body = st.columns([1, 3])
        with img:
            st.image(first_image(s), use_container_width=True)
        with body:
            st.markdown(f"#### {s['title']}")
            st.write(catalog.story_excerpt(s))
            st.caption(f"{s.get('artisan_name', '')} · {s.get('craft', '')} · 👁 {s.get('views', 0)} · ❤️ {s.get('likes', 0)}")
            if s.get("tags"):
                st.caption(" ".join(f"#{t}" for t in s["tags"]))
            if not is_sample(s) and st.button("Read story", key=f"read_{s['id']}"):
                go("Stories", story_id=s["id"])


def story_detail(story_id: str):
    if st.button("← All stories"):
        go("Stories", story_id=None)
    resp = api_get(f"/stories/{story_id}")
    if resp is not None and resp.status_code == 404:
        st.error("Story not found")
        return
    story = json_or_none(resp)
    if not story:
        st.error("Failed to load story")
        return

    # count a view once per session
    if story_id not in st.session_state["viewed_stories"]:
        counted = json_or_none(api_post(f"/stories/{story_id}/views"))
        if counted:
            story["views"] = counted["views"]
        st.session_state["viewed_stories"].add(story_id)

    st.markdown(f"# {story['title']}")
    st.caption(f"{story.get('craft', '')} · {story.get('location', '')} · 👁 {story.get('views', 0)} · ❤️ {story.get('likes', 0)}")
    if story.get("ai_summary"):
        st.info(story["ai_summary"])
    for img in story.get("images") or []:
        st.image(to_abs(img), use_container_width=True)
    for para in story["content"].split("\n\n"):
        st.write(para)
    if st.button("❤️ Like", key="like_story"):
        api_post(f"/stories/{story_id}/like")
        st.rerun()

    artisan = json_or_none(api_get(f"/artisans/{story['artisan_id']}")) if story.get("artisan_id") else None
    if artisan:
        st.markdown("---")
        st.markdown(f"**About the artisan:** {artisan['name']} · {artisan.get('craft', '')}")
        st.write(artisan.get("bio") or "")
        if st.button("View artisan profile"):
            go("Artisans", artisan_id=artisan["id"], story_id=None)


# -------------------------
# Marketplace
# -------------------------
def marketplace_page():
    st.header("Marketplace")
    c1, c2 = st.columns([2, 1])
    q = c1.text_input("Search products...", key="product_q")
    category = c2.selectbox("Category", ["all"] + PRODUCT_CATEGORIES, format_func=lambda v: "All Categories" if v == "all" else v)
    products = json_or_none(api_get("/products", params={"q": q, "category": category, "status": "active"}))
    if products is None:
        st.error("Failed to load products")
        return
    if not products:
        st.write("No products found.")
        return
    cols = st.columns(3)
    for i, p in enumerate(products):
        with cols[i % 3]:
            product_card(p, "market")


# -------------------------
# Checkout (payment modal)
# -------------------------
def checkout_page():
    flow: CheckoutFlow = st.session_state["checkout"]
    if flow is None:
        go("Marketplace")
    product = flow.product
    titles = {"details": "Order Details", "payment": "Complete Payment", "status": "Payment Status"}
    st.header(titles[flow.step])

    if flow.breakdown is None:
        flow.breakdown = json_or_none(api_get("/payments/breakdown", params={"amount": product["price"]}))
    breakdown = flow.breakdown

    summary, breakdown_col = st.columns([1, 1])
    with summary:
        st.image(first_image(product), width=160)
        st.markdown(f"**{product['name']}**  \nby {product.get('artisan_name', '')}")
        st.markdown(f"<span class='price'>₹{product['price']:,.0f}</span>", unsafe_allow_html=True)
    with breakdown_col:
        if breakdown:
            st.markdown("**Payment Breakdown**")
            st.write(f"Product Price: ₹{breakdown['product_price']:,.2f}")
            st.write(f"Platform Fee: ₹{breakdown['platform_fee']:,.2f}")
            st.write(f"Payment Gateway Fee: ₹{breakdown['payment_gateway_fee']:,.2f}")
            st.markdown(f"**Total Amount: ₹{breakdown['total_amount']:,.2f}**")
            st.caption(f"Artisan receives ₹{breakdown['artisan_share']:,.2f}")

    if flow.step == "details":
        with st.form("checkout_details"):
            c1, c2 = st.columns(2)
            flow.details["buyer_name"] = c1.text_input("Full Name *", value=flow.details["buyer_name"])
            flow.details["buyer_phone"] = c2.text_input("Phone *", value=flow.details["buyer_phone"])
            flow.details["buyer_email"] = st.text_input("Email *", value=flow.details["buyer_email"])
            flow.details["buyer_address"] = st.text_area("Delivery Address *", value=flow.details["buyer_address"])
            flow.method = st.radio(
                "Payment method", PAYMENT_METHODS, index=PAYMENT_METHODS.index(flow.method), horizontal=True,
                format_func=lambda m: "UPI QR" if m == "UPI" else "Razorpay (card / UPI / netbanking)",
            )
            submitted = st.form_submit_button("Proceed to Payment")
        if submitted:
            missing = missing_fields(flow.details)
            if missing:
                st.error("Please fill in: " + ", ".join(missing))
                return
            path = "/payments/upi" if flow.method == "UPI" else "/payments/razorpay/order"
            with st.spinner("Generating Payment..."):
                resp = api_post(path, json=flow.payment_details())
            session = json_or_none(resp)
            if not session:
                st.error(f"Failed to generate payment. Please try again. ({error_detail(resp)})")
                return
            if flow.method == "UPI":
                flow.start_payment(session)
            else:
                flow.start_razorpay(session)
            st.rerun()

    elif flow.step == "payment" and flow.order is not None:
        razorpay_step(flow)

    elif flow.step == "payment":
        flow.tick()
        if flow.step == "payment" and flow.poll_due():
            status = json_or_none(api_get(f"/payments/{flow.transaction_id}/status"))
            if status:
                flow.apply_status(status)
        if flow.step != "payment":
            st.rerun()
        st.markdown(f"⏱ **Time remaining: {format_time(flow.time_left_ms)}**")
        st.image(flow.qr["qr_code_url"], width=250)
        st.write("Scan the QR code with any UPI app or use the UPI ID below:")
        st.code(flow.qr["upi_id"])
        st.write(f"Amount: ₹{flow.qr['amount']:,.2f}")
        st.caption("Payment will be automatically verified once completed")
        time.sleep(TICK_SECONDS)
        st.rerun()

    else:
        status = flow.status or {}
        state = status.get("status")
        if state == "completed":
            st.success("Payment Successful! Your order has been confirmed.")
            st.markdown(f"Transaction ID: `{status.get('transaction_id')}`")
            if st.button("Continue shopping"):
                go("Marketplace", checkout=None)
        else:
            if state == "expired":
                st.error("Payment Expired. The payment session has expired. Please try again.")
            else:
                st.error("Payment Failed. There was an issue processing your payment. Please try again.")
            if st.button("Try Again"):
                flow.retry()
                st.rerun()


def razorpay_step(flow: CheckoutFlow):
    order = flow.order
    st.write(f"Razorpay order `{order['order_id']}` for ₹{order['amount'] / 100:,.2f}")
    if order.get("simulated"):
        st.info("Razorpay keys are not configured; this order is simulated.")
        c1, c2 = st.columns(2)
        outcome = None
        if c1.button("Simulate successful payment", type="primary"):
            outcome = "completed"
        if c2.button("Simulate failed payment"):
            outcome = "failed"
        if outcome:
            resp = api_post(f"/payments/{flow.transaction_id}/confirm", json={
                "status": outcome, "gateway_payment_id": f"pay_sim_{order['order_id'][6:]}",
            })
            status = json_or_none(resp)
            if not status:
                st.error(f"Could not record the payment. ({error_detail(resp)})")
                return
            flow.apply_status(status)
            st.rerun()
        return

    st.caption(f"Pay with Razorpay Checkout using key `{order.get('key_id')}`, then enter the details it returns.")
    with st.form("razorpay_verify"):
        payment_id = st.text_input("razorpay_payment_id")
        signature = st.text_input("razorpay_signature")
        verify = st.form_submit_button("Verify Payment")
    if verify:
        resp = api_post("/payments/razorpay/verify", json={
            "order_id": order["order_id"], "payment_id": payment_id.strip(), "signature": signature.strip(),
        })
        status = json_or_none(resp)
        if not status:
            st.error(f"Payment verification failed. ({error_detail(resp)})")
            return
        flow.apply_status(status)
        st.rerun()


# -------------------------
# Dashboard (admin)
# -------------------------
def artisan_form(record: dict):
    rid = record.get("id") or "new"
    k = lambda name: f"artisan_{name}_{rid}"  # noqa: E731
    for name, default in [
        ("name", ""), ("email", ""), ("phone", ""), ("location", ""), ("craft", ""), ("bio", ""),
        ("profile_image", ""), ("experience", 0), ("rating", 5.0), ("review_count", 0), ("verified", False),
    ]:
        seed(k(name), record.get(name, default))
    seed(k("specialties"), ", ".join(record.get("specialties") or []))
    apply_pending(k("bio"))

    with st.form(f"artisan_form_{rid}"):
        c1, c2 = st.columns(2)
        c1.text_input("Name *", key=k("name"))
        c2.text_input("Email *", key=k("email"))
        c1.text_input("Phone", key=k("phone"))
        c2.text_input("Location *", key=k("location"))
        c1.text_input("Craft *", key=k("craft"))
        c2.number_input("Experience (years)", min_value=0, step=1, key=k("experience"))
        st.text_area("Bio", key=k("bio"), height=150)
        st.text_input("Profile image URL", key=k("profile_image"))
        st.text_input("Specialties (comma separated)", key=k("specialties"))
        c1.number_input("Rating", min_value=0.0, max_value=5.0, step=0.1, key=k("rating"))
        c2.number_input("Review count", min_value=0, step=1, key=k("review_count"))
        st.checkbox("Verified", key=k("verified"))
        generate = st.form_submit_button("✨ Generate bio with AI")
        save = st.form_submit_button("Save artisan")

    values = {name: st.session_state[k(name)] for name in
              ["name", "email", "phone", "location", "craft", "bio", "profile_image", "verified"]}
    values.update(
        experience=int(st.session_state[k("experience")]),
        rating=float(st.session_state[k("rating")]),
        review_count=int(st.session_state[k("review_count")]),
        specialties=split_list(st.session_state[k("specialties")]),
    )

    if generate:
        if not (values["name"] and values["craft"] and values["location"]):
            st.warning("Please fill in name, craft, and location first")
            return
        with st.spinner("Writing bio..."):
            result = json_or_none(api_post("/ai/artisan-bio", json={
                "name": values["name"], "craft": values["craft"],
                "experience": values["experience"], "location": values["location"],
            }))
        if result and result["success"]:
            st.session_state[f"pending_{k('bio')}"] = result["text"]
            st.rerun()
        st.error("Failed to generate bio: " + ((result or {}).get("error") or "backend unavailable"))

    if save:
        resp = api_put(f"/artisans/{rid}", json=values) if record.get("id") else api_post("/artisans", json=values)
        if resp is not None and resp.ok:
            st.success("Artisan saved.")
            st.rerun()
        else:
            st.error(f"Save failed: {error_detail(resp)}")


def product_form(record: dict, artisans: List[dict]):
    rid = record.get("id") or "new"
    k = lambda name: f"product_{name}_{rid}"  # noqa: E731
    artisan_ids = [a["id"] for a in artisans]
    names = {a["id"]: a["name"] for a in artisans}
    crafts = {a["id"]: a.get("craft", "") for a in artisans}
    for name, default in [("name", ""), ("description", ""), ("price", 0.0), ("stock", 0),
                          ("featured", False), ("in_stock", True)]:
        seed(k(name), record.get(name, default))
    seed(k("category"), record.get("category") or PRODUCT_CATEGORIES[0])
    seed(k("status"), record.get("status") or "active")
    seed(k("images"), ", ".join(record.get("images") or []))
    seed(k("materials"), ", ".join(record.get("materials") or []))
    apply_pending(k("description"))

    if not artisan_ids:
        st.info("Add an artisan before listing products.")
        return
    with st.form(f"product_form_{rid}"):
        default_artisan = artisan_ids.index(record["artisan_id"]) if record.get("artisan_id") in artisan_ids else 0
        artisan_id = st.selectbox("Artisan *", artisan_ids, index=default_artisan, format_func=lambda i: names[i], key=k("artisan"))
        c1, c2 = st.columns(2)
        c1.text_input("Name *", key=k("name"))
        c2.number_input("Price (₹) *", min_value=0.0, step=50.0, key=k("price"))
        c1.selectbox("Category", PRODUCT_CATEGORIES, key=k("category"))
        c2.selectbox("Status", PRODUCT_STATUSES, key=k("status"))
        c1.number_input("Stock", min_value=0, step=1, key=k("stock"))
        st.text_input("Materials (comma separated)", key=k("materials"))
        st.text_area("Description", key=k("description"), height=150)
        st.text_input("Image URLs (comma separated)", key=k("images"))
        st.checkbox("In stock", key=k("in_stock"))
        st.checkbox("Featured", key=k("featured"))
        generate = st.form_submit_button("✨ Generate description with AI")
        save = st.form_submit_button("Save product")
    upload = st.file_uploader("Upload product image (jpg/png)", type=["jpg", "jpeg", "png"], key=k("upload")) if record.get("id") else None

    materials = split_list(st.session_state[k("materials")])
    if generate:
        if not (st.session_state[k("name")] and crafts.get(artisan_id) and materials):
            st.warning("Please fill in product name, craft, and materials first")
            return
        with st.spinner("Writing description..."):
            result = json_or_none(api_post("/ai/product-description", json={
                "name": st.session_state[k("name")], "craft": crafts[artisan_id], "materials": materials,
            }))
        if result and result["success"]:
            st.session_state[f"pending_{k('description')}"] = result["text"]
            st.rerun()
        st.error("Failed to generate description: " + ((result or {}).get("error") or "backend unavailable"))

    if save:
        values = {
            "artisan_id": artisan_id,
            "name": st.session_state[k("name")],
            "description": st.session_state[k("description")],
            "price": float(st.session_state[k("price")]),
            "category": st.session_state[k("category")],
            "status": st.session_state[k("status")],
            "stock": int(st.session_state[k("stock")]),
            "materials": materials,
            "images": split_list(st.session_state[k("images")]),
            "in_stock": st.session_state[k("in_stock")],
            "featured": st.session_state[k("featured")],
        }
        resp = api_put(f"/products/{rid}", json=values) if record.get("id") else api_post("/products", json=values)
        if resp is not None and resp.ok:
            st.success("Product saved.")
            st.rerun()
        else:
            st.error(f"Save failed: {error_detail(resp)}")

    if upload is not None and st.button("Attach image", key=k("attach")):
        files = {"file": (upload.name, io.BytesIO(upload.getvalue()), upload.type)}
        resp = api_post(f"/products/{rid}/images", files=files, timeout=60)
        if resp is not None and resp.ok:
            st.success("Image uploaded.")
        else:
            st.error(f"Upload failed: {error_detail(resp)}")


def story_form(record: dict, artisans: List[dict]):
    rid = record.get("id") or "new"
    k = lambda name: f"story_{name}_{rid}"  # noqa: E731
    by_id = {a["id"]: a for a in artisans}
    artisan_ids = list(by_id)
    for name, default in [("title", ""), ("content", ""), ("ai_summary", ""), ("views", 0), ("likes", 0),
                          ("featured", False), ("ai_enhanced", False)]:
        seed(k(name), record.get(name) or default)
    seed(k("tags"), ", ".join(record.get("tags") or []))
    seed(k("images"), ", ".join(record.get("images") or []))
    apply_pending(k("content"))
    apply_pending(k("ai_summary"))
    apply_pending(k("ai_enhanced"))

    if not artisan_ids:
        st.info("Add an artisan before writing stories.")
        return
    with st.form(f"story_form_{rid}"):
        default_artisan = artisan_ids.index(record["artisan_id"]) if record.get("artisan_id") in artisan_ids else 0
        artisan_id = st.selectbox("Artisan *", artisan_ids, index=default_artisan, format_func=lambda i: by_id[i]["name"], key=k("artisan"))
        st.text_input("Title *", key=k("title"))
        st.text_area("Content *", key=k("content"), height=250)
        st.text_area("AI summary", key=k("ai_summary"), height=80)
        st.text_input("Tags (comma separated)", key=k("tags"))
        st.text_input("Image URLs (comma separated)", key=k("images"))
        c1, c2 = st.columns(2)
        c1.number_input("Views", min_value=0, step=1, key=k("views"))
        c2.number_input("Likes", min_value=0, step=1, key=k("likes"))
        st.checkbox("Featured", key=k("featured"))
        st.checkbox("AI enhanced", key=k("ai_enhanced"))
        enhance = st.form_submit_button("✨ Enhance with AI")
        save = st.form_submit_button("Save story")

    if enhance:
        owner = by_id[artisan_id]
        content = st.session_state[k("content")]
        if not (content and owner.get("craft") and owner.get("location")):
            st.warning("Please fill in content, craft, and location first")
            return
        with st.spinner("Enhancing story..."):
            enhanced = json_or_none(api_post("/ai/enhance-story", json={
                "content": content, "craft": owner["craft"], "location": owner["location"],
            }))
            summary = None
            if enhanced and enhanced["success"]:
                summary = json_or_none(api_post("/ai/story-summary", json={"content": enhanced["text"]}))
        if enhanced and enhanced["success"]:
            st.session_state[f"pending_{k('content')}"] = enhanced["text"]
            st.session_state[f"pending_{k('ai_enhanced')}"] = True
            st.session_state[f"pending_{k('ai_summary')}"] = summary["text"] if summary and summary["success"] else ""
            st.rerun()
        st.error("Failed to enhance story: " + ((enhanced or {}).get("error") or "backend unavailable"))

    if save:
        values = {
            "artisan_id": artisan_id,
            "title": st.session_state[k("title")],
            "content": st.session_state[k("content")],
            "ai_summary": st.session_state[k("ai_summary")] or None,
            "tags": split_list(st.session_state[k("tags")]),
            "images": split_list(st.session_state[k("images")]),
            "views": int(st.session_state[k("views")]),
            "likes": int(st.session_state[k("likes")]),
            "featured": st.session_state[k("featured")],
            "ai_enhanced": st.session_state[k("ai_enhanced")],
        }
        resp = api_put(f"/stories/{rid}", json=values) if record.get("id") else api_post("/stories", json=values)
        if resp is not None and resp.ok:
            st.success("Story saved.")
            st.rerun()
        else:
            st.error(f"Save failed: {error_detail(resp)}")


def record_picker(label: str, records: List[dict], title_key: str) -> dict:
    options = ["new"] + [r["id"] for r in records]
    titles = {r["id"]: r[title_key] for r in records}
    chosen = st.selectbox(label, options, format_func=lambda i: "➕ New" if i == "new" else titles[i], key=f"pick_{label.lower()}")
    return next((r for r in records if r["id"] == chosen), {})


def delete_button(path: str, key: str, noun: str):
    confirm = st.checkbox(f"I want to delete this {noun}", key=f"confirm_{key}")
    if st.button(f"Delete {noun}", key=f"delete_{key}", disabled=not confirm):
        resp = api_delete(path)
        if resp is not None and resp.ok:
            st.success(f"{noun.title()} deleted.")
            st.rerun()
        else:
            st.error(f"Failed to delete {noun}: {error_detail(resp)}")


def dashboard_page():
    st.header("Admin Dashboard")
    artisans = json_or_none(api_get("/artisans"))
    stories = json_or_none(api_get("/stories"))
    products = json_or_none(api_get("/products"))
    if artisans is None or stories is None or products is None:
        st.error("Error fetching data from the backend.")
        return

    overview, tab_artisans, tab_stories, tab_products = st.tabs(["Overview", "Artisans", "Stories", "Products"])
    with overview:
        summary = json_or_none(api_get("/dashboard/summary")) or {}
        c1, c2, c3 = st.columns(3)
        c1.metric("Artisans", summary.get("artisans", len(artisans)))
        c2.metric("Stories", summary.get("stories", len(stories)))
        c3.metric("Products", summary.get("products", len(products)))
        c1.metric("Story views", summary.get("total_views", 0))
        c2.metric("AI-enhanced stories", summary.get("ai_enhanced_stories", 0))
        c3.metric("Featured products", summary.get("featured_products", 0))

    with tab_artisans:
        record = record_picker("Artisan", artisans, "name")
        artisan_form(record)
        if record:
            delete_button(f"/artisans/{record['id']}", f"artisan_{record['id']}", "artisan")

    with tab_stories:
        record = record_picker("Story", stories, "title")
        story_form(record, artisans)
        if record:
            if st.button("✨ Enhance & summarise saved story", key=f"enhance_{record['id']}"):
                with st.spinner("Enhancing story..."):
                    resp = api_post(f"/stories/{record['id']}/enhance", timeout=120)
                if resp is not None and resp.ok:
                    for name in ("content", "ai_summary", "ai_enhanced"):
                        st.session_state.pop(f"story_{name}_{record['id']}", None)
                    st.rerun()
                st.error(f"Error enhancing story: {error_detail(resp)}")
            delete_button(f"/stories/{record['id']}", f"story_{record['id']}", "story")

    with tab_products:
        record = record_picker("Product", products, "name")
        product_form(record, artisans)
        if record:
            delete_button(f"/products/{record['id']}", f"product_{record['id']}", "product")


# -------------------------
# Orders (payment history)
# -------------------------
def orders_page():
    st.header("Payment History")
    email = st.text_input("Your email", key="orders_email")
    if not email:
        st.caption("Enter the email you used at checkout.")
        return
    payments = json_or_none(api_get("/payments/history", params={"email": email}))
    if payments is None:
        st.error("Error loading payment history")
        return
    if not payments:
        st.write("No payments yet.")
        return
    for p in payments:
        c1, c2, c3 = st.columns([3, 1, 1])
        c1.markdown(f"**{p.get('product_name') or 'Order'}**  \n`{p['transaction_id']}` · {p['timestamp'][:16].replace('T', ' ')}")
        c2.markdown(f"₹{p['amount']:,.2f}")
        c3.markdown(status_badge(p["status"]), unsafe_allow_html=True)


PAGE_RENDERERS = {
    "Artisans": artisans_page,
    "Stories": stories_page,
    "Marketplace": marketplace_page,
    "Dashboard": dashboard_page,
    "Orders": orders_page,
    "Checkout": checkout_page,
}

PAGE_RENDERERS[st.session_state["page"]]()
