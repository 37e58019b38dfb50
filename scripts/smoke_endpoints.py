# scripts/smoke_endpoints.py
import io
import os
import sys
import time

import requests
from PIL import Image, ImageDraw

BACKEND = os.getenv("BACKEND_URL", "http://127.0.0.1:8000")


def create_artisan(name="Auto Tester", location="Testville, Test State", craft="Pottery"):
    print("Creating artisan...")
    resp = requests.post(f"{BACKEND}/artisans", json={
        "name": name, "email": "auto@example.com", "location": location, "craft": craft,
        "experience": 3, "bio": "Auto test bio",
    })
    print("Status:", resp.status_code)
    print(resp.text)
    resp.raise_for_status()
    return resp.json()["id"]


def create_sample_image_bytes(text="sample"):
    img = Image.new("RGB", (800, 600), color=(240, 240, 240))
    d = ImageDraw.Draw(img)
    d.text((20, 20), text, fill=(10, 10, 10))
    b = io.BytesIO()
    img.save(b, format="JPEG")
    b.seek(0)
    return b


def create_product(artisan_id, name="Auto Pot", price=250):
    print("Creating product...")
    resp = requests.post(f"{BACKEND}/products", json={
        "artisan_id": artisan_id, "name": name, "price": price, "category": "Pottery", "stock": 2,
    })
    print("Status:", resp.status_code)
    resp.raise_for_status()
    product_id = resp.json()["id"]

    print("Uploading product image...")
    files = {"file": ("sample.jpg", create_sample_image_bytes(name), "image/jpeg")}
    resp = requests.post(f"{BACKEND}/products/{product_id}/images", files=files)
    print("Status:", resp.status_code)
    print(resp.text)
    resp.raise_for_status()
    return resp.json()


def buy(product):
    print("Opening UPI payment...")
    resp = requests.post(f"{BACKEND}/payments/upi", json={
        "amount": product["price"], "product_id": product["id"], "product_name": product["name"],
        "artisan_id": product["artisan_id"], "artisan_name": product["artisan_name"],
        "buyer_name": "Auto Buyer", "buyer_email": "buyer@example.com",
        "buyer_phone": "9999999999", "buyer_address": "1 Test Road",
    })
    print("Status:", resp.status_code)
    print(resp.text)
    resp.raise_for_status()
    txn = resp.json()["transaction_id"]

    status = requests.get(f"{BACKEND}/payments/{txn}/status").json()
    print("Polled status:", status["status"])
    resp = requests.post(f"{BACKEND}/payments/{txn}/confirm", json={"status": "completed"})
    resp.raise_for_status()
    return resp.json()


if __name__ == "__main__":
    try:
        artisan_id = create_artisan()
        time.sleep(1)
        product = create_product(artisan_id)
        time.sleep(1)
        result = buy(product)
        print("Payment finished:", result["status"])
        history = requests.get(f"{BACKEND}/payments/history", params={"email": "buyer@example.com"}).json()
        print("History entries:", len(history))
        print("Smoke run completed successfully.")
    except Exception as e:
        print("Error during smoke run:", e)
        sys.exit(1)
