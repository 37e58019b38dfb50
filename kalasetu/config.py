# kalasetu/config.py
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root before anything reads the environment
proj_root = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=proj_root / ".env")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./kalasetu.db")

# Public origin of this backend, used to build absolute image URLs
BACKEND_ORIGIN = os.getenv("BACKEND_ORIGIN", "").rstrip("/")

MEDIA_DIR = Path(os.getenv("MEDIA_DIR") or Path(__file__).resolve().parent / "media")

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GENAI_API_KEY") or os.getenv("GOOGLE_API_KEY") or ""
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

UPI_ID = os.getenv("UPI_ID", "karigari@upi")
UPI_PAYEE_NAME = os.getenv("UPI_PAYEE_NAME", "Kalasetu")
PAYMENT_EXPIRY_MINUTES = int(os.getenv("PAYMENT_EXPIRY_MINUTES", "15"))
PLATFORM_FEE_PERCENT = float(os.getenv("PLATFORM_FEE_PERCENT", "5"))
GATEWAY_FEE_PERCENT = float(os.getenv("GATEWAY_FEE_PERCENT", "2"))

RAZORPAY_KEY_ID = os.getenv("RAZORPAY_KEY_ID", "")
RAZORPAY_KEY_SECRET = os.getenv("RAZORPAY_KEY_SECRET", "")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
