# storefront/api.py
import logging
import os
from typing import Optional

import requests
import streamlit as st

logger = logging.getLogger(__name__)

BACKEND = os.getenv("BACKEND_URL") or os.getenv("BACKEND") or "http://127.0.0.1:8000"


def to_abs(url: str) -> str:
    """
    If the API returned an absolute URL (starts with http), use it as-is.
    If it returned a relative path like /static/..., prefix BACKEND once.
    """
    if not url:
        return url
    if url.startswith("http"):
        return url
    base = BACKEND.rstrip("/")
    return f"{base}/{url.lstrip('/')}" if base else url


def _request(method: str, path: str, timeout: int, **kwargs) -> Optional[requests.Response]:
    try:
        return requests.request(method, BACKEND.rstrip("/") + path, timeout=timeout, **kwargs)
    except requests.RequestException as e:
        logger.error("%s %s failed: %s", method, path, e)
        st.error(f"Error contacting backend: {e}")
        return None


def api_get(path: str, params: dict = None, timeout: int = 20) -> Optional[requests.Response]:
    return _request("GET", path, timeout, params=params)


def api_post(path: str, json: dict = None, files: dict = None, timeout: int = 30) -> Optional[requests.Response]:
    return _request("POST", path, timeout, json=json, files=files)


def api_put(path: str, json: dict = None, timeout: int = 30) -> Optional[requests.Response]:
    return _request("PUT", path, timeout, json=json)


def api_delete(path: str, timeout: int = 20) -> Optional[requests.Response]:
    return _request("DELETE", path, timeout)


def json_or_none(resp: Optional[requests.Response]):
    if resp is not None and resp.ok:
        return resp.json()
    if resp is not None:
        logger.warning("Backend returned %s: %s", resp.status_code, resp.text[:200])
    return None


def error_detail(resp: Optional[requests.Response]) -> str:
    if resp is None:
        return "backend unreachable"
    try:
        detail = resp.json().get("detail")
    except ValueError:
        detail = None
    return str(detail or f"{resp.status_code} {resp.reason}")
