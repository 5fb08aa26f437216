"""
Nepify Storefront - Centralized Configuration
===============================================
All environment variables and constants are loaded here.
No other module should call os.getenv() directly.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ==========================================
# 🌐 Remote REST API
# ==========================================
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8080").rstrip("/")
API_PREFIX = os.getenv("API_PREFIX", "/api/v1")
API_TIMEOUT = float(os.getenv("API_TIMEOUT") or "15")


# ==========================================
# 🔐 Auth
# ==========================================
# Bearer tokens are issued by the external identity provider.
# The storefront only forwards them.
AUTH_COOKIE = os.getenv("AUTH_COOKIE", "auth_token")


# ==========================================
# 🛒 Checkout
# ==========================================
DEFAULT_COUNTRY = os.getenv("DEFAULT_COUNTRY", "Nepal")


# ==========================================
# 🔧 App
# ==========================================
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()
