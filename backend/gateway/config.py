"""
Gateway Configuration

Process-level settings read from the environment at import time.
"""

import os
from pathlib import Path

# ============================================
# Paths
# ============================================

BACKEND_DIR = Path(__file__).resolve().parent.parent

ROUTES_DIR = Path(os.getenv("ROUTES_DIR", str(BACKEND_DIR / "routes")))
PUBLIC_DIR = Path(os.getenv("PUBLIC_DIR", str(BACKEND_DIR / "public")))

# ============================================
# Server
# ============================================

SERVER_NAME = "NekoLabs API Server"
SERVER_VERSION = "2.0.0"

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ============================================
# Upstream fetches
# ============================================

INDEX_FETCH_TIMEOUT = float(os.getenv("INDEX_FETCH_TIMEOUT", "10"))
BINARY_FETCH_TIMEOUT = float(os.getenv("BINARY_FETCH_TIMEOUT", "15"))

USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"

# ============================================
# CORS
# ============================================

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE",
    "Access-Control-Allow-Headers": "Content-Type",
}
