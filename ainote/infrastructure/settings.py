"""
Application-wide settings and environment configuration
"""

from __future__ import annotations

import os

# Environment
ENV = os.getenv("AINOTE_ENV", "development")

# API Configuration
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
LOG_LEVEL = os.getenv("AINOTE_LOG_LEVEL", "INFO")

# Auth backend (GoTrue-compatible REST API, e.g. Supabase Auth)
AUTH_URL = os.getenv("AINOTE_AUTH_URL", "")
AUTH_ANON_KEY = os.getenv("AINOTE_AUTH_ANON_KEY", "")
AUTH_REDIRECT_URL = os.getenv("AINOTE_AUTH_REDIRECT_URL", "http://localhost:3000/auth/callback")

# Google Cloud / Gemini
GOOGLE_CLOUD_PROJECT = os.getenv("GOOGLE_CLOUD_PROJECT")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", os.getenv("GOOGLE_API_KEY"))
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash-001")
GEMINI_LOCATION = os.getenv("GEMINI_LOCATION", "us-central1")
GEMINI_MAX_TOKENS = int(os.getenv("GEMINI_MAX_TOKENS", "8192"))
GEMINI_TEMPERATURE = float(os.getenv("GEMINI_TEMPERATURE", "0.7"))
GEMINI_TOP_P = float(os.getenv("GEMINI_TOP_P", "0.9"))
GEMINI_TOP_K = int(os.getenv("GEMINI_TOP_K", "40"))

# Frontend origins allowed by CORS (comma-separated)
CORS_ORIGINS = [
    origin.strip() for origin in os.getenv("AINOTE_CORS_ORIGINS", "").split(",") if origin.strip()
]
