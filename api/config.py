"""Environment-driven settings for the Notekeeper API."""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# MongoDB
MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
MONGODB_DB_NAME = os.getenv("MONGODB_DB_NAME", "notekeeper")
INIT_DB = os.getenv("INIT_DB", "true").lower() == "true"

# HTTP
API_PREFIX = os.getenv("API_PREFIX", "/api")
CORS_ORIGINS = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
]
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
RELOAD = os.getenv("RELOAD", "false").lower() == "true"
UVICORN_LOG_LEVEL = os.getenv("UVICORN_LOG_LEVEL", "info").lower()
