"""
Configuration management for the notes backend.
Loads configuration from environment variables and .env file.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
# Look for .env file in the backend directory or project root
BACKEND_DIR = Path(__file__).parent.parent
PROJECT_ROOT = BACKEND_DIR.parent
ENV_FILE = PROJECT_ROOT / ".env"

if ENV_FILE.exists():
    load_dotenv(ENV_FILE)
else:
    backend_env = BACKEND_DIR / ".env"
    if backend_env.exists():
        load_dotenv(backend_env)

# Application
APP_ENV = os.getenv("APP_ENV", "development")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
API_PREFIX = "/api"

# CORS origins can be comma-separated list in env var (only enforced in production)
ALLOWED_ORIGINS_STR = os.getenv("ALLOWED_ORIGINS", "")
ALLOWED_ORIGINS = [origin.strip() for origin in ALLOWED_ORIGINS_STR.split(",") if origin.strip()]

# Admin / client keys
ADMIN_API_KEY = os.getenv("ADMIN_API_KEY", None)
CLIENT_API_KEY = os.getenv("CLIENT_API_KEY", None)

# LLM (OpenAI-compatible chat completions endpoint)
LLM_BASE_URL = os.getenv("LLM_BASE_URL", os.getenv("NVIDIA_BASE_URL", "https://integrate.api.nvidia.com/v1"))
LLM_API_KEY = os.getenv("LLM_API_KEY", os.getenv("NVIDIA_API_KEY", None))
LLM_MODEL = os.getenv("LLM_MODEL", os.getenv("NVIDIA_MODEL", "deepseek-ai/deepseek-r1-distill-qwen-14b"))
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "300"))

# Sampling parameters per endpoint
CHAT_TEMPERATURE = float(os.getenv("CHAT_TEMPERATURE", "0.6"))
CHAT_TOP_P = float(os.getenv("CHAT_TOP_P", "0.7"))
CHAT_MAX_TOKENS = int(os.getenv("CHAT_MAX_TOKENS", "4096"))

NOTE_TEMPERATURE = float(os.getenv("NOTE_TEMPERATURE", "0.7"))
NOTE_TOP_P = float(os.getenv("NOTE_TOP_P", "0.8"))
NOTE_MAX_TOKENS = int(os.getenv("NOTE_MAX_TOKENS", "2048"))

SUMMARY_TEMPERATURE = float(os.getenv("SUMMARY_TEMPERATURE", "0.3"))
SUMMARY_TOP_P = float(os.getenv("SUMMARY_TOP_P", "0.8"))
SUMMARY_MAX_TOKENS = int(os.getenv("SUMMARY_MAX_TOKENS", "2048"))
TEXT_SUMMARY_MAX_TOKENS = int(os.getenv("TEXT_SUMMARY_MAX_TOKENS", "1024"))

# Content extraction
MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", "50000"))  # characters embedded in a prompt
MIN_CONTENT_LENGTH = int(os.getenv("MIN_CONTENT_LENGTH", "50"))
MIN_REGION_LENGTH = int(os.getenv("MIN_REGION_LENGTH", "100"))
CRAWL_TIMEOUT_SECONDS = float(os.getenv("CRAWL_TIMEOUT_SECONDS", "10"))
CRAWL_USER_AGENT = os.getenv(
    "CRAWL_USER_AGENT",
    "Mozilla/5.0 (compatible; NoteBot/1.0)",
)

# Transcripts
TRANSCRIPT_LANGUAGES = [
    lang.strip() for lang in os.getenv("TRANSCRIPT_LANGUAGES", "en").split(",") if lang.strip()
]
TRANSCRIPT_PREVIEW_CHARS = int(os.getenv("TRANSCRIPT_PREVIEW_CHARS", "1000"))
MIN_TRANSCRIPT_LENGTH = 10

# Request gate
MAX_REQUEST_BODY_BYTES = int(os.getenv("MAX_REQUEST_BODY_BYTES", str(1024 * 1024)))

# Firebase (document store + token verification)
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", None)
FIREBASE_CLIENT_EMAIL = os.getenv("FIREBASE_CLIENT_EMAIL", None)
FIREBASE_PRIVATE_KEY = os.getenv("FIREBASE_PRIVATE_KEY", None)

# Document collections
NOTES_COLLECTION = "notes"
WORKSPACES_COLLECTION = "workspaces"
MAX_WORKSPACE_NAME_LENGTH = 100
