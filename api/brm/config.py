import os
from pathlib import Path

_repo_root = Path(__file__).resolve().parents[2]
_api_root = Path(__file__).resolve().parents[1]

API_PREFIX = os.getenv("API_PREFIX", "/api").rstrip("/")
DATA_DIR = Path(os.getenv("DATA_DIR", str(_repo_root / "data")))
DATABASE_URL = os.getenv("DATABASE_URL", "").strip()
STATIC_DIR = Path(os.getenv("STATIC_DIR", str(_repo_root / "build")))
TEMPLATES_SEED_PATH = Path(os.getenv("TEMPLATES_SEED_PATH", str(_api_root / "templates.json")))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3001"))

# Server trusts the client's section-completeness check unless this is enabled.
REQUIRE_COMPLETE_SUBMISSION = os.getenv("REQUIRE_COMPLETE_SUBMISSION", "false").lower() == "true"

ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "ALLOWED_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:3001,http://127.0.0.1:3001",
    ).split(",")
    if origin.strip()
]

ACCOUNTS = "accounts"
CONTACTS = "contacts"
TEMPLATES = "templates"
ASSESSMENTS = "assessments"
RESPONSES = "responses"
COLLECTIONS = (ACCOUNTS, CONTACTS, TEMPLATES, ASSESSMENTS, RESPONSES)
