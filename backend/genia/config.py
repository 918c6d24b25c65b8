"""Geni AI configuration.

Environment-driven settings (with .env support) and the fixed business
constants of the free/pro plans.
"""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parent.parent
load_dotenv(ROOT_DIR / '.env')


# ============================================================================
# Environment
# ============================================================================

MONGO_URL = os.environ.get("MONGO_URL", "mongodb://localhost:27017")
DB_NAME = os.environ.get("DB_NAME", "genia_studio")

LLM_API_KEY = os.environ.get("LLM_API_KEY")
TEXT_MODEL = os.environ.get("GENIA_TEXT_MODEL", "gemini-2.0-flash")
IMAGE_MODEL = os.environ.get("GENIA_IMAGE_MODEL", "gemini-2.0-flash-preview-image-generation")

# Language the content provider writes in
LANGUAGE = os.environ.get("GENIA_LANGUAGE", "français")

# Exported files are also written here when set
OUTPUT_DIR: Optional[str] = os.environ.get("GENIA_OUTPUT_DIR") or None

# Out-of-band activation channel
WHATSAPP_NUMBER = os.environ.get("GENIA_WHATSAPP_NUMBER", "22166566140")

CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*").split(",")


# ============================================================================
# Plans and entitlements
# ============================================================================

# Parameters forced on non-pro plans
FREE_SECTION_COUNT = 5
DEFAULT_DEPTH = "standard"
DEFAULT_DECK_STYLE = "professionnel"

# Pro section count range
MIN_SECTION_COUNT = 3
MAX_SECTION_COUNT = 12

# Quota
INITIAL_QUOTA = 1
ACTIVATION_CREDITS = 3
LEGACY_PRO_QUOTA = 3  # default for persisted pro sessions that predate quotas

# Ledger history kept on the session
LEDGER_HISTORY_LIMIT = 20

# Key under which the device session is persisted
SESSION_KEY = "genia_session"
