"""Configuration: env, backing store endpoint, retrieval limits."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of discregistry package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so SUPABASE_URL etc. are set
load_dotenv(BASE_DIR / ".env")

# API
API_HOST = os.getenv("DISCREGISTRY_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("DISCREGISTRY_API_PORT", "8000"))

# Backing store (PostgREST endpoint of the managed backend)
SUPABASE_URL = os.getenv("SUPABASE_URL", "https://demo.supabase.co")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "demo-key")
HTTP_TIMEOUT_SEC = float(os.getenv("DISCREGISTRY_HTTP_TIMEOUT", "30"))

# Read surfaces: restricted view first, raw table (filtered to active) second
PUBLIC_VIEW = os.getenv("DISCREGISTRY_PUBLIC_VIEW", "public_found_discs")
DISC_TABLE = os.getenv("DISCREGISTRY_TABLE", "found_discs")
# Columns the view must return; a row without them means the view is stale
PUBLIC_VIEW_REQUIRED_COLUMNS = ("image_urls",)

# The store silently truncates every response at this many rows
CHUNK_SIZE = int(os.getenv("DISCREGISTRY_CHUNK_SIZE", "1000"))
DEFAULT_PAGE_SIZE = int(os.getenv("DISCREGISTRY_DEFAULT_PAGE_SIZE", "50"))
# Multi-term paged search reads at least this many rows (and 3x the page end)
SEARCH_WINDOW_MIN = int(os.getenv("DISCREGISTRY_SEARCH_WINDOW_MIN", "1000"))
SEARCH_WINDOW_FACTOR = 3

LOG_LEVEL = os.getenv("DISCREGISTRY_LOG_LEVEL", "INFO")
