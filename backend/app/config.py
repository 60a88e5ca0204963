"""App configuration from environment."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Project root (holds backend/, local/, phonetic/, storage/, indexer/)
ROOT_DIR = Path(__file__).resolve().parent.parent.parent

# Load .env from backend directory
load_dotenv(str(ROOT_DIR / "backend" / ".env"))

LOG_LEVEL = os.environ.get("PHONOSEARCH_LOG_LEVEL", "INFO").upper()

# DB
_DATA_DIR = ROOT_DIR / "backend" / "data"
DATABASE_URL = os.environ.get("PHONOSEARCH_DATABASE_URL", "")
if not DATABASE_URL:
    _DATA_DIR.mkdir(parents=True, exist_ok=True)
    DATABASE_URL = f"sqlite:///{_DATA_DIR / 'search.db'}"

# Table names (sanitized to [A-Za-z0-9_] by the backend)
SEARCH_TABLE = os.environ.get("PHONOSEARCH_SEARCH_TABLE", "search_index")
DIRECT_LINK_TABLE = os.environ.get("PHONOSEARCH_DIRECT_LINK_TABLE", "direct_link")
READ_ROLES_TABLE = os.environ.get("PHONOSEARCH_READ_ROLES_TABLE", "read_roles")

# Stop words: <STOPWORD_DIR>/stopwords.<lang>.ini
STOPWORD_DIR = Path(os.environ.get("PHONOSEARCH_STOPWORD_DIR", str(ROOT_DIR / "local" / "StopWords")))
DEFAULT_LANG = os.environ.get("PHONOSEARCH_DEFAULT_LANG", "de").strip().lower() or "de"

# Query limits
MIN_QUERY_CHARS = int(os.environ.get("PHONOSEARCH_MIN_QUERY_CHARS", 3))
MAX_QUERY_WORDS = int(os.environ.get("PHONOSEARCH_MAX_QUERY_WORDS", 6))
MAX_RESULTS = int(os.environ.get("PHONOSEARCH_MAX_RESULTS", 10))
MAX_SEARCH_QUERY_LENGTH = int(os.environ.get("PHONOSEARCH_MAX_SEARCH_QUERY_LENGTH", 500))
