"""Environment-driven settings for the website scanner service.

Values are read once at import time. ``app.main`` calls ``load_dotenv()``
before anything imports this module, so a local ``.env`` file is honoured.
"""

import os

# OpenAI-compatible text generation endpoint used for branding analysis
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")
OPENAI_TIMEOUT = float(os.getenv("OPENAI_TIMEOUT", "30"))
# Upper bound on the whole analysis call, however slowly the reply streams in
OPENAI_DEADLINE = float(os.getenv("OPENAI_DEADLINE", "45"))

# Outbound page fetch (seconds)
SCANNER_REQUEST_TIMEOUT = float(os.getenv("SCANNER_REQUEST_TIMEOUT", "10"))
# Upper bound on the whole fetch including redirects and body download
SCANNER_FETCH_DEADLINE = float(os.getenv("SCANNER_FETCH_DEADLINE", "15"))
# Bytes of page body read before the rest is discarded
SCANNER_MAX_BODY_BYTES = int(os.getenv("SCANNER_MAX_BODY_BYTES", "2000000"))
SCANNER_USER_AGENT = os.getenv(
    "SCANNER_USER_AGENT",
    "Mozilla/5.0 (compatible; CalendAI/1.0; +https://calendai.app)",
)

# Maximum number of characters of visible page text sent to the model
SCANNER_BODY_TEXT_LIMIT = int(os.getenv("SCANNER_BODY_TEXT_LIMIT", "5000"))

# Comma-separated list of allowed CORS origins
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")
