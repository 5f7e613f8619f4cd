"""
Central configuration for the SEO article rewriter.
Values come from the environment (or a local .env file).
"""

import os
from dotenv import load_dotenv

load_dotenv(override=True)

# --- CREDENTIALS ---
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY")
GEMINI_SERVICE_ACCOUNT_KEY_FILE = os.environ.get("GEMINI_SERVICE_ACCOUNT_KEY_FILE")

# --- MODELS ---
TEXT_MODEL = os.environ.get("GEMINI_TEXT_MODEL", "gemini-2.5-flash")
REWRITE_MODEL = os.environ.get("GEMINI_REWRITE_MODEL", "gemini-2.5-pro")
IMAGE_MODEL = os.environ.get("GEMINI_IMAGE_MODEL", "imagen-4.0-generate-001")

# --- PIPELINE ---
MAX_ATTEMPTS = 3
BASE_RETRY_DELAY = 1.0  # seconds; 1, 2
BACKOFF_MULTIPLIER = 2.0

# Source text is truncated before it goes into a prompt
EXTRACT_SOURCE_CHARS = 30000
OUTLINE_SOURCE_CHARS = 2000
REWRITE_SOURCE_CHARS = 4000
METADATA_SOURCE_CHARS = 3000

MAX_NEWS_RESULTS = 5
MAX_KEYWORD_SUGGESTIONS = 4

# --- STORAGE / HTTP ---
HISTORY_FILE = os.environ.get("HISTORY_FILE", "article_history.json")
FETCH_TIMEOUT = float(os.environ.get("FETCH_TIMEOUT", "30"))
USER_AGENT = os.environ.get(
    "FETCH_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
)

# --- DEFAULT REWRITE OPTIONS (CLI) ---
DEFAULT_TONE = os.environ.get("REWRITE_TONE", "professional")
DEFAULT_LENGTH = os.environ.get("REWRITE_LENGTH", "About 800 words")
DEFAULT_STRICT = os.environ.get("REWRITE_STRICT", "false").lower() == "true"
DEFAULT_LANGUAGE = os.environ.get("REWRITE_LANGUAGE", "vi")
DEFAULT_SEO_GOAL = os.environ.get("SEO_GOAL", "informational")
DEFAULT_SEO_LEVEL = int(os.environ.get("SEO_LEVEL", "3"))
DEFAULT_SAMPLE_TITLE = os.environ.get("SAMPLE_TITLE", "")
AUTO_IMAGES = os.environ.get("AUTO_IMAGES", "true").lower() == "true"

# ---------------------------------------------------------------------------
# Recognized option values and their effect on the prompts.
# Keys are the enum values declared in seo_rewriter.schemas.
# ---------------------------------------------------------------------------
TONE_STYLES = {
    "professional": "Professional and authoritative. Precise wording, no slang.",
    "friendly": "Warm and conversational. Address the reader directly as 'you'.",
    "humorous": "Light and witty. Use humour sparingly, never at the expense of accuracy.",
    "persuasive": "Persuasive. Lead with benefits and close sections with a clear takeaway.",
    "inspirational": "Inspiring and optimistic. Use vivid examples and motivating language.",
    "technical": "Technical and detailed. Use exact terminology and concrete specifics.",
    "entertaining": "Entertaining and lively. Use storytelling and a brisk rhythm.",
}

LANGUAGE_NAMES = {
    "vi": "Vietnamese",
    "en": "English",
}

SEO_GOAL_INTENTS = {
    "informational": "Informational intent: explain the topic thoroughly and answer the reader's questions.",
    "commercial": "Commercial intent: compare options and guide the reader toward a purchase decision.",
    "review": "Review intent: evaluate strengths and weaknesses with a clear verdict.",
    "how_to": "How-to intent: give step-by-step instructions the reader can follow.",
}

SEO_LEVEL_INSTRUCTIONS = {
    1: "Light optimization. Mention the focus keyword a few times; prioritize natural reading.",
    2: "Moderate optimization. Use the focus keyword in the introduction and one heading.",
    3: "Standard optimization. Use the focus keyword in the introduction, at least one H2 and the conclusion; aim for about 1% density.",
    4: "Strong optimization. Use the focus keyword and close variants in several headings; aim for 1.5-2% density.",
    5: "Maximum optimization. Place the focus keyword in the first sentence, most H2 headings and the conclusion; aim for 2-2.5% density without stuffing.",
}
