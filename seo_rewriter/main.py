"""
SEO Article Rewriter - command line interface.
Rewrites a source article around a focus keyword with Gemini, scores it against
on-page SEO checks and keeps the result in a local history file.
"""

import asyncio
import logging
import sys
from typing import Dict

from . import config
from .clients.gemini import GeminiClient
from .clients.web import PageFetcher
from .history import HistoryStore
from .pipeline import ArticlePipeline
from .rewrite_agent import RewriteAgent
from .schemas import RewriteOptions, StoredArticle
from .seo_validator import format_seo_report, validate_seo

# Set up logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

REWRITE_FAILED_MESSAGE = "Rewrite failed. The API may be busy; please try again."


# --- INITIALIZATION ---
def initialize_system() -> Dict:
    """Initialize all clients and agents."""
    if not (config.GEMINI_API_KEY or config.GEMINI_SERVICE_ACCOUNT_KEY_FILE):
        logger.error("Missing GEMINI_API_KEY or GEMINI_SERVICE_ACCOUNT_KEY_FILE.")
        return {}

    # 1. Clients
    gemini_client = GeminiClient(config.GEMINI_API_KEY, config.GEMINI_SERVICE_ACCOUNT_KEY_FILE)
    if not gemini_client.client:
        logger.error("Gemini client could not be initialized.")
        return {}
    fetcher = PageFetcher(timeout=config.FETCH_TIMEOUT, user_agent=config.USER_AGENT)

    # 2. Agents
    agent = RewriteAgent(gemini_client, fetcher)
    pipeline = ArticlePipeline(agent)

    return {
        "gemini": gemini_client,
        "fetcher": fetcher,
        "agent": agent,
        "pipeline": pipeline,
        "history": HistoryStore(config.HISTORY_FILE),
    }


def default_options() -> RewriteOptions:
    return RewriteOptions(
        tone=config.DEFAULT_TONE,
        length=config.DEFAULT_LENGTH,
        is_strict=config.DEFAULT_STRICT,
        language=config.DEFAULT_LANGUAGE,
        seo_goal=config.DEFAULT_SEO_GOAL,
        seo_level=config.DEFAULT_SEO_LEVEL,
        sample_title=config.DEFAULT_SAMPLE_TITLE or None,
        auto_images=config.AUTO_IMAGES,
    )


def print_article(article: StoredArticle) -> None:
    print(f"[{article.id}] {article.title}")
    print(f"  Source:   {article.source_url}")
    print(f"  Keyword:  {article.source_focus_keyword}")
    print(f"  Slug:     {article.slug}")
    print(f"  SEO:      {article.seo_title} | score {article.seo_score}")


# --- PROCESSES ---

async def run_rewrite(components: Dict, url: str, focus_keyword: str) -> StoredArticle:
    """Rewrite a source article, print its SEO report and store it."""
    pipeline = components["pipeline"]
    history = components["history"]

    result = await pipeline.rewrite_article_from_url(url, focus_keyword, default_options())
    report = validate_seo(result.article_data, focus_keyword, url)
    print(format_seo_report(report, focus_keyword))

    stored = history.save_article(result.article_data, url, focus_keyword,
                                  original_text=result.original_text, seo_score=report.score)
    print(f"\n✅ Saved as {stored.id}")
    return stored


async def run_suggest(components: Dict, url: str):
    agent = components["agent"]
    keywords = await agent.suggest_keywords(url, default_options().language)
    if not keywords:
        print("No keyword suggestions available.")
    for keyword in keywords:
        print(f"- {keyword}")
    return keywords


async def run_news(components: Dict, topic: str):
    agent = components["agent"]
    results = await agent.search_news(topic)
    if not results:
        print(f"No news found for '{topic}'.")
    for i, item in enumerate(results, 1):
        print(f"{i}. {item.title}\n   {item.url}")
    return results


def run_history(components: Dict) -> None:
    articles = components["history"].get_history()
    if not articles:
        print("History is empty.")
    for article in articles:
        print_article(article)


def run_show(components: Dict, article_id: str) -> bool:
    article = components["history"].get_article(article_id)
    if article is None:
        print(f"No article with id {article_id}")
        return False
    print_article(article)
    report = validate_seo(article, article.source_focus_keyword, article.source_url)
    print(format_seo_report(report, article.source_focus_keyword))
    print()
    print(article.content)
    return True


def show_help():
    """Display usage information."""
    help_text = """
SEO Article Rewriter - Usage Guide

Commands:
  python main.py rewrite <url> <focus keyword>   Rewrite an article and store it in history
  python main.py suggest <url>                   Suggest focus keywords for a source article
  python main.py news <topic>                    Search recent news about a topic
  python main.py history                         List stored articles (newest first)
  python main.py show <id>                       Show a stored article with its SEO report
  python main.py duplicate <id>                  Copy a stored article
  python main.py delete <id>                     Delete a stored article
  python main.py help                            Show this help message

Environment Variables (one required):
  GEMINI_API_KEY                    Google Gemini API key
  GEMINI_SERVICE_ACCOUNT_KEY_FILE   Vertex AI service account JSON (preferred when set)

Environment Variables (Optional):
  GEMINI_TEXT_MODEL / GEMINI_REWRITE_MODEL / GEMINI_IMAGE_MODEL   Model overrides
  HISTORY_FILE        History file path (default: article_history.json)
  REWRITE_TONE        professional, friendly, humorous, persuasive, inspirational, technical, entertaining
  REWRITE_LENGTH      Desired length (default: "About 800 words")
  REWRITE_STRICT      Deep rewrite (default: false)
  REWRITE_LANGUAGE    vi or en (default: vi)
  SEO_GOAL            informational, commercial, review, how_to
  SEO_LEVEL           1-5 (default: 3)
  SAMPLE_TITLE        Title to take style inspiration from
  AUTO_IMAGES         Generate a featured image (default: true)

Examples:
  python main.py rewrite https://example.com/post "cách làm phở"
  python main.py news "AI in 2026"
"""
    print(help_text)


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    command = argv[0].lower() if argv else "help"

    if command in ["help", "-h", "--help"]:
        show_help()
        return 0

    system = initialize_system()
    if not system:
        logger.error("System initialization failed. Please check your environment variables.")
        return 1

    if command == "rewrite":
        if len(argv) < 3:
            print("Usage: python main.py rewrite <url> <focus keyword>")
            return 1
        try:
            asyncio.run(run_rewrite(system, argv[1], " ".join(argv[2:])))
        except Exception as e:
            logger.error(f"❌ Rewrite error: {e!r}")
            print(REWRITE_FAILED_MESSAGE)
            return 1
    elif command == "suggest" and len(argv) > 1:
        asyncio.run(run_suggest(system, argv[1]))
    elif command == "news" and len(argv) > 1:
        try:
            asyncio.run(run_news(system, " ".join(argv[1:])))
        except Exception as e:
            logger.error(f"❌ News search error: {e!r}")
            print(str(e))
            return 1
    elif command == "history":
        run_history(system)
    elif command == "show" and len(argv) > 1:
        return 0 if run_show(system, argv[1]) else 1
    elif command == "duplicate" and len(argv) > 1:
        copy = system["history"].duplicate_article(argv[1])
        if copy is None:
            print(f"No article with id {argv[1]}")
            return 1
        print_article(copy)
    elif command == "delete" and len(argv) > 1:
        if not system["history"].delete_article(argv[1]):
            print(f"No article with id {argv[1]}")
            return 1
        print(f"Deleted {argv[1]}")
    else:
        show_help()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
