"""
Rewrite Agent Module - the AI collaborators of the rewrite pipeline.
Each method is a single page fetch and/or Gemini call with a typed result.
"""

import base64
import logging
from typing import Any, List, Optional

from pydantic import ValidationError
from slugify import slugify

from . import config
from .clients.gemini import GeminiClient
from .clients.web import PageFetcher
from .errors import GenerationError, RewriterError
from .html_text import strip_tags
from .prompts import KEYWORDS_SCHEMA, METADATA_SCHEMA, OUTLINE_SCHEMA, RewritePromptBuilder
from .schemas import Language, NewsSearchResult, RewriteOptions, SeoGoal, SeoMetadata, SeoOutline
from .utils import normalize_dict_keys
from .utils.placeholders import count_placeholders, strip_code_fences

logger = logging.getLogger(__name__)


def _grounding_chunks(response: Any) -> list:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    if not metadata:
        return []
    return getattr(metadata, "grounding_chunks", None) or []


class RewriteAgent:
    def __init__(self, gemini_client: GeminiClient, page_fetcher: PageFetcher,
                 prompt_builder: Optional[RewritePromptBuilder] = None,
                 text_model: str = config.TEXT_MODEL,
                 rewrite_model: str = config.REWRITE_MODEL,
                 image_model: str = config.IMAGE_MODEL):
        self.gemini_client = gemini_client
        self.page_fetcher = page_fetcher
        self.prompts = prompt_builder or RewritePromptBuilder()
        self.text_model = text_model
        self.rewrite_model = rewrite_model
        self.image_model = image_model

    @staticmethod
    def _parse_model(model_cls, data: Any):
        """Validate a decoded JSON response against a schema model."""
        data = normalize_dict_keys(data)
        if isinstance(data, dict) and isinstance(data.get("outline"), list):
            data["outline"] = [normalize_dict_keys(item) for item in data["outline"]]
        try:
            return model_cls.model_validate(data)
        except ValidationError as e:
            raise GenerationError(f"Unexpected {model_cls.__name__} response: {e}") from e

    # --- Pipeline stages ---

    async def extract_text(self, url: str) -> str:
        """Return the plain-text main body of the article at ``url``."""
        page_text = await self.page_fetcher.fetch_page_text(url)
        prompt = self.prompts.build_extract_prompt(url, page_text)
        return await self.gemini_client.generate_text(self.text_model, prompt, temperature=0.2)

    async def generate_outline(self, article_text: str, focus_keyword: str,
                               language: Language, seo_goal: SeoGoal,
                               sample_title: Optional[str] = None) -> SeoOutline:
        prompt = self.prompts.build_outline_prompt(article_text, focus_keyword, language, seo_goal, sample_title)
        data = await self.gemini_client.generate_structured_output(
            self.text_model, prompt, OUTLINE_SCHEMA, temperature=0.6
        )
        outline = self._parse_model(SeoOutline, data)
        logger.info(f"📝 Outline: '{outline.title}' ({len(outline.outline)} headings)")
        return outline

    async def rewrite_content(self, article_text: str, outline: SeoOutline,
                              options: RewriteOptions, focus_keyword: str) -> str:
        prompt = self.prompts.build_rewrite_prompt(article_text, outline, options, focus_keyword)
        response = await self.gemini_client.generate_text(self.rewrite_model, prompt, temperature=0.7)
        content = strip_code_fences(response)

        placeholders = count_placeholders(content)
        if placeholders != 1:
            logger.warning(f"⚠️ Rewritten content has {placeholders} image placeholders (expected 1)")
        return content

    async def generate_metadata(self, html_content: str, title: str, focus_keyword: str) -> SeoMetadata:
        prompt = self.prompts.build_metadata_prompt(strip_tags(html_content), title, focus_keyword)
        data = await self.gemini_client.generate_structured_output(
            self.text_model, prompt, METADATA_SCHEMA, temperature=0.5
        )
        metadata = self._parse_model(SeoMetadata, data)
        slug = slugify(metadata.slug) or slugify(title)
        logger.info(f"🔑 SEO title: '{metadata.seo_title}' | slug: {slug}")
        return metadata.model_copy(update={"slug": slug})

    async def generate_image_prompt(self, seo_title: str, focus_keyword: str) -> str:
        prompt = self.prompts.build_image_prompt(seo_title, focus_keyword)
        image_prompt = await self.gemini_client.generate_text(self.text_model, prompt)
        image_prompt = image_prompt.strip().strip('"')
        logger.info(f"🎨 Image prompt: {image_prompt}")
        return image_prompt

    async def generate_image(self, image_prompt: str) -> str:
        """Generate the featured image and return it as a JPEG data URL."""
        image_bytes = await self.gemini_client.generate_image(self.image_model, image_prompt)
        encoded = base64.b64encode(image_bytes).decode('utf-8')
        return f"data:image/jpeg;base64,{encoded}"

    # --- Standalone helpers ---

    async def search_news(self, topic: str) -> List[NewsSearchResult]:
        """Recent news for a topic via Google Search grounding, most relevant first."""
        try:
            response = await self.gemini_client.generate_grounded(self.text_model, self.prompts.build_news_prompt(topic))
        except GenerationError as e:
            logger.error(f"Error searching for news: {e}")
            raise GenerationError("Failed to search for news. The API might be busy or an error occurred.") from e

        results = []
        for chunk in _grounding_chunks(response):
            web = getattr(chunk, "web", None)
            title = getattr(web, "title", None) or ""
            url = getattr(web, "uri", None) or ""
            if title and url:
                results.append(NewsSearchResult(title=title, url=url))

        logger.info(f"📰 Found {len(results)} news results for '{topic}'")
        return results[:config.MAX_NEWS_RESULTS]

    async def suggest_keywords(self, url: str, language: Language = Language.VIETNAMESE) -> List[str]:
        """Suggest focus keywords for a source URL. Best effort: [] on any failure."""
        try:
            page_text = await self.page_fetcher.fetch_page_text(url)
            prompt = self.prompts.build_keyword_prompt(url, page_text, language)
            data = await self.gemini_client.generate_structured_output(
                self.text_model, prompt, KEYWORDS_SCHEMA, temperature=0.5
            )
        except RewriterError as e:
            logger.error(f"Error suggesting keywords: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Keyword suggestions were not a list: {str(data)[:100]}")
            return []

        keywords = [str(k).strip() for k in data if str(k).strip()]
        return keywords[:config.MAX_KEYWORD_SUGGESTIONS]
