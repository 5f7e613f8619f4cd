"""
Prompt builders for the SEO rewrite pipeline.

This module provides:
- Prompts for every pipeline stage (extract, outline, rewrite, metadata, image)
- Prompts for news search and focus keyword suggestions
- JSON schemas for the structured Gemini responses
"""

import logging
from typing import List, Optional

from . import config
from .schemas import Language, RewriteOptions, SeoGoal, SeoOutline
from .utils.placeholders import AVATAR_PLACEHOLDER

logger = logging.getLogger(__name__)


OUTLINE_SCHEMA = {
    "type": "object",
    "properties": {
        "title": {
            "type": "string",
            "description": "An engaging, SEO-friendly article title containing the focus keyword."
        },
        "summary": {
            "type": "string",
            "description": "A short (2-3 sentence) summary of the article's main content."
        },
        "outline": {
            "type": "array",
            "description": "Ordered heading plan for the article.",
            "items": {
                "type": "object",
                "properties": {
                    "level": {"type": "integer", "enum": [2, 3], "description": "Heading level (2 for H2, 3 for H3)"},
                    "text": {"type": "string", "description": "Heading text"}
                },
                "required": ["level", "text"]
            }
        }
    },
    "required": ["title", "summary", "outline"]
}

METADATA_SCHEMA = {
    "type": "object",
    "properties": {
        "keywords": {
            "type": "array",
            "description": "3-5 related internal tags for the article.",
            "items": {"type": "string"}
        },
        "categories": {
            "type": "array",
            "description": "1-2 suitable categories for the article.",
            "items": {"type": "string"}
        },
        "slug": {
            "type": "string",
            "description": "A URL-friendly slug containing the focus keyword, words separated by hyphens."
        },
        "seo_title": {
            "type": "string",
            "description": "Optimized SEO title, 50-70 characters, starting with the focus keyword."
        },
        "seo_description": {
            "type": "string",
            "description": "Compelling meta description, 120-160 characters, containing the focus keyword."
        },
        "seo_keywords": {
            "type": "array",
            "description": "5-7 SEO keywords including the focus keyword and its variants.",
            "items": {"type": "string"}
        }
    },
    "required": ["keywords", "categories", "slug", "seo_title", "seo_description", "seo_keywords"]
}

KEYWORDS_SCHEMA = {
    "type": "array",
    "items": {"type": "string"}
}


def language_name(language: Language) -> str:
    return config.LANGUAGE_NAMES.get(language.value, config.LANGUAGE_NAMES["vi"])


def format_outline(outline: SeoOutline) -> str:
    """Render the heading plan as 'H2: ...' lines."""
    return "\n".join(f"H{d.level}: {d.text}" for d in outline.outline)


class RewritePromptBuilder:
    """Builds the prompts sent to Gemini at each pipeline stage."""

    def build_extract_prompt(self, url: str, page_text: str) -> str:
        return f"""
The following text was scraped from {url}. Keep only the main body of the article.
Remove navigation menus, advertisements, sidebars, footers, related-article lists, and comments.
Return ONLY the plain text of the main article content, with no commentary.

PAGE TEXT:
{page_text[:config.EXTRACT_SOURCE_CHARS]}
"""

    def build_outline_prompt(self, article_text: str, focus_keyword: str,
                             language: Language, seo_goal: SeoGoal,
                             sample_title: Optional[str] = None) -> str:
        """
        Build the content-plan prompt (title, summary, heading outline).

        Args:
            article_text: Extracted source text
            focus_keyword: The focus keyword
            language: Output language
            seo_goal: Search intent the article should satisfy
            sample_title: Optional title for the model to take inspiration from

        Returns:
            Prompt string
        """
        sample_instruction = ""
        if sample_title:
            sample_instruction = f"\nSAMPLE TITLE (use as a style reference, do not copy): \"{sample_title}\"\n"

        return f"""
Based on the source article below and the focus keyword, create an SEO content plan.

FOCUS KEYWORD: "{focus_keyword}"
LANGUAGE: {language_name(language)}
SEARCH INTENT: {config.SEO_GOAL_INTENTS[seo_goal.value]}
{sample_instruction}
SOURCE CONTENT (excerpt): "{article_text[:config.OUTLINE_SOURCE_CHARS]}..."

TASK: Create an engaging title, a short summary and a detailed outline (H2 and H3 headings)
for an SEO-optimized article. Integrate the focus keyword naturally.
Write the title, summary and headings in {language_name(language)}.
"""

    def build_rewrite_prompt(self, article_text: str, outline: SeoOutline,
                             options: RewriteOptions, focus_keyword: str) -> str:
        strictness = ("Very high. Rewrite deeply and keep only the main ideas."
                      if options.is_strict else "Standard.")
        language = language_name(options.language)

        return f"""
You are an expert SEO content writer. Using the plan and the source content below, write a complete article in {language}.

FOCUS KEYWORD: "{focus_keyword}"

ARTICLE TITLE: {outline.title}

OUTLINE TO FOLLOW:
{format_outline(outline)}

CUSTOM REQUIREMENTS:
- Tone: {config.TONE_STYLES[options.tone.value]}
- Desired length: {options.length}
- Rewrite strictness: {strictness}
- Search intent: {config.SEO_GOAL_INTENTS[options.seo_goal.value]}
- SEO optimization level {options.seo_level}/5: {config.SEO_LEVEL_INSTRUCTIONS[options.seo_level]}

SOURCE CONTENT FOR REFERENCE:
"{article_text[:config.REWRITE_SOURCE_CHARS]}..."

TASK:
1. Write the complete article as HTML.
2. Use <h2> and <h3> tags matching the outline.
3. Integrate the focus keyword and related keywords naturally.
4. Keep the content original, high quality, and within the custom requirements.
5. Use <p>, <ul>, <strong> tags for formatting.
6. IMPORTANT: After the introduction (the first 1-2 <p> paragraphs), insert the single placeholder {AVATAR_PLACEHOLDER} exactly once.

Return only the HTML body of the article, without <html> or <body> tags.
"""

    def build_metadata_prompt(self, plain_text: str, title: str, focus_keyword: str) -> str:
        return f"""
Based on the article content and the focus keyword, generate the SEO metadata.

FOCUS KEYWORD: "{focus_keyword}"
ARTICLE TITLE: "{title}"
ARTICLE CONTENT (excerpt): "{plain_text[:config.METADATA_SOURCE_CHARS]}..."

TASK: Fill every metadata field of the schema. Make sure all of them are optimized for the focus keyword.
Write them in the same language as the article.
"""

    def build_image_prompt(self, seo_title: str, focus_keyword: str) -> str:
        return f"""
Write a detailed, vivid prompt in English for an AI image generation model. The prompt must produce
a high-quality featured image that fits the following article.

ARTICLE TITLE: "{seo_title}"
MAIN KEYWORD: "{focus_keyword}"

PROMPT REQUIREMENTS:
- In English.
- Describe the subject, setting, lighting and style (e.g. 'photorealistic', 'vibrant colors', 'dramatic lighting').
- About 15-25 words.

Return only the prompt string.
"""

    def build_news_prompt(self, topic: str) -> str:
        return f'Find the most recent news articles about the topic: "{topic}"'

    def build_keyword_prompt(self, url: str, page_text: str, language: Language) -> str:
        return f"""
Analyze the article from {url} below. Based on its main topic, suggest the
{config.MAX_KEYWORD_SUGGESTIONS} most suitable SEO focus keywords. The keywords must be in
{language_name(language)}, concise, and have strong search intent.
Return ONLY a JSON array of strings.

ARTICLE:
{page_text[:config.OUTLINE_SOURCE_CHARS]}
"""


def describe_options(options: RewriteOptions) -> List[str]:
    """Human-readable summary of rewrite options, for logging."""
    return [
        f"tone={options.tone.value}",
        f"length={options.length}",
        f"strict={options.is_strict}",
        f"language={options.language.value}",
        f"goal={options.seo_goal.value}",
        f"seo_level={options.seo_level}",
        f"auto_images={options.auto_images}",
    ]
