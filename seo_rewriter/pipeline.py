"""
Rewrite Pipeline Orchestrator.

Turns a source URL and a focus keyword into an SEO-optimized ArticleDraft:
extract -> outline -> rewrite -> metadata -> image (optional) -> assemble.

The six steps form one attempt. A failure in any step restarts the whole
attempt from extraction, with exponential backoff between attempts. There is
no per-step retry and no partial result.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from . import config
from .prompts import describe_options
from .rewrite_agent import RewriteAgent
from .schemas import ArticleDraft, RewriteOptions, RewriteResult, SeoMetadata, SeoOutline
from .utils.placeholders import clean_remaining_placeholders, insert_featured_image

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """Whole-pipeline retry: ``max_attempts`` tries, delay = base_delay * multiplier^(n-1)."""
    max_attempts: int = config.MAX_ATTEMPTS
    base_delay: float = config.BASE_RETRY_DELAY
    multiplier: float = config.BACKOFF_MULTIPLIER

    def delay_for(self, attempt_number: int) -> float:
        """Backoff after the given failed attempt (1-based)."""
        return self.base_delay * self.multiplier ** (attempt_number - 1)

    def wait_strategy(self) -> wait_exponential:
        return wait_exponential(multiplier=self.base_delay, exp_base=self.multiplier, min=0)


def _log_failed_attempt(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    delay = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(f"⚠️ Attempt {retry_state.attempt_number} failed: {error!r}. Retrying in {delay:g}s...")


def assemble_article(outline: SeoOutline, metadata: SeoMetadata, content: str, avatar_url: str = "") -> ArticleDraft:
    """Merge the stage outputs into the final draft.

    With an image, the first placeholder becomes the <img> tag (SEO title as
    alt text); any placeholder left over is removed.
    """
    if avatar_url:
        content = insert_featured_image(content, avatar_url, metadata.seo_title)
    content = clean_remaining_placeholders(content)

    return ArticleDraft(
        title=outline.title,
        summary=outline.summary,
        content=content,
        avatar_url=avatar_url,
        **metadata.model_dump(),
    )


class ArticlePipeline:
    """Sequences the rewrite stages. Holds no per-run state."""

    def __init__(self, agent: RewriteAgent, retry_policy: Optional[RetryPolicy] = None,
                 sleep: Sleep = asyncio.sleep):
        self.agent = agent
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    async def rewrite_article_from_url(self, url: str, focus_keyword: str, options: RewriteOptions) -> RewriteResult:
        """
        Rewrite the article at ``url`` for ``focus_keyword``.

        Args:
            url: Source article URL
            focus_keyword: Primary search term to optimize for
            options: Rewrite options, fixed for the whole run

        Returns:
            RewriteResult with the assembled draft and the extracted source text

        Raises:
            The error of the last attempt once every attempt has failed.
        """
        logger.info(f"🎯 Rewriting {url} for '{focus_keyword}' ({', '.join(describe_options(options))})")

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.retry_policy.max_attempts),
            wait=self.retry_policy.wait_strategy(),
            retry=retry_if_exception_type(Exception),
            before_sleep=_log_failed_attempt,
            sleep=self._sleep,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    result = await self._run_attempt(url, focus_keyword, options, attempt.retry_state.attempt_number)
        except Exception as e:
            logger.error(f"❌ Article generation failed after {self.retry_policy.max_attempts} attempts: {e!r}")
            raise
        return result

    async def _run_attempt(self, url: str, focus_keyword: str, options: RewriteOptions, attempt_number: int) -> RewriteResult:
        logger.info(f"--- Starting article generation attempt {attempt_number}/{self.retry_policy.max_attempts} ---")

        logger.info("[1/6] Extracting content from URL...")
        article_text = await self.agent.extract_text(url)

        logger.info("[2/6] Generating SEO outline...")
        outline = await self.agent.generate_outline(
            article_text, focus_keyword, options.language, options.seo_goal, options.sample_title or None
        )

        logger.info("[3/6] Rewriting content from outline...")
        content = await self.agent.rewrite_content(article_text, outline, options, focus_keyword)

        logger.info("[4/6] Generating SEO metadata...")
        metadata = await self.agent.generate_metadata(content, outline.title, focus_keyword)

        avatar_url = ""
        if options.auto_images:
            logger.info("[5/6] Generating image...")
            image_prompt = await self.agent.generate_image_prompt(metadata.seo_title, focus_keyword)
            avatar_url = await self.agent.generate_image(image_prompt)
        else:
            logger.info("[5/6] Skipping image generation (disabled)")

        logger.info("[6/6] Assembling final article...")
        draft = assemble_article(outline, metadata, content, avatar_url)

        logger.info("✅ Article generation successful")
        return RewriteResult(article_data=draft, original_text=article_text)
