"""
Article history store.

Rewritten articles are kept in a single JSON file, newest first. Each entry is
a StoredArticle: the draft plus its id, creation time, source URL, focus
keyword, the extracted source text and the SEO score at save time.
"""

import json
import logging
import os
import tempfile
import time
from typing import Callable, List, Optional

from pydantic import ValidationError

from . import config
from .schemas import ArticleDraft, StoredArticle
from .seo_validator import validate_seo

logger = logging.getLogger(__name__)


def score_article(article: ArticleDraft, focus_keyword: str, source_url: str) -> int:
    return validate_seo(article, focus_keyword, source_url).score


class HistoryStore:
    def __init__(self, history_path: str = config.HISTORY_FILE, clock: Callable[[], float] = time.time):
        self.history_path = history_path
        self.clock = clock

    # --- File I/O ---

    def _backup_damaged_file(self, reason: str) -> None:
        backup_path = self.history_path + ".bak"
        os.replace(self.history_path, backup_path)
        logger.warning(f"⚠️ History file {self.history_path} is unreadable ({reason}); moved it to {backup_path}")

    def _read_raw(self) -> list:
        """Raw history entries. A file that is not a JSON list is moved to ``<path>.bak``."""
        if not os.path.exists(self.history_path):
            return []
        with open(self.history_path, "rb") as f:
            raw = f.read()
        try:
            data = json.loads(raw)
        except ValueError as e:
            self._backup_damaged_file(str(e))
            return []
        if not isinstance(data, list):
            self._backup_damaged_file("not a list")
            return []
        return data

    def _write(self, articles: List[StoredArticle]) -> None:
        """Write the whole history to a temp file, then swap it in."""
        directory = os.path.dirname(os.path.abspath(self.history_path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".history-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump([a.model_dump() for a in articles], f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.history_path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def _load(self) -> List[StoredArticle]:
        articles = []
        for entry in self._read_raw():
            try:
                articles.append(StoredArticle.model_validate(entry))
            except ValidationError as e:
                entry_id = entry.get("id") if isinstance(entry, dict) else None
                logger.warning(f"⚠️ Skipping unreadable history entry {entry_id}: {e.error_count()} errors")
        return articles

    # --- Public API ---

    def get_history(self) -> List[StoredArticle]:
        """All stored articles, newest first. Missing scores are computed and saved."""
        articles = self._load()

        backfilled = False
        for i, article in enumerate(articles):
            if article.seo_score is None:
                score = score_article(article, article.source_focus_keyword, article.source_url)
                articles[i] = article.model_copy(update={"seo_score": score})
                backfilled = True

        articles.sort(key=lambda a: a.created_at, reverse=True)
        if backfilled:
            logger.info("📊 Backfilled missing SEO scores in history")
            self._write(articles)
        return articles

    def get_article(self, article_id: str) -> Optional[StoredArticle]:
        for article in self.get_history():
            if article.id == article_id:
                return article
        return None

    def save_article(self, draft: ArticleDraft, source_url: str, focus_keyword: str,
                     original_text: Optional[str] = None, seo_score: Optional[int] = None) -> StoredArticle:
        """
        Store a new article at the head of the history.

        Args:
            draft: The rewritten article
            source_url: URL the article was rewritten from
            focus_keyword: Focus keyword used for the rewrite
            original_text: Extracted source text, if available
            seo_score: Score to store; computed when omitted

        Returns:
            The stored entry
        """
        history = self.get_history()
        created_at = int(self.clock() * 1000)
        existing_ids = {a.id for a in history}
        while f"art_{created_at}" in existing_ids:
            created_at += 1

        if seo_score is None:
            seo_score = score_article(draft, focus_keyword, source_url)

        stored = StoredArticle(
            **draft.model_dump(),
            id=f"art_{created_at}",
            created_at=created_at,
            source_url=source_url,
            source_focus_keyword=focus_keyword,
            original_text=original_text,
            seo_score=seo_score,
        )
        self._write([stored] + history)
        logger.info(f"💾 Saved article {stored.id} (SEO score {seo_score})")
        return stored

    def update_article(self, article: StoredArticle) -> StoredArticle:
        """Replace the entry with the same id. The score is recomputed."""
        history = self.get_history()
        score = score_article(article, article.source_focus_keyword, article.source_url)
        updated = article.model_copy(update={"seo_score": score})

        for i, existing in enumerate(history):
            if existing.id == article.id:
                history[i] = updated
                break
        else:
            raise KeyError(f"No article with id {article.id}")

        self._write(history)
        logger.info(f"✏️ Updated article {article.id} (SEO score {score})")
        return updated

    def delete_article(self, article_id: str) -> bool:
        history = self.get_history()
        remaining = [a for a in history if a.id != article_id]
        if len(remaining) == len(history):
            logger.warning(f"No article with id {article_id} to delete")
            return False
        self._write(remaining)
        logger.info(f"🗑️ Deleted article {article_id}")
        return True

    def duplicate_article(self, article_id: str) -> Optional[StoredArticle]:
        """Store a copy of an article under a new id, titled '<title> (Copy)'."""
        original = self.get_article(article_id)
        if original is None:
            logger.warning(f"No article with id {article_id} to duplicate")
            return None

        draft = ArticleDraft.model_validate(original.model_dump(include=set(ArticleDraft.model_fields)))
        draft = draft.model_copy(update={"title": f"{original.title} (Copy)"})
        return self.save_article(
            draft,
            original.source_url,
            original.source_focus_keyword,
            original_text=original.original_text,
        )
