"""
Tests for the JSON-file article history store.
"""

import json
import os
import tempfile
import unittest
from unittest.mock import patch

from seo_rewriter.history import HistoryStore
from seo_rewriter.schemas import ArticleDraft
from seo_rewriter.seo_validator import validate_seo

URL = "https://a.com/post"
KEYWORD = "coffee"


def make_draft(**overrides) -> ArticleDraft:
    data = dict(
        title="Coffee at home",
        slug="coffee-at-home",
        summary="How to brew coffee.",
        content="<h2>Coffee beans</h2><p>coffee word word word</p>",
        seo_title="Coffee at home: the complete guide to brewing better",
        seo_description="Short description about coffee.",
    )
    data.update(overrides)
    return ArticleDraft(**data)


class FakeClock:
    def __init__(self, now=1700000000.0):
        self.now = now

    def __call__(self):
        return self.now


class TestHistoryStore(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "history.json")
        self.clock = FakeClock()
        self.store = HistoryStore(self.path, clock=self.clock)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_empty_history(self):
        self.assertEqual(self.store.get_history(), [])

    def test_save_article_scores_and_persists(self):
        draft = make_draft()
        stored = self.store.save_article(draft, URL, KEYWORD, original_text="source")

        self.assertEqual(stored.id, "art_1700000000000")
        self.assertEqual(stored.created_at, 1700000000000)
        self.assertEqual(stored.seo_score, validate_seo(draft, KEYWORD, URL).score)
        self.assertEqual(stored.original_text, "source")

        with open(self.path, encoding="utf-8") as f:
            self.assertEqual(json.load(f)[0]["id"], stored.id)

    def test_history_is_newest_first(self):
        first = self.store.save_article(make_draft(title="First"), URL, KEYWORD)
        self.clock.now += 10
        second = self.store.save_article(make_draft(title="Second"), URL, KEYWORD)

        self.assertEqual([a.id for a in self.store.get_history()], [second.id, first.id])

    def test_same_millisecond_gets_unique_id(self):
        first = self.store.save_article(make_draft(), URL, KEYWORD, seo_score=10)
        second = self.store.save_article(make_draft(), URL, KEYWORD, seo_score=10)
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(second.created_at, first.created_at + 1)

    def test_backfills_missing_scores_and_skips_bad_entries(self):
        entry = make_draft().model_dump()
        entry.update(id="art_1", created_at=1, source_url=URL, source_focus_keyword=KEYWORD)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump([entry, {"id": "broken"}], f)

        history = self.store.get_history()

        self.assertEqual(len(history), 1)
        self.assertIsNotNone(history[0].seo_score)
        with open(self.path, encoding="utf-8") as f:
            self.assertEqual(json.load(f)[0]["seo_score"], history[0].seo_score)

    def test_unreadable_file_is_backed_up(self):
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("{not json")
        self.assertEqual(self.store.get_history(), [])
        with open(self.path + ".bak", encoding="utf-8") as f:
            self.assertEqual(f.read(), "{not json")

    def test_truncated_file_survives_next_save(self):
        self.store.save_article(make_draft(title="First"), URL, KEYWORD)
        self.clock.now += 1
        self.store.save_article(make_draft(title="Second"), URL, KEYWORD)
        with open(self.path, "rb") as f:
            original = f.read()
        with open(self.path, "wb") as f:
            f.write(original[:-5])

        self.clock.now += 1
        self.store.save_article(make_draft(title="Third"), URL, KEYWORD)

        with open(self.path + ".bak", "rb") as f:
            self.assertEqual(f.read(), original[:-5])
        self.assertEqual([a.title for a in self.store.get_history()], ["Third"])

    def test_non_list_file_is_backed_up(self):
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"id": "art_1"}, f)
        self.assertEqual(self.store.get_history(), [])
        self.assertTrue(os.path.exists(self.path + ".bak"))

    def test_failed_write_keeps_previous_file(self):
        self.store.save_article(make_draft(), URL, KEYWORD)
        with open(self.path, "rb") as f:
            before = f.read()

        self.clock.now += 1
        with patch('seo_rewriter.history.json.dump', side_effect=RuntimeError("disk full")):
            with self.assertRaises(RuntimeError):
                self.store.save_article(make_draft(title="Second"), URL, KEYWORD)

        with open(self.path, "rb") as f:
            self.assertEqual(f.read(), before)
        self.assertEqual(os.listdir(self.tmpdir.name), ["history.json"])

    def test_get_article(self):
        stored = self.store.save_article(make_draft(), URL, KEYWORD)
        self.assertEqual(self.store.get_article(stored.id), stored)
        self.assertIsNone(self.store.get_article("art_missing"))

    def test_update_article_rescores(self):
        stored = self.store.save_article(make_draft(), URL, KEYWORD, seo_score=0)
        edited = stored.model_copy(update={"content": stored.content + '<img src="a.jpg" alt="Cup">'})

        updated = self.store.update_article(edited)

        self.assertEqual(updated.seo_score, validate_seo(edited, KEYWORD, URL).score)
        self.assertIn("<img", self.store.get_article(stored.id).content)

    def test_update_unknown_article(self):
        stored = self.store.save_article(make_draft(), URL, KEYWORD)
        with self.assertRaises(KeyError):
            self.store.update_article(stored.model_copy(update={"id": "art_missing"}))

    def test_delete_article(self):
        stored = self.store.save_article(make_draft(), URL, KEYWORD)
        self.assertTrue(self.store.delete_article(stored.id))
        self.assertFalse(self.store.delete_article(stored.id))
        self.assertEqual(self.store.get_history(), [])

    def test_duplicate_article(self):
        stored = self.store.save_article(make_draft(), URL, KEYWORD, original_text="source")
        self.clock.now += 1

        copy = self.store.duplicate_article(stored.id)

        self.assertEqual(copy.title, "Coffee at home (Copy)")
        self.assertNotEqual(copy.id, stored.id)
        self.assertEqual(copy.source_url, URL)
        self.assertEqual(copy.original_text, "source")
        self.assertEqual(len(self.store.get_history()), 2)
        self.assertIsNone(self.store.duplicate_article("art_missing"))


if __name__ == '__main__':
    unittest.main()
