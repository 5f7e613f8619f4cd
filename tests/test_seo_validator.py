"""
Tests for the SEO validation engine.

Tests cover:
- Title and meta description length/keyword checks
- Keyword density, including empty content
- Image alt text, headings and link classification
- Overall weighted score
"""

import copy
import unittest

from seo_rewriter.errors import ValidationInputError
from seo_rewriter.html_text import parse_html
from seo_rewriter.schemas import ArticleDraft
from seo_rewriter.seo_validator import (
    CHECK_WEIGHTS,
    check_headings,
    check_image,
    check_keyword_density,
    check_links,
    check_meta_description,
    check_title,
    compute_density,
    compute_score,
    count_occurrences,
    format_seo_report,
    validate_seo,
)

KEYWORD = "coffee"
SOURCE_URL = "https://a.com/post"

GOOD_TITLE = "Coffee brewing guide: how to make a great cup at home"  # 53 chars
GOOD_META = ("Learn how to brew coffee at home with simple tools. This guide covers beans, grind size, "
             "water temperature and timing for a better cup.")


def make_body(keyword_hits: int, total_words: int) -> str:
    filler = ["word"] * (total_words - keyword_hits)
    return " ".join([KEYWORD] * keyword_hits + filler)


def make_article(**overrides) -> ArticleDraft:
    content = (
        "<p>" + make_body(2, 100) + "</p>"
        '<img src="cover.jpg" alt="A cup of coffee" />'
        "<h2>Choosing beans</h2><h3>Roast levels</h3><h2>Brewing</h2>"
        '<a href="/about">About</a> <a href="https://a.com/x">More</a> <a href="https://b.com">Other</a>'
    )
    data = dict(
        title="Coffee at home",
        slug="coffee-at-home",
        summary="How to brew coffee.",
        content=content,
        seo_title=GOOD_TITLE,
        seo_description=GOOD_META,
    )
    data.update(overrides)
    return ArticleDraft(**data)


class TestHelpers(unittest.TestCase):

    def test_count_occurrences_is_case_insensitive_substring(self):
        self.assertEqual(count_occurrences("Coffee, COFFEE and coffeehouse", "coffee"), 3)

    def test_count_occurrences_empty_keyword(self):
        self.assertEqual(count_occurrences("anything", ""), 0)

    def test_compute_density_zero_words(self):
        self.assertEqual(compute_density(3, 0), 0.0)

    def test_compute_density_percent(self):
        self.assertAlmostEqual(compute_density(2, 100), 2.0)

    def test_weights_sum_to_100(self):
        self.assertEqual(sum(CHECK_WEIGHTS.values()), 100)

    def test_compute_score_bounds(self):
        self.assertEqual(compute_score({name: False for name in CHECK_WEIGHTS}), 0)
        self.assertEqual(compute_score({name: True for name in CHECK_WEIGHTS}), 100)

    def test_compute_score_partial(self):
        passed = {name: False for name in CHECK_WEIGHTS}
        passed["title"] = True
        passed["image"] = True
        self.assertEqual(compute_score(passed), 30)

    def test_compute_score_rounds_half_up(self):
        self.assertEqual(compute_score({"a": True, "b": False}, {"a": 1, "b": 1}), 50)
        self.assertEqual(compute_score({"a": True, "b": False, "c": False}, {"a": 1, "b": 1, "c": 1}), 33)
        self.assertEqual(compute_score({"a": True, "b": True, "c": False}, {"a": 1, "b": 1, "c": 1}), 67)
        self.assertEqual(compute_score({"a": True, "b": False}, {"a": 1, "b": 7}), 13)


class TestTitleCheck(unittest.TestCase):

    def _title(self, length: int) -> str:
        base = "coffee "
        return (base * 20)[:length]

    def test_length_boundaries(self):
        self.assertFalse(check_title(self._title(49), KEYWORD).check.passed)
        self.assertTrue(check_title(self._title(50), KEYWORD).check.passed)
        self.assertTrue(check_title(self._title(70), KEYWORD).check.passed)
        self.assertFalse(check_title(self._title(71), KEYWORD).check.passed)

    def test_reports_length_and_range(self):
        result = check_title(self._title(55), KEYWORD)
        self.assertEqual(result.length, 55)
        self.assertEqual((result.ideal_min, result.ideal_max), (50, 70))

    def test_missing_keyword_fails(self):
        result = check_title("x" * 60, KEYWORD)
        self.assertFalse(result.check.passed)
        self.assertIn("NOT", result.check.message)

    def test_keyword_match_ignores_case(self):
        self.assertTrue(check_title(GOOD_TITLE.upper(), KEYWORD).check.passed)


class TestMetaDescriptionCheck(unittest.TestCase):

    def test_length_boundaries(self):
        def meta(n):
            return ("coffee " * 40)[:n]
        self.assertFalse(check_meta_description(meta(119), KEYWORD).check.passed)
        self.assertTrue(check_meta_description(meta(120), KEYWORD).check.passed)
        self.assertTrue(check_meta_description(meta(160), KEYWORD).check.passed)
        self.assertFalse(check_meta_description(meta(161), KEYWORD).check.passed)

    def test_good_meta(self):
        result = check_meta_description(GOOD_META, KEYWORD)
        self.assertTrue(result.check.passed)
        self.assertEqual(result.length, len(GOOD_META))


class TestDensityCheck(unittest.TestCase):

    def test_density_in_range(self):
        result = check_keyword_density(parse_html("<p>" + make_body(2, 100) + "</p>"), KEYWORD)
        self.assertTrue(result.check.passed)
        self.assertEqual(result.count, 2)
        self.assertEqual(result.word_count, 100)
        self.assertAlmostEqual(result.density, 2.0)

    def test_density_too_low(self):
        result = check_keyword_density(parse_html(make_body(0, 100)), KEYWORD)
        self.assertFalse(result.check.passed)
        self.assertIn("low", result.check.message)

    def test_density_too_high(self):
        result = check_keyword_density(parse_html(make_body(10, 100)), KEYWORD)
        self.assertFalse(result.check.passed)
        self.assertIn("stuffing", result.check.message)

    def test_empty_content(self):
        result = check_keyword_density(parse_html(""), KEYWORD)
        self.assertEqual(result.word_count, 0)
        self.assertEqual(result.density, 0.0)
        self.assertFalse(result.check.passed)


class TestStructureChecks(unittest.TestCase):

    def test_image_with_alt(self):
        self.assertTrue(check_image(parse_html('<img src="a.jpg" alt="Cover">')).check.passed)

    def test_image_without_alt(self):
        self.assertFalse(check_image(parse_html('<img src="a.jpg">')).check.passed)
        self.assertFalse(check_image(parse_html('<img src="a.jpg" alt="  ">')).check.passed)

    def test_only_first_image_counts(self):
        doc = parse_html('<img src="a.jpg"><img src="b.jpg" alt="Second">')
        self.assertFalse(check_image(doc).check.passed)

    def test_headings_structure_in_document_order(self):
        result = check_headings(parse_html("<h3>Intro</h3><h2>First</h2><h3>Detail</h3><h4>Skip</h4>"))
        self.assertTrue(result.check.passed)
        self.assertEqual([(h.level, h.text) for h in result.structure],
                         [(3, "Intro"), (2, "First"), (3, "Detail")])

    def test_headings_need_h2(self):
        result = check_headings(parse_html("<h3>Only a subheading</h3>"))
        self.assertFalse(result.check.passed)

    def test_links_classification(self):
        doc = parse_html('<a href="/about">a</a><a href="https://a.com/x">b</a><a href="https://b.com">c</a>')
        result = check_links(doc, SOURCE_URL)
        self.assertEqual(result.internal_count, 2)
        self.assertEqual(result.external_count, 1)
        self.assertTrue(result.check.passed)

    def test_links_only_internal_fails(self):
        result = check_links(parse_html('<a href="/about">a</a>'), SOURCE_URL)
        self.assertFalse(result.check.passed)


class TestValidateSeo(unittest.TestCase):

    def test_all_checks_pass(self):
        result = validate_seo(make_article(), KEYWORD, SOURCE_URL)
        self.assertEqual(result.score, 100)
        self.assertEqual(result.links.internal_count, 2)
        self.assertEqual(result.links.external_count, 1)

    def test_empty_content_scores_within_bounds(self):
        result = validate_seo(make_article(content=""), KEYWORD, SOURCE_URL)
        # Only title and meta description pass
        self.assertEqual(result.score, 35)
        self.assertEqual(result.keyword_density.word_count, 0)

    def test_is_idempotent(self):
        article = make_article()
        first = validate_seo(article, KEYWORD, SOURCE_URL)
        second = validate_seo(article, KEYWORD, SOURCE_URL)
        self.assertEqual(first.model_dump_json(), second.model_dump_json())

    def test_does_not_modify_input(self):
        article = make_article()
        before = article.model_dump()
        validate_seo(article, KEYWORD, SOURCE_URL)
        self.assertEqual(article.model_dump(), before)

        mapping = make_article().model_dump()
        snapshot = copy.deepcopy(mapping)
        validate_seo(mapping, KEYWORD, SOURCE_URL)
        self.assertEqual(mapping, snapshot)

    def test_accepts_mapping(self):
        result = validate_seo(make_article().model_dump(), KEYWORD, SOURCE_URL)
        self.assertEqual(result.score, 100)

    def test_rejects_incomplete_mapping(self):
        with self.assertRaises(ValidationInputError):
            validate_seo({"title": "Missing everything else"}, KEYWORD, SOURCE_URL)

    def test_report_lists_failed_checks(self):
        result = validate_seo(make_article(seo_title="short"), KEYWORD, SOURCE_URL)
        report = format_seo_report(result, KEYWORD)
        self.assertIn(f"Score: {result.score}/100", report)
        self.assertIn("[FAIL] SEO title", report)
        self.assertIn("H2: Choosing beans", report)


if __name__ == '__main__':
    unittest.main()
