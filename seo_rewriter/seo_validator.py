"""
SEO Validation Engine.

Scores an article draft against six weighted on-page checks:
- SEO title length and focus keyword
- Meta description length and focus keyword
- Focus keyword density in the body text
- Alt text on the first image
- H2 headings
- Internal and external links

Every function here is pure: no I/O, no mutation of its inputs.
"""

import math
from typing import Any, Mapping, Union

from pydantic import ValidationError

from .errors import ValidationInputError
from .html_text import ParsedDocument, classify_links, parse_html
from .schemas import (
    ArticleDraft,
    HeadingsCheck,
    ImageCheck,
    KeywordDensityCheck,
    LengthCheck,
    LinksCheck,
    SeoCheck,
    SeoValidationResult,
)

TITLE_MIN, TITLE_MAX = 50, 70
META_MIN, META_MAX = 120, 160
DENSITY_MIN, DENSITY_MAX = 0.8, 3.0  # percent

CHECK_WEIGHTS = {
    "title": 20,
    "meta_description": 15,
    "keyword_density": 20,
    "image": 10,
    "headings": 15,
    "links": 20,
}


# ── Helpers ───────────────────────────────────────────────────────────────


def count_occurrences(text: str, keyword: str) -> int:
    """Case-insensitive, non-overlapping substring count. Not word-boundary aware."""
    if not keyword or not text:
        return 0
    return text.lower().count(keyword.lower())


def compute_density(count: int, word_count: int) -> float:
    """Keyword density in percent; 0 when there are no words."""
    if word_count == 0:
        return 0.0
    return count / word_count * 100


def compute_score(passed: Mapping[str, bool], weights: Mapping[str, int] = CHECK_WEIGHTS) -> int:
    """Weighted share of passing checks, as an integer percentage (half rounds up)."""
    total = sum(weights.values())
    if total == 0:
        return 0
    earned = sum(weights[name] for name, ok in passed.items() if ok)
    return int(math.floor(earned / total * 100 + 0.5))


def _coerce_article(article: Union[ArticleDraft, Mapping[str, Any]]) -> ArticleDraft:
    if isinstance(article, ArticleDraft):
        return article
    if isinstance(article, Mapping):
        try:
            return ArticleDraft.model_validate(article)
        except ValidationError as e:
            raise ValidationInputError(f"Article is missing required fields: {e}") from e
    raise ValidationInputError(f"Cannot validate object of type {type(article).__name__}")


# ── Individual checks ─────────────────────────────────────────────────────


def check_title(seo_title: str, focus_keyword: str) -> LengthCheck:
    length = len(seo_title)
    length_ok = TITLE_MIN <= length <= TITLE_MAX
    keyword_ok = focus_keyword.lower() in seo_title.lower()

    if length_ok and keyword_ok:
        message = f"Great! The SEO title is {length} characters (within {TITLE_MIN}-{TITLE_MAX}) and contains the focus keyword."
    else:
        problems = []
        if not length_ok:
            problems.append(f"The SEO title is {length} characters; aim for {TITLE_MIN}-{TITLE_MAX}.")
        if not keyword_ok:
            problems.append("The focus keyword is NOT in the SEO title.")
        message = " ".join(problems)

    return LengthCheck(
        check=SeoCheck(passed=length_ok and keyword_ok, message=message),
        length=length,
        ideal_min=TITLE_MIN,
        ideal_max=TITLE_MAX,
    )


def check_meta_description(seo_description: str, focus_keyword: str) -> LengthCheck:
    length = len(seo_description)
    length_ok = META_MIN <= length <= META_MAX
    keyword_ok = focus_keyword.lower() in seo_description.lower()

    if length_ok and keyword_ok:
        message = f"Good! The meta description is {length} characters (within {META_MIN}-{META_MAX}) and contains the focus keyword."
    else:
        problems = []
        if not length_ok:
            problems.append(f"The meta description is {length} characters; aim for {META_MIN}-{META_MAX}.")
        if not keyword_ok:
            problems.append("The focus keyword is NOT in the meta description.")
        message = " ".join(problems)

    return LengthCheck(
        check=SeoCheck(passed=length_ok and keyword_ok, message=message),
        length=length,
        ideal_min=META_MIN,
        ideal_max=META_MAX,
    )


def check_keyword_density(doc: ParsedDocument, focus_keyword: str) -> KeywordDensityCheck:
    word_count = doc.word_count
    count = count_occurrences(doc.text, focus_keyword)
    density = compute_density(count, word_count)
    passed = DENSITY_MIN <= density <= DENSITY_MAX

    if word_count == 0:
        message = "Keyword density cannot be computed because the article has no content."
    elif passed:
        message = f"Keyword density is {density:.2f}% ({count} occurrences in {word_count} words). Very good."
    elif density < DENSITY_MIN:
        message = (f"Keyword density is {density:.2f}% ({count} occurrences in {word_count} words). "
                   f"A little low; add the keyword naturally (target {DENSITY_MIN}-{DENSITY_MAX}%).")
    else:
        message = (f"Keyword density is {density:.2f}% ({count} occurrences in {word_count} words). "
                   f"Too high; this may be seen as keyword stuffing (target {DENSITY_MIN}-{DENSITY_MAX}%).")

    return KeywordDensityCheck(
        check=SeoCheck(passed=passed, message=message),
        count=count,
        word_count=word_count,
        density=density,
    )


def check_image(doc: ParsedDocument) -> ImageCheck:
    if doc.has_image_alt:
        message = "The featured image has alt text."
    elif doc.first_image_alt is None:
        message = "No image with alt text found. Add a featured image with a descriptive alt attribute."
    else:
        message = "The first image has an empty alt attribute."
    return ImageCheck(check=SeoCheck(passed=doc.has_image_alt, message=message))


def check_headings(doc: ParsedDocument) -> HeadingsCheck:
    h2_count = doc.count_headings(2)
    h3_count = doc.count_headings(3)
    passed = h2_count > 0
    if passed:
        message = f"The article uses {h2_count} H2 and {h3_count} H3 headings."
    else:
        message = "The article has no H2 headings. Add some to improve its structure."
    return HeadingsCheck(
        check=SeoCheck(passed=passed, message=message),
        structure=list(doc.headings),
    )


def check_links(doc: ParsedDocument, source_url: str) -> LinksCheck:
    internal, external = classify_links(doc.hrefs, source_url)
    passed = internal > 0 and external > 0
    if passed:
        message = f"Good linking: {internal} internal and {external} external links."
    else:
        message = (f"Found {internal} internal and {external} external links. "
                   "Include at least one of each.")
    return LinksCheck(
        check=SeoCheck(passed=passed, message=message),
        internal_count=internal,
        external_count=external,
    )


# ── Main entry point ──────────────────────────────────────────────────────


def validate_seo(article: Union[ArticleDraft, Mapping[str, Any]], focus_keyword: str, source_url: str) -> SeoValidationResult:
    """
    Score an article draft for its focus keyword.

    Args:
        article: ArticleDraft (or StoredArticle), or a mapping with the same fields
        focus_keyword: The primary search term the article targets
        source_url: URL of the source article; decides which links are internal

    Returns:
        SeoValidationResult with per-check details and an overall 0-100 score

    Raises:
        ValidationInputError: if a mapping is missing required article fields
    """
    draft = _coerce_article(article)
    focus_keyword = focus_keyword or ""
    doc = parse_html(draft.content)

    title = check_title(draft.seo_title, focus_keyword)
    meta_description = check_meta_description(draft.seo_description, focus_keyword)
    keyword_density = check_keyword_density(doc, focus_keyword)
    image = check_image(doc)
    headings = check_headings(doc)
    links = check_links(doc, source_url)

    score = compute_score({
        "title": title.check.passed,
        "meta_description": meta_description.check.passed,
        "keyword_density": keyword_density.check.passed,
        "image": image.check.passed,
        "headings": headings.check.passed,
        "links": links.check.passed,
    })

    return SeoValidationResult(
        score=score,
        title=title,
        meta_description=meta_description,
        keyword_density=keyword_density,
        image=image,
        headings=headings,
        links=links,
    )


def format_seo_report(result: SeoValidationResult, focus_keyword: str = "") -> str:
    """Format a validation result as a readable CLI report."""

    def _status(ok: bool) -> str:
        return "PASS" if ok else "FAIL"

    kd = result.keyword_density
    lines = [
        f"{'=' * 60}",
        f"SEO REPORT: {focus_keyword}" if focus_keyword else "SEO REPORT",
        f"{'=' * 60}",
        f"Score: {result.score}/100",
        "",
        f"  [{_status(result.title.check.passed)}] SEO title:        {result.title.length} chars  (target: {TITLE_MIN}-{TITLE_MAX})",
        f"  [{_status(result.meta_description.check.passed)}] Meta description: {result.meta_description.length} chars  (target: {META_MIN}-{META_MAX})",
        f"  [{_status(kd.check.passed)}] Keyword density:  {kd.density:.2f}%  ({kd.count}/{kd.word_count} words)",
        f"  [{_status(result.image.check.passed)}] Image alt text",
        f"  [{_status(result.headings.check.passed)}] Headings:         {len(result.headings.structure)} (H2/H3)",
        f"  [{_status(result.links.check.passed)}] Links:            {result.links.internal_count} internal, {result.links.external_count} external",
        "",
    ]

    for name in CHECK_WEIGHTS:
        check = getattr(result, name).check
        if not check.passed:
            lines.append(f"  - {check.message}")

    if result.headings.structure:
        lines.append("")
        lines.append("Heading structure:")
        for heading in result.headings.structure:
            indent = "  " * (heading.level - 1)
            lines.append(f"{indent}H{heading.level}: {heading.text}")

    return "\n".join(lines)
