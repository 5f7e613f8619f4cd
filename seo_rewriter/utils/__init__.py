"""
Utility functions for the SEO article rewriter.
"""

import re

# ---------------------------------------------------------------------------
# Field alias mapping: common AI-generated key names → canonical snake_case
# field names expected by the Pydantic schemas.
#
# After converting raw AI keys to snake_case we apply these aliases so that,
# e.g., a model that returns "metaDescription" (→ "meta_description") is
# mapped to the canonical "seo_description" field name.
# ---------------------------------------------------------------------------
FIELD_ALIASES: dict = {
    # title / summary
    "headline": "title",
    "article_title": "title",
    "excerpt": "summary",
    "article_summary": "summary",
    # outline
    "headings": "outline",
    "sections": "outline",
    "structure": "outline",
    # heading directive
    "heading_level": "level",
    "heading": "text",
    "heading_text": "text",
    # seo_title
    "meta_title": "seo_title",
    "seo_headline": "seo_title",
    # seo_description
    "description": "seo_description",
    "meta_description": "seo_description",
    "meta_desc": "seo_description",
    # keywords (internal tags)
    "tags": "keywords",
    "tag_list": "keywords",
    # categories
    "category": "categories",
    "category_list": "categories",
    # seo_keywords
    "focus_keywords": "seo_keywords",
    "seo_keyword_list": "seo_keywords",
    # slug
    "url_slug": "slug",
    "post_slug": "slug",
}


def normalize_dict_keys(data: dict) -> dict:
    """
    Normalize dictionary keys to snake_case for Pydantic validation,
    then apply :data:`FIELD_ALIASES` to map common AI-generated key names to
    their canonical Pydantic field names.

    Examples:
        'seoTitle'           → 'seo_title'
        'SEO_DESCRIPTION'    → 'seo_description'
        'metaDescription'    → 'seo_description'  (via alias map)
        'TAGS'               → 'keywords'         (via alias map)
        'slug'               → 'slug'

    Args:
        data: Dictionary whose keys should be normalised.

    Returns:
        New dictionary with canonical snake_case keys and the same values.
        Returns the input unchanged if it is not a dict.
    """
    if not isinstance(data, dict):
        return data

    normalized = {}
    for key, value in data.items():
        # Step 1 – insert underscore before a run of capitals followed by a
        #           lower-case letter so we split "ABCDef" → "ABC_Def"
        s1 = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', str(key))
        # Step 2 – insert underscore between a lower-case/digit and an
        #           upper-case letter so "camelCase" → "camel_Case"
        s2 = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', s1)
        snake_key = s2.lower()
        # Step 3 – apply field alias map (e.g. "tags" → "keywords")
        canonical_key = FIELD_ALIASES.get(snake_key, snake_key)
        normalized[canonical_key] = value

    return normalized
