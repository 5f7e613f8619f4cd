"""
Featured Image Placeholder Module.
Swaps the [AVATAR_IMAGE_HERE] marker in rewritten HTML for the generated image.
"""

import html
import logging
import re

logger = logging.getLogger(__name__)

AVATAR_PLACEHOLDER = "[AVATAR_IMAGE_HERE]"
IMAGE_STYLE = "width:100%; height:auto; border-radius: 8px; margin: 1.5em 0;"

# The marker on its own, or alone inside a paragraph
_PLACEHOLDER_RE = re.compile(r'(?:<p>\s*)?' + re.escape(AVATAR_PLACEHOLDER) + r'(?:\s*</p>)?')
_CODE_FENCE_RE = re.compile(r'^\s*```[a-zA-Z]*\s*\n?(.*?)\n?\s*```\s*$', re.DOTALL)


def count_placeholders(content: str) -> int:
    return content.count(AVATAR_PLACEHOLDER)


def build_image_tag(src: str, alt_text: str) -> str:
    """Build the featured <img> tag; the alt text is attribute-escaped."""
    return f'<img src="{html.escape(src, quote=True)}" alt="{html.escape(alt_text, quote=True)}" style="{IMAGE_STYLE}" />'


def insert_featured_image(content: str, image_url: str, alt_text: str) -> str:
    """Replace the first placeholder with the image tag."""
    if AVATAR_PLACEHOLDER not in content:
        logger.warning("⚠️ No image placeholder in content; featured image not embedded")
        return content
    return content.replace(AVATAR_PLACEHOLDER, build_image_tag(image_url, alt_text), 1)


def clean_remaining_placeholders(content: str) -> str:
    """Remove any placeholder left in the content, with its empty paragraph."""
    return _PLACEHOLDER_RE.sub('', content)


def strip_code_fences(text: str) -> str:
    """Unwrap a response the model fenced as ```html ... ```."""
    match = _CODE_FENCE_RE.match(text)
    return match.group(1).strip() if match else text.strip()
