import re
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _match_member(enum_cls, value, default, aliases: Optional[dict] = None):
    """Resolve a free-form string to an enum member, falling back to ``default``."""
    if isinstance(value, str):
        key = re.sub(r'[\s\-]+', '_', value.strip().lower())
        for member in enum_cls:
            if key in (member.value, member.name.lower()):
                return member
        if aliases and key in aliases:
            return enum_cls(aliases[key])
    return default


class Tone(str, Enum):
    PROFESSIONAL = "professional"
    FRIENDLY = "friendly"
    HUMOROUS = "humorous"
    PERSUASIVE = "persuasive"
    INSPIRATIONAL = "inspirational"
    TECHNICAL = "technical"
    ENTERTAINING = "entertaining"

    @classmethod
    def _missing_(cls, value):
        return _match_member(cls, value, cls.PROFESSIONAL)


class Language(str, Enum):
    VIETNAMESE = "vi"
    ENGLISH = "en"

    @classmethod
    def _missing_(cls, value):
        return _match_member(cls, value, cls.VIETNAMESE, aliases={"tiếng_việt": "vi"})


class SeoGoal(str, Enum):
    INFORMATIONAL = "informational"
    COMMERCIAL = "commercial"
    REVIEW = "review"
    HOW_TO = "how_to"

    @classmethod
    def _missing_(cls, value):
        return _match_member(cls, value, cls.INFORMATIONAL, aliases={"guide": "how_to", "howto": "how_to"})


class RewriteOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    tone: Tone = Tone.PROFESSIONAL
    length: str = "About 800 words"
    is_strict: bool = False
    language: Language = Language.VIETNAMESE
    seo_goal: SeoGoal = SeoGoal.INFORMATIONAL
    seo_level: int = Field(default=3, ge=1, le=5)
    sample_title: Optional[str] = None
    auto_images: bool = True

    @field_validator("tone", mode="before")
    @classmethod
    def _coerce_tone(cls, value):
        return Tone(value)

    @field_validator("language", mode="before")
    @classmethod
    def _coerce_language(cls, value):
        return Language(value)

    @field_validator("seo_goal", mode="before")
    @classmethod
    def _coerce_seo_goal(cls, value):
        return SeoGoal(value)


_DIRECTIVE_RE = re.compile(r'^\s*[Hh]([23])(?:\s*[:.\-]\s*|\s+)(.+)$')


class HeadingDirective(BaseModel):
    level: int = Field(ge=2, le=3, description="Heading level, 2 or 3")
    text: str

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value):
        if isinstance(value, str):
            return int(value.strip().lower().lstrip("h"))
        return value

    @classmethod
    def from_string(cls, directive: str) -> "HeadingDirective":
        """Parse the ``"H2: Section title"`` form. Unprefixed text becomes an H2."""
        match = _DIRECTIVE_RE.match(directive)
        if match:
            return cls(level=int(match.group(1)), text=match.group(2).strip())
        return cls(level=2, text=directive.strip())


class SeoOutline(BaseModel):
    title: str
    summary: str
    outline: List[HeadingDirective]

    @field_validator("outline", mode="before")
    @classmethod
    def _parse_directives(cls, value):
        if isinstance(value, list):
            return [HeadingDirective.from_string(item) if isinstance(item, str) else item for item in value]
        return value


class SeoMetadata(BaseModel):
    keywords: List[str] = Field(description="3-5 related internal tags")
    categories: List[str] = Field(description="1-2 categories")
    slug: str = Field(description="URL-friendly slug containing the focus keyword")
    seo_title: str = Field(description="SEO title, 50-70 chars, focus keyword first")
    seo_description: str = Field(description="Meta description, 120-160 chars, contains the focus keyword")
    seo_keywords: List[str] = Field(description="5-7 SEO keywords including variants")


class ArticleDraft(BaseModel):
    title: str
    slug: str
    summary: str
    content: str = Field(description="HTML body of the article")
    avatar_url: str = ""
    keywords: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    seo_title: str
    seo_description: str
    seo_keywords: List[str] = Field(default_factory=list)


class StoredArticle(ArticleDraft):
    id: str
    created_at: int = Field(description="Creation time, epoch milliseconds")
    source_url: str
    source_focus_keyword: str
    original_text: Optional[str] = None
    seo_score: Optional[int] = None


class RewriteResult(BaseModel):
    article_data: ArticleDraft
    original_text: str


class NewsSearchResult(BaseModel):
    title: str
    url: str


# --- SEO validation result ---

class SeoCheck(BaseModel):
    passed: bool
    message: str


class HeadingInfo(BaseModel):
    level: int
    text: str


class LengthCheck(BaseModel):
    check: SeoCheck
    length: int
    ideal_min: int
    ideal_max: int


class KeywordDensityCheck(BaseModel):
    check: SeoCheck
    count: int
    word_count: int
    density: float = Field(description="Percentage of words matching the focus keyword")


class ImageCheck(BaseModel):
    check: SeoCheck


class HeadingsCheck(BaseModel):
    check: SeoCheck
    structure: List[HeadingInfo]


class LinksCheck(BaseModel):
    check: SeoCheck
    internal_count: int
    external_count: int


class SeoValidationResult(BaseModel):
    score: int = Field(ge=0, le=100)
    title: LengthCheck
    meta_description: LengthCheck
    keyword_density: KeywordDensityCheck
    image: ImageCheck
    headings: HeadingsCheck
    links: LinksCheck
