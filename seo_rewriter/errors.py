"""
Error taxonomy for the rewrite pipeline and the SEO scorer.
"""


class RewriterError(Exception):
    """Base class for all rewriter errors."""
    pass


class ExtractionError(RewriterError):
    """Source URL unreachable or its content could not be parsed."""
    pass


class GenerationError(RewriterError):
    """An AI call failed or returned a malformed response."""
    pass


class ValidationInputError(RewriterError):
    """The SEO scorer received a structurally invalid article."""
    pass
