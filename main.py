"""
Entry point for the SEO Article Rewriter.
Delegates to seo_rewriter.main.
"""
import sys

from seo_rewriter.main import main

if __name__ == "__main__":
    sys.exit(main())
