"""SEO Article Rewriter: rewrite a source article around a focus keyword and score its on-page SEO."""
