"""Token, value and expression types shared across the pipeline."""
