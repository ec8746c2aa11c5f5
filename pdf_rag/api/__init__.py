"""HTTP surface over the pipeline."""
