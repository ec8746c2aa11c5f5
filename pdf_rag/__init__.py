"""PDF retrieval-augmented generation pipeline."""
