"""Core pipeline: configuration, errors, ingestion, retrieval and generation."""
