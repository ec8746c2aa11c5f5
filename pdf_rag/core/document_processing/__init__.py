"""Document ingestion stages: load, chunk and embed."""
