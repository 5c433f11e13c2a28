"""Trusted ingestion and next-prayer scheduling."""
