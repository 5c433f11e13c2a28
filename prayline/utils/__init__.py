"""Shared helpers: decoding, validation, logging, stdin."""
