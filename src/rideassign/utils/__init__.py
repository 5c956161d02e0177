"""Shared utilities: logging, time codec, record loading and result persistence."""
