"""Boundary adapters for external services (LLM, URL metadata)."""
