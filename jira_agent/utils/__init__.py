"""Logging, error classification, retry and LLM reply parsing helpers."""
