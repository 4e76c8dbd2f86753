"""
Shared utilities for lesson generation.

- llm_client.py: Google GenAI / OpenAI client returning raw text, with usage tracking
- logging_config.py: Structured JSON logging and stage timing
- file_io.py: JSON output for the CLIs
"""

__all__ = [
    "llm_client",
    "logging_config",
    "file_io",
]
