"""diffguard - LLM pull request reviewer built on a unified diff parser."""

__version__ = "0.1.0"
