"""Prompt Detective: CO-STAR prompt-engineering game backend."""

__version__ = "0.1.0"
