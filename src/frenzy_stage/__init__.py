"""Frenzy Stage: realtime chat and fishing game backend."""

__version__ = "1.0.0"
