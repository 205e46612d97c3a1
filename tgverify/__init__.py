"""Telegram group membership verifier: bot commands plus a small HTTP lookup API."""

__version__ = "0.1.0"
