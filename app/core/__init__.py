"""Core configuration for the CalendAI website scanner service."""
