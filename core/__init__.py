"""Core package initialization: exception hierarchy and logging setup."""
