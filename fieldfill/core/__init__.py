"""Core configuration and errors."""
