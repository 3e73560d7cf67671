"""Core configuration, errors and composition root."""
