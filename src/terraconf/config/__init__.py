"""Configuration loading for terraconf."""
