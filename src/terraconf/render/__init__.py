"""Rendering of resource state into block syntax."""
