"""Block syntax formatting."""
