"""Status report data models."""
