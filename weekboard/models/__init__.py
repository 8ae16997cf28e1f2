"""Service layer result models."""
