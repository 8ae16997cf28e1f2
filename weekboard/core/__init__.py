"""Core infrastructure: configuration, logging, errors and the record store."""
