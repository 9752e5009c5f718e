"""Core infrastructure: permissions, settings storage, errors, logging, database."""
