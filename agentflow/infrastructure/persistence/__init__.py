"""Persistence: database session, ORM models, repositories and migrations."""
