"""Shared utilities (datetime boundaries, identifiers)."""
