"""Identifier helpers: CUID2 primary keys and correlation ids."""

import uuid

from cuid2 import cuid_wrapper

_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new CUID2 string for use as a primary key."""
    value = _cuid()
    if not isinstance(value, str):
        raise TypeError(f"cuid2 returned {type(value).__name__}, expected str")
    return value


def new_correlation_id() -> str:
    """Return a fresh correlation id for work not started by an HTTP request."""
    return str(uuid.uuid4())
