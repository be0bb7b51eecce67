"""Application DTOs: data passed between use cases and repositories."""
