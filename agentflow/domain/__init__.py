"""Domain layer: entities, value objects and exceptions (no framework imports)."""
