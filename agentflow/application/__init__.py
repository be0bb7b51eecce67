"""Application layer: DTOs, interfaces, services and use cases."""
