"""Cross-cutting helpers: enums, context, telemetry and utilities."""
