"""Validates PM Copilot LLM output against JSON Schemas (implements ISuggestionValidator)."""

from __future__ import annotations

from typing import Any

import jsonschema

_CONFIDENCE = {"type": "string", "enum": ["low", "medium", "high"]}
_STRING_LIST = {"type": "array", "items": {"type": "string"}}

DELIVERABLES_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["alternatives"],
    "properties": {
        "alternatives": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["alternative_id", "name", "deliverables"],
                "properties": {
                    "alternative_id": {"type": ["integer", "string"]},
                    "name": {"type": "string", "minLength": 1},
                    "confidence": _CONFIDENCE,
                    "reasoning": {"type": "string"},
                    "deliverables": {
                        "type": "array",
                        "minItems": 1,
                        "items": {
                            "type": "object",
                            "required": ["title"],
                            "properties": {
                                "title": {"type": "string", "minLength": 1},
                                "description": {"type": ["string", "null"]},
                                "type": {"type": ["string", "null"]},
                                "acceptance_criteria": _STRING_LIST,
                                "confidence": _CONFIDENCE,
                            },
                        },
                    },
                },
            },
        }
    },
}

TASK_BREAKDOWN_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["task_breakdown"],
    "properties": {
        "task_breakdown": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["deliverable_title", "tasks"],
                "properties": {
                    "deliverable_title": {"type": "string"},
                    "confidence": _CONFIDENCE,
                    "tasks": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["title"],
                            "properties": {
                                "title": {"type": "string", "minLength": 1},
                                "description": {"type": ["string", "null"]},
                                "estimated_hours": {"type": ["number", "null"], "minimum": 0},
                                "position_in_work_order": {"type": ["integer", "null"]},
                                "checklist_items": _STRING_LIST,
                                "dependencies": {"type": "array"},
                                "confidence": _CONFIDENCE,
                            },
                        },
                    },
                },
            },
        }
    },
}

INSIGHTS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["insights"],
    "properties": {
        "insights": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["type", "severity", "title"],
                "properties": {
                    "type": {"type": "string"},
                    "severity": {"type": "string", "enum": ["low", "medium", "high"]},
                    "title": {"type": "string"},
                    "description": {"type": "string"},
                    "affected_items": {"type": "array"},
                    "suggestion": {"type": "string"},
                    "confidence": _CONFIDENCE,
                },
            },
        }
    },
}

_SCHEMAS: dict[str, dict[str, Any]] = {
    "deliverables": DELIVERABLES_SCHEMA,
    "task_breakdown": TASK_BREAKDOWN_SCHEMA,
    "insights": INSIGHTS_SCHEMA,
}


class SuggestionSchemaValidator:
    """Checks parsed LLM JSON against the schema registered for a template key."""

    def __init__(self, schemas: dict[str, dict[str, Any]] | None = None) -> None:
        self._validators = {
            key: jsonschema.Draft7Validator(schema)
            for key, schema in (schemas or _SCHEMAS).items()
        }

    def validate(self, template_key: str, payload: Any) -> list[str]:
        """Return error messages; an unknown template key is itself an error."""
        validator = self._validators.get(template_key)
        if validator is None:
            return [f"No schema registered for '{template_key}'"]
        return [
            f"{'/'.join(str(p) for p in error.absolute_path) or '<root>'}: {error.message}"
            for error in validator.iter_errors(payload)
        ]
