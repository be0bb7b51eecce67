"""Unit tests for PromptRenderer templates and SuggestionSchemaValidator."""

import pytest

from agentflow.application.services import SuggestionSchemaValidator
from agentflow.infrastructure.services import PromptRenderer

renderer = PromptRenderer()
validator = SuggestionSchemaValidator()


def test_deliverables_prompt_includes_work_order_and_playbooks() -> None:
    """The deliverables template lists criteria and playbooks."""
    system, prompt = renderer.render(
        "deliverables",
        {
            "work_order": {
                "title": "Brand refresh",
                "description": "New logo",
                "acceptance_criteria": ["Three concepts"],
            },
            "playbooks": [{"name": "Logo sprint", "description": "Two-week sprint"}],
        },
    )
    assert "JSON" in system
    assert "Title: Brand refresh" in prompt
    assert "- Three concepts" in prompt
    assert "- Logo sprint: Two-week sprint" in prompt


def test_prompts_render_defaults_for_missing_values() -> None:
    """Missing work order fields and playbooks render placeholders."""
    _, prompt = renderer.render("deliverables", {"work_order": {}, "playbooks": []})
    assert "Untitled Work Order" in prompt
    assert "- None specified" in prompt
    assert "None available." in prompt

    _, tasks_prompt = renderer.render("task_breakdown", {"deliverables": [], "playbooks": []})
    assert "No deliverables provided." in tasks_prompt


def test_insights_prompt_embeds_project_json() -> None:
    """Project data is embedded as JSON."""
    _, prompt = renderer.render(
        "insights", {"project": {"budget_hours": 10.0}, "work_order": {"title": "X"}}
    )
    assert '"budget_hours": 10.0' in prompt


def test_unknown_template_raises_key_error() -> None:
    with pytest.raises(KeyError):
        renderer.render("haiku", {})


def test_valid_payloads_pass_validation() -> None:
    """Well-formed payloads for every template key produce no errors."""
    assert validator.validate(
        "deliverables",
        {"alternatives": [{"alternative_id": 1, "name": "A", "deliverables": [{"title": "D"}]}]},
    ) == []
    assert validator.validate(
        "task_breakdown",
        {"task_breakdown": [{"deliverable_title": "D", "tasks": [{"title": "T"}]}]},
    ) == []
    assert validator.validate(
        "insights", {"insights": [{"type": "overdue", "severity": "high", "title": "Late"}]}
    ) == []


def test_invalid_payloads_report_paths() -> None:
    """Errors name the offending location."""
    errors = validator.validate(
        "task_breakdown",
        {"task_breakdown": [{"deliverable_title": "D", "tasks": [{"estimated_hours": -1}]}]},
    )
    assert any(e.startswith("task_breakdown/0/tasks/0") for e in errors)
    assert validator.validate("insights", {}) == ["<root>: 'insights' is a required property"]
    assert validator.validate(
        "insights", {"insights": [{"type": "x", "severity": "catastrophic", "title": "t"}]}
    )


def test_unknown_template_key_is_an_error() -> None:
    assert validator.validate("haiku", {}) == ["No schema registered for 'haiku'"]
