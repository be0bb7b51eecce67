"""PM Copilot prompt templates: template key -> (system, user) prompts (Jinja)."""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, Template

_SYSTEM = (
    "You are a project management copilot. You plan deliverables and tasks for "
    "agency work orders. Respond with JSON only, wrapped in ```json fences."
)

_PLAYBOOKS = (
    "{% for p in playbooks %}- {{ p.name }}: {{ p.description or '' }}\n"
    "{% else %}None available.\n{% endfor %}"
)

# Context: work_order (dict), playbooks (list of dict)
_DELIVERABLES = (
    "Analyze the following work order and generate 2-3 alternative deliverable structures.\n\n"
    "## Work Order\n"
    "Title: {{ work_order.title or 'Untitled Work Order' }}\n"
    "Description: {{ work_order.description or 'No description provided.' }}\n"
    "Acceptance Criteria:\n"
    "{% for c in work_order.acceptance_criteria or [] %}- {{ c }}\n"
    "{% else %}- None specified\n{% endfor %}\n"
    "## Available Playbooks\n" + _PLAYBOOKS + "\n"
    "## Instructions\n"
    "Generate 2-3 alternative approaches for structuring deliverables. Each alternative "
    "should have a different strategy (e.g., single deliverable, multi-phase, template-based).\n\n"
    "Respond with ONLY a JSON object using this schema:\n"
    '{"alternatives": [{"alternative_id": 1, "name": "...", "deliverables": [{"title": "...", '
    '"description": "...", "type": "document|deliverable|code|design", '
    '"acceptance_criteria": ["..."], "confidence": "low|medium|high"}], '
    '"confidence": "low|medium|high", "reasoning": "..."}]}'
)

# Context: deliverables (list of {title, description}), playbooks
_TASK_BREAKDOWN = (
    "Break down the following deliverables into actionable tasks with time estimates.\n\n"
    "## Deliverables\n"
    "{% for d in deliverables %}{{ loop.index }}. {{ d.title or 'Untitled' }}: "
    "{{ d.description or '' }}\n"
    "{% else %}No deliverables provided.\n{% endfor %}\n"
    "## Available Playbooks\n" + _PLAYBOOKS + "\n"
    "## Instructions\n"
    "For each deliverable, create tasks that cover planning, execution, and review. "
    "Provide realistic hour estimates and identify dependencies between tasks.\n\n"
    "Respond with ONLY a JSON object using this schema:\n"
    '{"task_breakdown": [{"deliverable_title": "...", "tasks": [{"title": "...", '
    '"description": "...", "estimated_hours": 2.0, "position_in_work_order": 1, '
    '"checklist_items": ["..."], "dependencies": [], "confidence": "low|medium|high"}], '
    '"total_estimated_hours": 12.0, "confidence": "low|medium|high"}]}'
)

# Context: project (dict), work_order (dict)
_INSIGHTS = (
    "Analyze the following project data and identify actionable insights including overdue "
    "items, bottlenecks, scope creep risks, and resource allocation issues.\n\n"
    "## Project Data\n{{ {'project': project, 'work_order': work_order} | tojson(indent=2) }}\n\n"
    "## Instructions\n"
    "Classify each insight by type (overdue, bottleneck, scope_creep, resource) and "
    "severity (low, medium, high).\n\n"
    "Respond with ONLY a JSON object using this schema:\n"
    '{"insights": [{"type": "...", "severity": "low|medium|high", "title": "...", '
    '"description": "...", "affected_items": [], "suggestion": "...", '
    '"confidence": "low|medium|high"}]}'
)

_DEFAULT_TEMPLATES: dict[str, tuple[str, str]] = {
    "deliverables": (_SYSTEM, _DELIVERABLES),
    "task_breakdown": (_SYSTEM, _TASK_BREAKDOWN),
    "insights": (_SYSTEM, _INSIGHTS),
}


class PromptRenderer:
    """Renders system and user prompts for a template key."""

    def __init__(self, templates: dict[str, tuple[str, str]] | None = None) -> None:
        self._templates = templates or _DEFAULT_TEMPLATES
        self._env = Environment(autoescape=False)
        self._compiled: dict[str, tuple[Template, Template]] = {}
        for key, (system_str, user_str) in self._templates.items():
            self._compiled[key] = (
                self._env.from_string(system_str),
                self._env.from_string(user_str),
            )

    def render(self, template_key: str, context: dict[str, Any]) -> tuple[str, str]:
        """Render (system, user) for the template key. Raises KeyError if key unknown."""
        if template_key not in self._compiled:
            raise KeyError(f"Unknown prompt template: {template_key}")
        system_tpl, user_tpl = self._compiled[template_key]
        return system_tpl.render(**context), user_tpl.render(**context)
