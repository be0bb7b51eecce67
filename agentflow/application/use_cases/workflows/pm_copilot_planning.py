"""Deterministic planning used by the PM Copilot when no LLM output is usable.

Pure functions over JSON-shaped dicts; the workflow stores their output in
state_data unchanged.
"""

from __future__ import annotations

import json
import re
from datetime import date
from typing import Any

from agentflow.shared.enums import AIConfidence, SuggestionStatus
from agentflow.shared.utils.datetime import parse_iso

_JSON_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)

DEFAULT_EXECUTE_CHECKLIST = ["Complete task requirements", "Verify output quality"]
PLAYBOOK_EXECUTE_CHECKLIST = [
    "Follow playbook guidelines",
    "Complete all requirements",
    "Verify against criteria",
]
SCOPE_CREEP_RATIO = 0.8


def extract_json(text: str | None) -> Any | None:
    """JSON from a ```json fenced block, else the whole text; None when unparseable."""
    if not text:
        return None
    match = _JSON_FENCE.search(text)
    candidate = match.group(1) if match else text
    try:
        return json.loads(candidate.strip())
    except ValueError:
        return None


def determine_confidence(
    description: str | None,
    acceptance_criteria: list[Any],
    playbooks: list[dict[str, Any]],
) -> AIConfidence:
    has_description = bool(description)
    has_criteria = bool(acceptance_criteria)
    has_playbooks = bool(playbooks)
    if has_description and has_criteria and has_playbooks:
        return AIConfidence.HIGH
    if has_description and (has_criteria or has_playbooks):
        return AIConfidence.MEDIUM
    return AIConfidence.LOW


def build_deliverable_alternatives(
    work_order: dict[str, Any],
    playbooks: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Standard always; Multi-Phase with a description; Template-Based with playbooks."""
    title = work_order.get("title") or "Untitled Work Order"
    description = work_order.get("description") or ""
    criteria = list(work_order.get("acceptance_criteria") or [])
    confidence = determine_confidence(description, criteria, playbooks).value

    alternatives: list[dict[str, Any]] = [
        {
            "alternative_id": 1,
            "name": "Standard Approach",
            "deliverables": [
                {
                    "title": f"Primary Deliverable for {title}",
                    "description": (
                        f"Main deliverable based on work order requirements: {description}"
                    ),
                    "type": "document",
                    "acceptance_criteria": criteria,
                    "confidence": confidence,
                }
            ],
            "confidence": AIConfidence.MEDIUM.value,
            "reasoning": "Standard single-deliverable approach based on work order description.",
        }
    ]

    if description:
        alternatives.append(
            {
                "alternative_id": 2,
                "name": "Multi-Phase Approach",
                "deliverables": [
                    {
                        "title": f"Phase 1: Planning for {title}",
                        "description": "Initial planning and requirements gathering phase.",
                        "type": "document",
                        "acceptance_criteria": ["Requirements documented", "Plan approved"],
                        "confidence": AIConfidence.MEDIUM.value,
                    },
                    {
                        "title": f"Phase 2: Implementation for {title}",
                        "description": "Core implementation and delivery phase.",
                        "type": "deliverable",
                        "acceptance_criteria": criteria,
                        "confidence": AIConfidence.MEDIUM.value,
                    },
                ],
                "confidence": AIConfidence.MEDIUM.value,
                "reasoning": "Phased approach allowing for iterative review and approval.",
            }
        )

    if playbooks:
        playbook = playbooks[0]
        alternatives.append(
            {
                "alternative_id": 3,
                "name": "Template-Based Approach",
                "deliverables": [
                    {
                        "title": f"Deliverable based on {playbook.get('name')}",
                        "description": f"Following template: {playbook.get('description') or ''}",
                        "type": playbook.get("type") or "document",
                        "acceptance_criteria": criteria,
                        "confidence": AIConfidence.HIGH.value,
                    }
                ],
                "confidence": AIConfidence.HIGH.value,
                "reasoning": f"Based on existing playbook: {playbook.get('name')}",
            }
        )

    return alternatives


def flatten_deliverables(alternatives: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """One pending suggestion per deliverable, tagged with its alternative."""
    suggestions: list[dict[str, Any]] = []
    for alternative in alternatives:
        for deliverable in alternative.get("deliverables") or []:
            suggestions.append(
                {
                    "title": deliverable.get("title"),
                    "description": deliverable.get("description"),
                    "type": deliverable.get("type"),
                    "acceptance_criteria": list(deliverable.get("acceptance_criteria") or []),
                    "confidence": deliverable.get("confidence") or alternative.get("confidence"),
                    "alternative_id": alternative.get("alternative_id"),
                    "alternative_name": alternative.get("name"),
                    "status": SuggestionStatus.PENDING.value,
                }
            )
    return suggestions


def selected_deliverables(deliverable_suggestions: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Approved suggestions, or the non-rejected suggestions of the first alternative."""
    approved = [
        s for s in deliverable_suggestions if s.get("status") == SuggestionStatus.APPROVED.value
    ]
    if approved:
        return approved
    if not deliverable_suggestions:
        return []
    first = deliverable_suggestions[0].get("alternative_id")
    return [
        s
        for s in deliverable_suggestions
        if s.get("alternative_id") == first
        and s.get("status") != SuggestionStatus.REJECTED.value
    ]


def execute_checklist(playbooks: list[dict[str, Any]]) -> list[str]:
    if not playbooks:
        return list(DEFAULT_EXECUTE_CHECKLIST)
    content = playbooks[0].get("content")
    if isinstance(content, dict) and isinstance(content.get("checklist"), list):
        return [str(item) for item in content["checklist"][:5]]
    return list(PLAYBOOK_EXECUTE_CHECKLIST)


def build_task_breakdown(
    deliverables: list[dict[str, Any]],
    playbooks: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Plan (2h), Execute (8h), Review (2h) per deliverable."""
    breakdown: list[dict[str, Any]] = []
    position = 1
    for deliverable in deliverables:
        title = deliverable.get("title") or "Untitled Deliverable"
        tasks = [
            {
                "title": f"Plan: {title}",
                "description": "Initial planning and requirements analysis.",
                "estimated_hours": 2.0,
                "position_in_work_order": position,
                "checklist_items": ["Review requirements", "Define approach", "Estimate effort"],
                "dependencies": [],
                "confidence": AIConfidence.MEDIUM.value,
            },
            {
                "title": f"Execute: {title}",
                "description": "Main execution of deliverable requirements.",
                "estimated_hours": 8.0,
                "position_in_work_order": position + 1,
                "checklist_items": execute_checklist(playbooks),
                "dependencies": [position],
                "confidence": AIConfidence.MEDIUM.value,
            },
            {
                "title": f"Review: {title}",
                "description": "Quality review and acceptance testing.",
                "estimated_hours": 2.0,
                "position_in_work_order": position + 2,
                "checklist_items": ["Quality check", "Test against criteria", "Document findings"],
                "dependencies": [position + 1],
                "confidence": AIConfidence.HIGH.value,
            },
        ]
        position += len(tasks)
        breakdown.append(
            {
                "deliverable_title": title,
                "tasks": tasks,
                "total_estimated_hours": sum(t["estimated_hours"] for t in tasks),
                "confidence": AIConfidence.MEDIUM.value,
            }
        )
    return breakdown


def flatten_tasks(breakdown: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """One pending suggestion per task, in work order position order."""
    suggestions: list[dict[str, Any]] = []
    for group in breakdown:
        for task in group.get("tasks") or []:
            suggestions.append(
                {
                    "title": task.get("title"),
                    "description": task.get("description"),
                    "estimated_hours": task.get("estimated_hours"),
                    "position": task.get("position_in_work_order") or len(suggestions) + 1,
                    "checklist_items": list(task.get("checklist_items") or []),
                    "dependencies": list(task.get("dependencies") or []),
                    "confidence": task.get("confidence") or group.get("confidence"),
                    "deliverable_title": group.get("deliverable_title"),
                    "status": SuggestionStatus.PENDING.value,
                }
            )
    return suggestions


def build_project_insights(project_context: dict[str, Any], today: date) -> list[dict[str, Any]]:
    """Overdue, blocked and hours-overrun findings."""
    insights: list[dict[str, Any]] = []
    pending = project_context.get("pending_tasks") or []

    overdue = []
    for task in pending:
        due = parse_iso(task.get("due_date"))
        if due is not None and due.date() < today:
            overdue.append(task)
    if overdue:
        insights.append(
            {
                "type": "overdue",
                "severity": "high",
                "title": "Overdue Tasks Detected",
                "description": f"{len(overdue)} task(s) are past their due date.",
                "affected_items": [t.get("id") for t in overdue],
                "suggestion": "Review and reprioritize overdue tasks or update due dates.",
                "confidence": AIConfidence.HIGH.value,
            }
        )

    blocked = [t for t in pending if t.get("is_blocked") is True]
    if blocked:
        insights.append(
            {
                "type": "bottleneck",
                "severity": "medium",
                "title": "Blocked Tasks Identified",
                "description": f"{len(blocked)} task(s) are currently blocked.",
                "affected_items": [t.get("id") for t in blocked],
                "suggestion": "Review blockers and resolve dependencies to unblock work.",
                "confidence": AIConfidence.HIGH.value,
            }
        )

    budget_hours = float(project_context.get("budget_hours") or 0)
    actual_hours = float(project_context.get("actual_hours") or 0)
    if budget_hours > 0 and actual_hours > budget_hours * SCOPE_CREEP_RATIO:
        percent_used = round(actual_hours / budget_hours * 100)
        insights.append(
            {
                "type": "scope_creep",
                "severity": "high" if percent_used >= 100 else "medium",
                "title": "Budget Hours Warning",
                "description": f"Project has used {percent_used}% of budgeted hours.",
                "affected_items": [],
                "suggestion": "Review scope and consider adjusting budget or timeline.",
                "confidence": AIConfidence.HIGH.value,
            }
        )

    return insights


def content_preview(
    alternatives: list[dict[str, Any]], task_suggestions: list[dict[str, Any]]
) -> str:
    deliverable_count = sum(len(a.get("deliverables") or []) for a in alternatives)
    return (
        f"{len(alternatives)} alternative(s) with {deliverable_count} deliverable(s) "
        f"and {len(task_suggestions)} task(s) suggested"
    )
