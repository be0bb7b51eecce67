"""initial_agentflow_schema

Revision ID: a1f0c3d9e2b4
Revises:
Create Date: 2026-10-18 09:12:40.118204

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1f0c3d9e2b4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _team_scoped() -> list[sa.Column]:
    return [
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("team_id", sa.String(), nullable=False),
        *_timestamps(),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "ai_agent",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("code", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("agent_type", sa.String(length=64), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_ai_agent_code"), "ai_agent", ["code"], unique=True)

    op.create_table(
        "work_order",
        *_team_scoped(),
        sa.Column("project_id", sa.String(), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("budget_cost", sa.Numeric(12, 2), nullable=True),
        sa.Column("estimated_hours", sa.Numeric(8, 2), nullable=True),
        sa.Column("actual_hours", sa.Numeric(8, 2), nullable=True),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("acceptance_criteria", sa.JSON(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column(
            "pm_copilot_mode", sa.String(length=16), server_default="full", nullable=False
        ),
        sa.CheckConstraint(
            "pm_copilot_mode IN ('staged', 'full')", name="work_order_pm_copilot_mode_check"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_work_order_team_id"), "work_order", ["team_id"], unique=False)
    op.create_index(op.f("ix_work_order_project_id"), "work_order", ["project_id"], unique=False)

    op.create_table(
        "playbook",
        *_team_scoped(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("playbook_type", sa.String(length=64), nullable=True),
        sa.Column("content", sa.JSON(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_playbook_team_id"), "playbook", ["team_id"], unique=False)

    op.create_table(
        "agent_chain",
        *_team_scoped(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("workflow_key", sa.String(length=100), nullable=False),
        sa.Column("ai_agent_id", sa.String(), nullable=True),
        sa.Column("enabled", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.ForeignKeyConstraint(["ai_agent_id"], ["ai_agent.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_agent_chain_team_id"), "agent_chain", ["team_id"], unique=False)
    op.create_index(
        op.f("ix_agent_chain_ai_agent_id"), "agent_chain", ["ai_agent_id"], unique=False
    )

    op.create_table(
        "agent_trigger",
        *_team_scoped(),
        sa.Column("agent_chain_id", sa.String(), nullable=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("entity_type", sa.String(length=32), nullable=False),
        sa.Column("status_from", sa.String(length=64), nullable=True),
        sa.Column("status_to", sa.String(length=64), nullable=True),
        sa.Column("trigger_conditions", sa.JSON(), nullable=True),
        sa.Column("priority", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("enabled", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("last_triggered_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "entity_type IN ('work_order', 'task', 'deliverable')",
            name="agent_trigger_entity_type_check",
        ),
        sa.ForeignKeyConstraint(["agent_chain_id"], ["agent_chain.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_agent_trigger_team_id"), "agent_trigger", ["team_id"], unique=False)
    op.create_index(
        op.f("ix_agent_trigger_agent_chain_id"), "agent_trigger", ["agent_chain_id"], unique=False
    )
    op.create_index(
        "ix_agent_trigger_team_entity_enabled",
        "agent_trigger",
        ["team_id", "entity_type", "enabled"],
        unique=False,
    )

    op.create_table(
        "agent_configuration",
        *_team_scoped(),
        sa.Column("ai_agent_id", sa.String(), nullable=False),
        sa.Column("enabled", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("daily_budget_cap", sa.Numeric(12, 4), nullable=True),
        sa.Column("monthly_budget_cap", sa.Numeric(12, 4), nullable=True),
        sa.Column("daily_spend", sa.Numeric(12, 4), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "current_month_spend", sa.Numeric(12, 4), server_default=sa.text("0"), nullable=False
        ),
        sa.Column("daily_spend_reset_on", sa.Date(), nullable=True),
        sa.Column("monthly_spend_period", sa.String(length=7), nullable=True),
        sa.Column(
            "can_create_work_orders", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column(
            "can_modify_tasks", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column(
            "can_access_client_data", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column("can_send_emails", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column(
            "can_modify_deliverables", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column(
            "can_access_financial_data",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column(
            "can_modify_playbooks", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column("tool_permissions", sa.JSON(), nullable=True),
        sa.Column("auto_approval_threshold", sa.Float(), nullable=True),
        sa.CheckConstraint(
            "auto_approval_threshold IS NULL OR "
            "(auto_approval_threshold >= 0 AND auto_approval_threshold <= 1)",
            name="agent_configuration_threshold_check",
        ),
        sa.ForeignKeyConstraint(["ai_agent_id"], ["ai_agent.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("team_id", "ai_agent_id", name="uq_agent_configuration_team_agent"),
    )
    op.create_index(
        op.f("ix_agent_configuration_team_id"), "agent_configuration", ["team_id"], unique=False
    )
    op.create_index(
        op.f("ix_agent_configuration_ai_agent_id"),
        "agent_configuration",
        ["ai_agent_id"],
        unique=False,
    )

    op.create_table(
        "agent_workflow_state",
        *_team_scoped(),
        sa.Column("ai_agent_id", sa.String(), nullable=True),
        sa.Column("agent_trigger_id", sa.String(), nullable=True),
        sa.Column("workflow_class", sa.String(length=100), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("current_node", sa.String(length=100), nullable=False),
        sa.Column("state_data", sa.JSON(), nullable=False),
        sa.Column("subject_type", sa.String(length=32), nullable=True),
        sa.Column("subject_id", sa.String(), nullable=True),
        sa.Column("paused_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("pause_reason", sa.Text(), nullable=True),
        sa.Column("resumed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "approval_required", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("failed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.CheckConstraint(
            "status IN ('running', 'paused', 'rejected', 'completed', 'failed')",
            name="agent_workflow_state_status_check",
        ),
        sa.CheckConstraint(
            "(status = 'paused') = (paused_at IS NOT NULL)",
            name="agent_workflow_state_paused_at_check",
        ),
        sa.ForeignKeyConstraint(["ai_agent_id"], ["ai_agent.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["agent_trigger_id"], ["agent_trigger.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_agent_workflow_state_team_id"), "agent_workflow_state", ["team_id"], unique=False
    )
    op.create_index(
        op.f("ix_agent_workflow_state_status"), "agent_workflow_state", ["status"], unique=False
    )
    op.create_index(
        op.f("ix_agent_workflow_state_ai_agent_id"),
        "agent_workflow_state",
        ["ai_agent_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_agent_workflow_state_agent_trigger_id"),
        "agent_workflow_state",
        ["agent_trigger_id"],
        unique=False,
    )
    op.create_index(
        "ix_agent_workflow_state_subject",
        "agent_workflow_state",
        ["team_id", "workflow_class", "subject_type", "subject_id"],
        unique=False,
    )

    op.create_table(
        "agent_activity_log",
        *_team_scoped(),
        sa.Column("agent_configuration_id", sa.String(), nullable=False),
        sa.Column("tool_name", sa.String(length=100), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("cost", sa.Numeric(12, 4), server_default=sa.text("0"), nullable=False),
        sa.Column("duration_ms", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("input_summary", sa.JSON(), nullable=True),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("workflow_state_id", sa.String(), nullable=True),
        sa.CheckConstraint(
            "status IN ('success', 'denied', 'failed')", name="agent_activity_log_status_check"
        ),
        sa.ForeignKeyConstraint(
            ["agent_configuration_id"], ["agent_configuration.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["workflow_state_id"], ["agent_workflow_state.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_agent_activity_log_team_id"), "agent_activity_log", ["team_id"], unique=False
    )
    op.create_index(
        op.f("ix_agent_activity_log_agent_configuration_id"),
        "agent_activity_log",
        ["agent_configuration_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_agent_activity_log_workflow_state_id"),
        "agent_activity_log",
        ["workflow_state_id"],
        unique=False,
    )
    op.create_index(
        "ix_agent_activity_log_team_created",
        "agent_activity_log",
        ["team_id", "created_at"],
        unique=False,
    )

    op.create_table(
        "inbox_item",
        *_team_scoped(),
        sa.Column("item_type", sa.String(length=32), nullable=False),
        sa.Column("source_type", sa.String(length=32), nullable=False),
        sa.Column("source_id", sa.String(), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("content_preview", sa.Text(), nullable=True),
        sa.Column("urgency", sa.String(length=16), nullable=True),
        sa.Column("ai_confidence", sa.String(length=16), nullable=True),
        sa.Column("approvable_type", sa.String(length=64), nullable=True),
        sa.Column("approvable_id", sa.String(), nullable=True),
        sa.Column("related_work_order_id", sa.String(), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_by", sa.String(), nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejected_by", sa.String(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.CheckConstraint(
            "item_type IN ('approval', 'agent_result')", name="inbox_item_type_check"
        ),
        sa.CheckConstraint(
            "urgency IN ('low', 'normal', 'high')", name="inbox_item_urgency_check"
        ),
        sa.CheckConstraint(
            "ai_confidence IN ('low', 'medium', 'high')", name="inbox_item_ai_confidence_check"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_inbox_item_team_id"), "inbox_item", ["team_id"], unique=False)
    op.create_index(
        op.f("ix_inbox_item_related_work_order_id"),
        "inbox_item",
        ["related_work_order_id"],
        unique=False,
    )
    op.create_index(
        "ix_inbox_item_approvable",
        "inbox_item",
        ["approvable_type", "approvable_id"],
        unique=False,
    )

    op.create_table(
        "deliverable",
        *_team_scoped(),
        sa.Column("work_order_id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("deliverable_type", sa.String(length=64), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("acceptance_criteria", sa.JSON(), nullable=True),
        sa.Column("budget_cost", sa.Numeric(12, 2), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.CheckConstraint(
            "status IN ('draft', 'in_review', 'approved', 'delivered')",
            name="deliverable_status_check",
        ),
        sa.ForeignKeyConstraint(["work_order_id"], ["work_order.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_deliverable_team_id"), "deliverable", ["team_id"], unique=False)
    op.create_index(
        op.f("ix_deliverable_work_order_id"), "deliverable", ["work_order_id"], unique=False
    )

    op.create_table(
        "task",
        *_team_scoped(),
        sa.Column("work_order_id", sa.String(), nullable=False),
        sa.Column("deliverable_id", sa.String(), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("estimated_hours", sa.Numeric(8, 2), nullable=True),
        sa.Column(
            "position_in_work_order", sa.Integer(), server_default=sa.text("0"), nullable=False
        ),
        sa.Column("checklist_items", sa.JSON(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("budget_cost", sa.Numeric(12, 2), nullable=True),
        sa.Column("is_blocked", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('todo', 'in_progress', 'blocked', 'done')", name="task_status_check"
        ),
        sa.ForeignKeyConstraint(["work_order_id"], ["work_order.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["deliverable_id"], ["deliverable.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_task_team_id"), "task", ["team_id"], unique=False)
    op.create_index(op.f("ix_task_deliverable_id"), "task", ["deliverable_id"], unique=False)
    op.create_index(
        "ix_task_work_order_position",
        "task",
        ["work_order_id", "position_in_work_order"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        "task",
        "deliverable",
        "inbox_item",
        "agent_activity_log",
        "agent_workflow_state",
        "agent_configuration",
        "agent_trigger",
        "agent_chain",
        "playbook",
        "work_order",
        "ai_agent",
    ):
        op.drop_table(table)
