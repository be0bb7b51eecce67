"""agent_chain_execution

Revision ID: c7d2e8f41a90
Revises: a1f0c3d9e2b4
Create Date: 2026-10-18 15:40:02.551730

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "c7d2e8f41a90"
down_revision: Union[str, Sequence[str], None] = "a1f0c3d9e2b4"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "agent_chain_execution",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("team_id", sa.String(), nullable=False),
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
        sa.Column("agent_trigger_id", sa.String(), nullable=False),
        sa.Column("agent_chain_id", sa.String(), nullable=True),
        sa.Column("agent_workflow_state_id", sa.String(), nullable=True),
        sa.Column("execution_status", sa.String(length=16), nullable=False),
        sa.Column("workflow_key", sa.String(length=100), nullable=True),
        sa.Column("triggerable_type", sa.String(length=32), nullable=True),
        sa.Column("triggerable_id", sa.String(), nullable=True),
        sa.Column("attempt", sa.Integer(), server_default=sa.text("1"), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "execution_status IN ('started', 'dropped')",
            name="agent_chain_execution_status_check",
        ),
        sa.ForeignKeyConstraint(["agent_trigger_id"], ["agent_trigger.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["agent_chain_id"], ["agent_chain.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(
            ["agent_workflow_state_id"], ["agent_workflow_state.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_agent_chain_execution_team_id"),
        "agent_chain_execution",
        ["team_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_agent_chain_execution_agent_trigger_id"),
        "agent_chain_execution",
        ["agent_trigger_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_agent_chain_execution_agent_chain_id"),
        "agent_chain_execution",
        ["agent_chain_id"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("agent_chain_execution")
