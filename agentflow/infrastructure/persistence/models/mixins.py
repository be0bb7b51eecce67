"""SQLAlchemy mixins for common model patterns.

Provides: CuidMixin, TeamMixin, TimestampMixin, the combined TeamScopedModel,
and values_check() for status CHECK constraints built from str Enums.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from agentflow.shared.utils.ids import generate_cuid


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class TeamMixin:
    """Mixin for team-owned rows. team_id is an opaque scope key owned by the platform."""

    @declared_attr
    def team_id(cls) -> Mapped[str]:
        return mapped_column(String, nullable=False, index=True)


class TimestampMixin:
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class TeamScopedModel(CuidMixin, TeamMixin, TimestampMixin):
    """Combined mixin: CUID + team_id + created_at/updated_at."""

    __abstract__ = True


def values_check(column: str, values: list[str], name: str) -> CheckConstraint:
    """CHECK (column IN (...)) from enum values."""
    return CheckConstraint(
        "{} IN ({})".format(
            column,
            ", ".join("'{}'".format(v.replace("'", "''")) for v in values),
        ),
        name=name,
    )
