"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: 001_initial (Alembic Migration)

Responsibilities:
  - Crear el esquema completo desde cero (users + tasks).
  - Definir constraints (unicidad, checks de vocabulario y rangos) e índices
    alineados a las queries de los repositorios.

Collaborators:
  - PostgreSQL 14+
  - infrastructure.repositories.postgres (usa este esquema como contrato)

Policy:
  - Migración BASELINE. Toda evolución futura va en migraciones aditivas.
  - assigned_to / created_by son referencias por id a users (sin FK):
    una tarea no depende del ciclo de vida de la cuenta.
  - Convención de nombres:
      pk_<tabla>                         - Primary keys
      uq_<tabla>_<col>                   - Unique constraints
      ix_<tabla>_<col>                   - Indexes
      ck_<tabla>_<regla>                 - Check constraints
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_initial"
down_revision: Union[str, None] = None
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


def upgrade() -> None:
    # =========================================================
    # 1) IDENTITY (users)
    # =========================================================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column(
            "role",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'user'"),
        ),
        sa.Column(
            "is_active",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.Column("avatar_url", sa.String(500), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.Column(
            "version", sa.Integer, nullable=False, server_default=sa.text("0")
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.CheckConstraint(
            "role IN ('user','manager','admin')", name="ck_users_role"
        ),
    )
    op.create_index("ix_users_role", "users", ["role"])

    # =========================================================
    # 2) TASKS
    # =========================================================
    op.create_table(
        "tasks",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'TODO'"),
        ),
        sa.Column(
            "priority",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'MEDIUM'"),
        ),
        sa.Column("category", sa.String(30), nullable=True),
        sa.Column("assigned_to", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("estimated_hours", sa.Integer, nullable=True),
        sa.Column("actual_hours", sa.Integer, nullable=True),
        sa.Column(
            "is_archived",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("false"),
        ),
        *_timestamps(),
        sa.Column(
            "version", sa.Integer, nullable=False, server_default=sa.text("0")
        ),
        sa.PrimaryKeyConstraint("id", name="pk_tasks"),
        sa.CheckConstraint(
            "status IN ('TODO','IN_PROGRESS','COMPLETED','CANCELLED')",
            name="ck_tasks_status",
        ),
        sa.CheckConstraint(
            "priority IN ('LOW','MEDIUM','HIGH','URGENT')",
            name="ck_tasks_priority",
        ),
        sa.CheckConstraint(
            "category IS NULL OR category IN ('DEVELOPMENT','TESTING',"
            "'DOCUMENTATION','WORK','PERSONAL','RESEARCH','OTHER')",
            name="ck_tasks_category",
        ),
        sa.CheckConstraint(
            "estimated_hours IS NULL OR estimated_hours >= 0",
            name="ck_tasks_estimated_hours",
        ),
        sa.CheckConstraint(
            "actual_hours IS NULL OR actual_hours >= 0",
            name="ck_tasks_actual_hours",
        ),
        # completed_at solo existe para tareas COMPLETED.
        sa.CheckConstraint(
            "completed_at IS NULL OR status = 'COMPLETED'",
            name="ck_tasks_completed_at",
        ),
    )

    # Índices según queries reales (listados por asignado/creador/estado).
    op.create_index("ix_tasks_assigned_to", "tasks", ["assigned_to"])
    op.create_index("ix_tasks_created_by", "tasks", ["created_by"])
    op.create_index("ix_tasks_status", "tasks", ["status"])
    op.create_index("ix_tasks_due_date", "tasks", ["due_date"])
    op.create_index("ix_tasks_created_at", "tasks", ["created_at"])
    op.execute("CREATE INDEX ix_tasks_lower_title ON tasks (lower(title))")


def downgrade() -> None:
    op.drop_table("tasks")
    op.drop_table("users")
