"""add_user_roles_table

Revision ID: c8f2d3e4b5a6
Revises: b7e1c2d3a4f5
Create Date: 2026-10-06 14:30:00.000000

Adds the authoritative user_roles table and back-fills one row per profile
that already carries a role.
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "c8f2d3e4b5a6"
down_revision: Union[str, None] = "b7e1c2d3a4f5"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "user_roles",
        sa.Column("user_id", sa.UUID(as_uuid=False), nullable=False),
        sa.Column(
            "role",
            sa.Enum(
                "admin", "landlord", "renter", name="app_role", native_enum=False, create_constraint=True
            ),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id", "role"),
    )
    op.create_index("idx_user_roles_role", "user_roles", ["role"])

    # Back-fill from the denormalized profile role
    op.execute(
        "INSERT INTO user_roles (user_id, role) "
        "SELECT p.id, p.role FROM profiles p "
        "WHERE p.role IS NOT NULL "
        "ON CONFLICT (user_id, role) DO NOTHING"
    )


def downgrade() -> None:
    op.drop_index("idx_user_roles_role", table_name="user_roles")
    op.drop_table("user_roles")
