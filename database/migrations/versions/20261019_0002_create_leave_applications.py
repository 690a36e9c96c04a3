"""create leave applications

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


leave_status = sa.Enum("Approved", "Rejected", name="leave_status")


def upgrade() -> None:
    op.create_table(
        "leave_applications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("leave_type", sa.String(length=100), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("status", leave_status, nullable=False, server_default="Approved"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_leave_applications_email", "leave_applications", ["email"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_leave_applications_email", table_name="leave_applications")
    op.drop_table("leave_applications")
    leave_status.drop(op.get_bind(), checkfirst=True)
