"""create accounts and faculty schedule

Revision ID: 20261019_0001
Revises: None
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


department_enum = sa.Enum("AIML", "DS", "IT", "CSE", "MECHANICAL", name="department")
account_role_enum = sa.Enum("faculty", "admin", name="account_role")
weekday_enum = sa.Enum(
    "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", name="weekday"
)


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("department", department_enum, nullable=False),
        sa.Column("role", account_role_enum, nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("salary", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_leaves", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("total_leaves", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("salary >= 0", name="ck_accounts_salary_non_negative"),
    )
    op.create_index("ix_accounts_username", "accounts", ["username"], unique=True)
    op.create_index("ix_accounts_email", "accounts", ["email"], unique=True)

    op.create_table(
        "faculty_schedule",
        sa.Column("schedule_id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column(
            "account_id",
            sa.Integer(),
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("day_of_week", weekday_enum, nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("subject", sa.String(length=200), nullable=False),
        sa.Column("room_number", sa.String(length=50), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_faculty_schedule_account_id", "faculty_schedule", ["account_id"], unique=False)
    op.create_index("ix_faculty_schedule_day_of_week", "faculty_schedule", ["day_of_week"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_faculty_schedule_day_of_week", table_name="faculty_schedule")
    op.drop_index("ix_faculty_schedule_account_id", table_name="faculty_schedule")
    op.drop_table("faculty_schedule")
    op.drop_index("ix_accounts_email", table_name="accounts")
    op.drop_index("ix_accounts_username", table_name="accounts")
    op.drop_table("accounts")
    weekday_enum.drop(op.get_bind(), checkfirst=True)
    account_role_enum.drop(op.get_bind(), checkfirst=True)
    department_enum.drop(op.get_bind(), checkfirst=True)
