from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, Enum as SAEnum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from faculty_desk.db.base import Base

DEFAULT_MAX_LEAVES = 10


class Department(str, Enum):
    AIML = "AIML"
    DS = "DS"
    IT = "IT"
    CSE = "CSE"
    MECHANICAL = "MECHANICAL"


class AccountRole(str, Enum):
    faculty = "faculty"
    admin = "admin"


class Account(Base):
    __tablename__ = "accounts"
    __table_args__ = (CheckConstraint("salary >= 0", name="ck_accounts_salary_non_negative"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    department: Mapped[Department] = mapped_column(SAEnum(Department, name="department"), nullable=False)
    role: Mapped[AccountRole] = mapped_column(SAEnum(AccountRole, name="account_role"), nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    salary: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_leaves: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_MAX_LEAVES)
    total_leaves: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
