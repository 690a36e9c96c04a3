from pydantic import BaseModel, EmailStr, Field, field_validator

from faculty_desk.models.account import AccountRole, Department


class SignupRequest(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    email: EmailStr
    department: Department
    password: str = Field(min_length=1, max_length=128)
    confirm_password: str = Field(alias="confirmPassword", min_length=1, max_length=128)
    role: AccountRole
    salary: int = Field(default=0, ge=0)

    model_config = {"populate_by_name": True}

    @field_validator("username")
    @classmethod
    def normalize_username(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Username cannot be empty")
        return trimmed

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("department", mode="before")
    @classmethod
    def check_department(cls, value):
        if not isinstance(value, str) or value not in {item.value for item in Department}:
            raise ValueError("Invalid department selected")
        return value

    @field_validator("role", mode="before")
    @classmethod
    def check_role(cls, value):
        if not isinstance(value, str) or value not in {item.value for item in AccountRole}:
            raise ValueError("Invalid role selected")
        return value


class AccountOut(BaseModel):
    id: int
    username: str
    email: EmailStr
    department: Department
    role: AccountRole
    salary: int

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    # Either the username or the email address.
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("username")
    @classmethod
    def normalize_identifier(cls, value: str) -> str:
        return value.strip()


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    email: EmailStr
    role: AccountRole
    department: Department


class ProfileOut(BaseModel):
    username: str
    email: EmailStr
    department: Department
    role: AccountRole
    max_leaves: int
    total_leaves: int
    salary: int

    model_config = {"from_attributes": True}


class SalaryUpdate(BaseModel):
    new_salary: int = Field(alias="newSalary", ge=0)

    model_config = {"populate_by_name": True}


class MessageOut(BaseModel):
    message: str
