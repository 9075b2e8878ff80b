from decimal import Decimal
from typing import Annotated, ClassVar, List, Optional, Tuple
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, conint, model_validator


def _validate_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be an http(s) URL")
    return value


Handle = Annotated[str, Field(min_length=1, max_length=25)]
Url = Annotated[str, AfterValidator(_validate_url)]
# "0", "0.5", "1", "1.0" ... equity is a fraction of the company, at most 1.
Equity = Annotated[str, Field(pattern=r"^(0(\.\d+)?|1(\.0+)?)$")]
Username = Annotated[str, Field(min_length=1, max_length=25)]
Password = Annotated[str, Field(min_length=5, max_length=20)]


class _Payload(BaseModel):
    """Request body: camelCase on the wire, unknown fields rejected."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class _Patch(_Payload):
    """
    PATCH body. Only the fields actually sent are updated, so "absent" and
    "null" differ; fields listed in not_nullable may be absent but not null.
    """

    not_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def check_not_nullable(self):
        for name in self.not_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# =========================
# Auth
# =========================

class UserAuth(_Payload):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserRegister(_Payload):
    username: Username
    password: Password
    first_name: str = Field(..., min_length=1, max_length=30, alias="firstName")
    last_name: str = Field(..., min_length=1, max_length=30, alias="lastName")
    email: EmailStr


class TokenResponse(BaseModel):
    token: str = Field(..., description="JWT to send as `Authorization: Bearer <token>`")


# =========================
# Companies
# =========================

class CompanyNew(_Payload):
    handle: Handle
    name: str = Field(..., min_length=1)
    description: str
    num_employees: Optional[conint(ge=0)] = Field(None, alias="numEmployees")
    logo_url: Optional[Url] = Field(None, alias="logoUrl")


class CompanyUpdate(_Patch):
    not_nullable = ("name", "description")

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[conint(ge=0)] = Field(None, alias="numEmployees")
    logo_url: Optional[Url] = Field(None, alias="logoUrl")


class JobSummary(_Record):
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[Decimal] = None


class Company(_Record):
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = Field(None, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")


class CompanyDetail(Company):
    jobs: List[JobSummary] = []


class CompanyResponse(BaseModel):
    company: Company


class CompanyDetailResponse(BaseModel):
    company: CompanyDetail


class CompanyListResponse(BaseModel):
    companies: List[Company]


# =========================
# Jobs
# =========================

class JobNew(_Payload):
    title: str = Field(..., min_length=1)
    salary: Optional[conint(ge=0)] = None
    equity: Optional[Equity] = None
    company_handle: Handle = Field(..., alias="companyHandle")


class JobUpdate(_Patch):
    not_nullable = ("title",)

    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[conint(ge=0)] = None
    equity: Optional[Equity] = None


class Job(JobSummary):
    company_handle: str = Field(..., alias="companyHandle")


class JobResponse(BaseModel):
    job: Job


class JobListResponse(BaseModel):
    jobs: List[Job]


# =========================
# Users
# =========================

class UserNew(UserRegister):
    is_admin: bool = Field(False, alias="isAdmin")


class UserUpdate(_Patch):
    not_nullable = ("password", "first_name", "last_name", "email")

    password: Optional[Password] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=30, alias="firstName")
    last_name: Optional[str] = Field(None, min_length=1, max_length=30, alias="lastName")
    email: Optional[EmailStr] = None


class User(_Record):
    username: str
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email: str
    is_admin: bool = Field(..., alias="isAdmin")


class UserDetail(User):
    jobs: List[int] = Field([], description="Ids of the jobs the user applied to")


class UserResponse(BaseModel):
    user: User


class UserDetailResponse(BaseModel):
    user: UserDetail


class UserListResponse(BaseModel):
    users: List[User]


class UserTokenResponse(BaseModel):
    user: User
    token: str


# =========================
# Misc
# =========================

class DeletedResponse(BaseModel):
    deleted: str


class AppliedResponse(BaseModel):
    applied: int
