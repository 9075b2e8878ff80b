import logging
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobly import config, db
from jobly.auth_utils import create_token, ensure_admin, ensure_correct_user_or_admin
from jobly.exceptions import JoblyError
from jobly.models import company as company_model
from jobly.models import job as job_model
from jobly.models import user as user_model
from jobly.schemas import (
    AppliedResponse,
    CompanyDetailResponse,
    CompanyListResponse,
    CompanyNew,
    CompanyResponse,
    CompanyUpdate,
    DeletedResponse,
    JobListResponse,
    JobNew,
    JobResponse,
    JobUpdate,
    TokenResponse,
    UserAuth,
    UserDetailResponse,
    UserListResponse,
    UserNew,
    UserRegister,
    UserResponse,
    UserTokenResponse,
    UserUpdate,
)

logging.basicConfig(
    level=config.log_level(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Service health checks."},
    {"name": "Auth", "description": "Token issue and self-registration."},
    {"name": "Companies", "description": "Companies; writes are admin only."},
    {"name": "Jobs", "description": "Job postings; writes are admin only."},
    {"name": "Users", "description": "Users and job applications."},
]

app = FastAPI(
    title="Jobly API",
    description=(
        "Backend API for Jobly: companies, their job postings, and users applying to them.\n\n"
        "Auth: Use the `Authorization: Bearer <token>` header for protected routes."
    ),
    version="1.0.0",
    openapi_tags=openapi_tags,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(message: Any, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": {"message": message, "status": status_code}})


@app.exception_handler(JoblyError)
async def jobly_error_handler(request: Request, exc: JoblyError) -> JSONResponse:
    return _error(exc.message, exc.status)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for err in exc.errors():
        field = err["loc"][-1] if err["loc"] else "body"
        if err["type"] in ("int_parsing", "float_parsing", "decimal_parsing"):
            messages.append(f"{field} must be a number")
        elif err["type"] == "bool_parsing":
            messages.append(f"{field} must be true or false")
        else:
            messages.append(f"{field}: {err['msg']}")
    # Query string problems are reported as a single message, bodies as a list.
    if all(err["loc"] and err["loc"][0] == "query" for err in exc.errors()) and len(messages) == 1:
        return _error(messages[0], status.HTTP_400_BAD_REQUEST)
    return _error(messages, status.HTTP_400_BAD_REQUEST)


@app.exception_handler(Exception)
async def exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s %s - %s", request.method, request.url.path, exc, exc_info=True)
    return _error("Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR)


@app.on_event("startup")
def _startup() -> None:
    db.init_db_pool()


@app.on_event("shutdown")
def _shutdown() -> None:
    db.close_db_pool()


@app.get("/", tags=["Health"], summary="Health check")
def health_check() -> Dict[str, str]:
    """Health check endpoint used by the frontend to verify backend availability."""
    return {"message": "Healthy"}


# =========================
# Auth
# =========================

@app.post("/auth/token", response_model=TokenResponse, tags=["Auth"], summary="Get token")
def get_token(payload: UserAuth) -> Dict[str, str]:
    """Exchange a username/password for a JWT."""
    user = user_model.authenticate(payload.username, payload.password)
    return {"token": create_token(user)}


@app.post(
    "/auth/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Auth"],
    summary="Register",
)
def register(payload: UserRegister) -> Dict[str, str]:
    """Create a (non-admin) user and return a JWT for them."""
    data = payload.model_dump(mode="json", by_alias=True)
    user = user_model.register({**data, "isAdmin": False})
    return {"token": create_token(user)}


# =========================
# Companies
# =========================

@app.post(
    "/companies",
    response_model=CompanyResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Companies"],
    summary="Create company",
)
def create_company(payload: CompanyNew, _: Dict[str, Any] = Depends(ensure_admin)) -> Dict[str, Any]:
    """Admin: create a company."""
    return {"company": company_model.create(payload.model_dump(mode="json", by_alias=True))}


@app.get("/companies", response_model=CompanyListResponse, tags=["Companies"], summary="List companies")
def list_companies(
    name_like: Optional[str] = Query(None, alias="nameLike", description="Case-insensitive name substring"),
    min_employees: Optional[int] = Query(None, alias="minEmployees", ge=0),
    max_employees: Optional[int] = Query(None, alias="maxEmployees", ge=0),
) -> Dict[str, Any]:
    """List companies, optionally filtered by name and employee count."""
    filters = {"name_like": name_like, "min_employees": min_employees, "max_employees": max_employees}
    return {"companies": company_model.find_all(filters)}


@app.get("/companies/{handle}", response_model=CompanyDetailResponse, tags=["Companies"], summary="Get company")
def get_company(handle: str) -> Dict[str, Any]:
    """Get a company together with its jobs."""
    return {"company": company_model.get(handle)}


@app.patch("/companies/{handle}", response_model=CompanyResponse, tags=["Companies"], summary="Update company")
def update_company(handle: str, payload: CompanyUpdate, _: Dict[str, Any] = Depends(ensure_admin)) -> Dict[str, Any]:
    """Admin: update name, description, numEmployees and/or logoUrl."""
    data = payload.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return {"company": company_model.update(handle, data)}


@app.delete("/companies/{handle}", response_model=DeletedResponse, tags=["Companies"], summary="Delete company")
def delete_company(handle: str, _: Dict[str, Any] = Depends(ensure_admin)) -> Dict[str, str]:
    """Admin: delete a company and its jobs."""
    company_model.remove(handle)
    return {"deleted": handle}


# =========================
# Jobs
# =========================

@app.post(
    "/jobs",
    response_model=JobResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Jobs"],
    summary="Create job",
)
def create_job(payload: JobNew, _: Dict[str, Any] = Depends(ensure_admin)) -> Dict[str, Any]:
    """Admin: create a job."""
    return {"job": job_model.create(payload.model_dump(mode="json", by_alias=True))}


@app.get("/jobs", response_model=JobListResponse, tags=["Jobs"], summary="List jobs")
def list_jobs(
    title: Optional[str] = Query(None, description="Case-insensitive title substring"),
    min_salary: Optional[int] = Query(None, alias="minSalary", ge=0),
    has_equity: Optional[bool] = Query(None, alias="hasEquity", description="If true, only jobs with equity > 0"),
) -> Dict[str, Any]:
    """List jobs, optionally filtered by title, minimum salary and equity."""
    filters = {"title": title, "min_salary": min_salary, "has_equity": has_equity}
    return {"jobs": job_model.find_all(filters)}


@app.get("/jobs/{job_id}", response_model=JobResponse, tags=["Jobs"], summary="Get job")
def get_job(job_id: int) -> Dict[str, Any]:
    return {"job": job_model.get(job_id)}


@app.patch("/jobs/{job_id}", response_model=JobResponse, tags=["Jobs"], summary="Update job")
def update_job(job_id: int, payload: JobUpdate, _: Dict[str, Any] = Depends(ensure_admin)) -> Dict[str, Any]:
    """Admin: update title, salary and/or equity. Sending null clears salary or equity."""
    data = payload.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return {"job": job_model.update(job_id, data)}


@app.delete("/jobs/{job_id}", response_model=DeletedResponse, tags=["Jobs"], summary="Delete job")
def delete_job(job_id: int, _: Dict[str, Any] = Depends(ensure_admin)) -> Dict[str, str]:
    job_model.remove(job_id)
    return {"deleted": str(job_id)}


# =========================
# Users
# =========================

@app.post(
    "/users",
    response_model=UserTokenResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Users"],
    summary="Create user",
)
def create_user(payload: UserNew, _: Dict[str, Any] = Depends(ensure_admin)) -> Dict[str, Any]:
    """Admin: create a user (possibly another admin) and return a token for them."""
    user = user_model.register(payload.model_dump(mode="json", by_alias=True))
    return {"user": user, "token": create_token(user)}


@app.get("/users", response_model=UserListResponse, tags=["Users"], summary="List users")
def list_users(_: Dict[str, Any] = Depends(ensure_admin)) -> Dict[str, Any]:
    return {"users": user_model.find_all()}


@app.get("/users/{username}", response_model=UserDetailResponse, tags=["Users"], summary="Get user")
def get_user(username: str, _: Dict[str, Any] = Depends(ensure_correct_user_or_admin)) -> Dict[str, Any]:
    """Get a user and the ids of the jobs they applied to. Admin or that user."""
    return {"user": user_model.get(username)}


@app.patch("/users/{username}", response_model=UserResponse, tags=["Users"], summary="Update user")
def update_user(
    username: str, payload: UserUpdate, _: Dict[str, Any] = Depends(ensure_correct_user_or_admin)
) -> Dict[str, Any]:
    """Update firstName, lastName, password and/or email. Admin or that user."""
    data = payload.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return {"user": user_model.update(username, data)}


@app.delete("/users/{username}", response_model=DeletedResponse, tags=["Users"], summary="Delete user")
def delete_user(username: str, _: Dict[str, Any] = Depends(ensure_correct_user_or_admin)) -> Dict[str, str]:
    user_model.remove(username)
    return {"deleted": username}


@app.post(
    "/users/{username}/jobs/{job_id}",
    response_model=AppliedResponse,
    tags=["Users"],
    summary="Apply to job",
)
def apply_to_job(
    username: str, job_id: int, _: Dict[str, Any] = Depends(ensure_correct_user_or_admin)
) -> Dict[str, int]:
    """Record that the user applied to a job. Admin or that user."""
    user_model.apply_to_job(username, job_id)
    return {"applied": job_id}
