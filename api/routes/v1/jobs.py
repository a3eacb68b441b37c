"""
Job posting management endpoints.

Reads are public; creating, updating and deleting jobs requires an admin token.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request

from api.dependencies import get_query_executor, require_admin_user
from api.schemas.jobs import (
    INT4_MAX,
    DeletedResponse,
    JobCreate,
    JobEnvelope,
    JobListEnvelope,
    JobUpdate,
)
from api.services import jobs as job_service
from core.config import settings
from core.security import AuditAction, JWTPayload, log_audit_event
from database.executor import QueryExecutor

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post(
    "",
    response_model=JobEnvelope,
    summary="Create Job",
    description="Create a job posting. Requires an admin token.",
)
async def create_job(
    job: JobCreate,
    request: Request,
    executor: QueryExecutor = Depends(get_query_executor),
    current_user: JWTPayload = Depends(require_admin_user),
):
    """Create a job; a job with the same title at the same company is rejected."""
    created = await job_service.create_job(executor, **job.model_dump())
    log_audit_event(
        AuditAction.CREATE,
        resource_id=created["id"],
        username=current_user.get("username"),
        request_id=getattr(request.state, "request_id", None),
    )
    return {"job": created}


@router.get(
    "",
    response_model=JobListEnvelope,
    summary="List Jobs",
    description="List job postings, optionally filtered by title, minimum salary and equity.",
)
async def list_jobs(
    title: Optional[str] = Query(None, min_length=1, description="Case-insensitive title substring"),
    min_salary: Optional[int] = Query(None, alias="minSalary", ge=0, le=INT4_MAX, description="Salary strictly above"),
    has_equity: Optional[bool] = Query(None, alias="hasEquity", description="Only jobs with equity > 0"),
    executor: QueryExecutor = Depends(get_query_executor),
):
    """Retrieve job postings matching every supplied filter."""
    jobs = await job_service.find_all(
        executor,
        title,
        min_salary,
        has_equity,
        raise_on_empty=settings.jobs_no_match_is_error,
    )
    return {"jobs": jobs}


@router.get(
    "/{job_id}",
    response_model=JobEnvelope,
    summary="Get Job Details",
)
async def get_job(
    job_id: int = Path(..., le=INT4_MAX, description="Job ID"),
    executor: QueryExecutor = Depends(get_query_executor),
):
    """Retrieve one job posting."""
    return {"job": await job_service.get_job(executor, job_id)}


@router.patch(
    "/{job_id}",
    response_model=JobEnvelope,
    summary="Update Job",
    description="Partially update a job posting. Requires an admin token.",
)
async def update_job(
    update: JobUpdate,
    request: Request,
    job_id: int = Path(..., le=INT4_MAX, description="Job ID"),
    executor: QueryExecutor = Depends(get_query_executor),
    current_user: JWTPayload = Depends(require_admin_user),
):
    """Update the supplied fields of a job; omitted fields keep their values."""
    data = update.model_dump(exclude_unset=True)
    updated = await job_service.update_job(executor, job_id, data)
    log_audit_event(
        AuditAction.UPDATE,
        resource_id=job_id,
        username=current_user.get("username"),
        request_id=getattr(request.state, "request_id", None),
        details={"fields": list(data)},
    )
    return {"job": updated}


@router.delete(
    "/{job_id}",
    response_model=DeletedResponse,
    summary="Delete Job",
    description="Delete a job posting. Requires an admin token.",
)
async def delete_job(
    request: Request,
    job_id: int = Path(..., le=INT4_MAX, description="Job ID"),
    executor: QueryExecutor = Depends(get_query_executor),
    current_user: JWTPayload = Depends(require_admin_user),
):
    """Delete a job posting."""
    await job_service.delete_job(executor, job_id)
    log_audit_event(
        AuditAction.DELETE,
        resource_id=job_id,
        username=current_user.get("username"),
        request_id=getattr(request.state, "request_id", None),
    )
    return {"deleted": f"Deleted job with id: {job_id}"}
