"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the School Management API.
Controllers are intentionally thin: they accept requests, delegate to
services, and turn the returned `ServiceResult` into a JSON response.

Endpoints implemented (all under /api/v1):
- GET/POST /students
- GET/PUT/PATCH/DELETE /students/{student_id}
- GET/POST /classes
- GET/PUT/PATCH/DELETE /classes/{class_id}
- POST /classes/{class_id}/students (deprecated)
- DELETE /classes/{class_id}/students/{student_id} (deprecated)
- GET /health, /health/live, /health/ready
"""

import json
import logging
import time
import uuid
from typing import List, Optional

from fastapi import FastAPI, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlalchemy import text
from sqlmodel import Session

from . import constants, services
from .config import settings
from .database import engine, create_db_and_tables, get_session
from .results import ResultStatus, ServiceResult
from .schemas import (
    AddStudentToClassIn,
    MessageOut,
    SchoolClassCreate,
    SchoolClassOut,
    SchoolClassPatch,
    SchoolClassUpdate,
    StudentCreate,
    StudentOut,
    StudentPatch,
    StudentUpdate,
)

API_PREFIX = "/api/v1"

app = FastAPI(
    title="School Management API",
    version="1.0",
    description="RESTful API for managing students and school classes",
)
logger = logging.getLogger("school_api.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()

_FAILURES = {
    404: {"model": MessageOut},
    400: {"model": MessageOut},
}


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.error(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    if request.url.path.startswith(API_PREFIX):
        logger.info(
            "request_done %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "status_code": response.status_code,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log any fault the services did not anticipate and answer 500."""
    req_id = getattr(request.state, "request_id", None)
    logger.exception("unhandled error request_id=%s on %s %s", req_id, request.method, request.url.path, exc_info=exc)
    body = {"message": constants.INTERNAL_ERROR, "request_id": req_id}
    if settings.EXPOSE_ERROR_DETAILS:
        body["error_type"] = type(exc).__name__
    return JSONResponse(status_code=500, content=body)


def _to_response(result: ServiceResult, location: Optional[str] = None, wrap_message: bool = False):
    """Translate a `ServiceResult` into a JSON response.

    Failures always produce `{"message": ...}`. With `wrap_message` a
    successful string result is wrapped the same way.
    """
    if not result.is_success:
        return JSONResponse(status_code=result.http_status, content={"message": result.message})
    content = {"message": result.data} if wrap_message else jsonable_encoder(result.data)
    headers = {"Location": location} if location and result.status == ResultStatus.CREATED else None
    return JSONResponse(status_code=result.http_status, content=content, headers=headers)


# --- Students

@app.get(f"{API_PREFIX}/students", response_model=List[StudentOut], tags=["Students"])
def list_students(db: Session = Depends(get_session)):
    """List every student with the name of its class."""
    return services.StudentService(db).list_students()


@app.get(f"{API_PREFIX}/students/{{student_id}}", response_model=StudentOut, responses=_FAILURES, tags=["Students"])
def get_student(student_id: str, db: Session = Depends(get_session)):
    return _to_response(services.StudentService(db).get_student(student_id))


@app.post(
    f"{API_PREFIX}/students",
    response_model=StudentOut,
    status_code=201,
    responses={**_FAILURES, 409: {"model": MessageOut}},
    tags=["Students"],
)
def create_student(payload: StudentCreate, db: Session = Depends(get_session)):
    result = services.StudentService(db).create_student(payload)
    location = f"{API_PREFIX}/students/{result.data.student_id}" if result.is_success else None
    return _to_response(result, location=location)


@app.put(f"{API_PREFIX}/students/{{student_id}}", response_model=StudentOut, responses=_FAILURES, tags=["Students"])
def update_student(student_id: str, payload: StudentUpdate, db: Session = Depends(get_session)):
    return _to_response(services.StudentService(db).update_student(student_id, payload))


@app.patch(f"{API_PREFIX}/students/{{student_id}}", response_model=StudentOut, responses=_FAILURES, tags=["Students"])
def patch_student(student_id: str, payload: StudentPatch, db: Session = Depends(get_session)):
    """Partially update a student.

    Send `school_class_id` to assign the student to a class, or `null`/`0`
    to unassign it.
    """
    return _to_response(services.StudentService(db).patch_student(student_id, payload))


@app.delete(f"{API_PREFIX}/students/{{student_id}}", response_model=MessageOut, responses=_FAILURES, tags=["Students"])
def delete_student(student_id: str, db: Session = Depends(get_session)):
    return _to_response(services.StudentService(db).delete_student(student_id), wrap_message=True)


# --- Classes

@app.get(f"{API_PREFIX}/classes", response_model=List[SchoolClassOut], tags=["Classes"])
def list_classes(db: Session = Depends(get_session)):
    return services.SchoolClassService(db).list_classes()


@app.get(f"{API_PREFIX}/classes/{{class_id}}", response_model=SchoolClassOut, responses=_FAILURES, tags=["Classes"])
def get_class(class_id: int, db: Session = Depends(get_session)):
    """Return a class together with its members."""
    return _to_response(services.SchoolClassService(db).get_class(class_id))


@app.post(f"{API_PREFIX}/classes", response_model=SchoolClassOut, status_code=201, responses=_FAILURES, tags=["Classes"])
def create_class(payload: SchoolClassCreate, db: Session = Depends(get_session)):
    result = services.SchoolClassService(db).create_class(payload)
    location = f"{API_PREFIX}/classes/{result.data.id}" if result.is_success else None
    return _to_response(result, location=location)


@app.put(f"{API_PREFIX}/classes/{{class_id}}", response_model=SchoolClassOut, responses=_FAILURES, tags=["Classes"])
def update_class(class_id: int, payload: SchoolClassUpdate, db: Session = Depends(get_session)):
    return _to_response(services.SchoolClassService(db).update_class(class_id, payload))


@app.patch(f"{API_PREFIX}/classes/{{class_id}}", response_model=SchoolClassOut, responses=_FAILURES, tags=["Classes"])
def patch_class(class_id: int, payload: SchoolClassPatch, db: Session = Depends(get_session)):
    """Partially update a class (name or teacher)."""
    return _to_response(services.SchoolClassService(db).patch_class(class_id, payload))


@app.delete(f"{API_PREFIX}/classes/{{class_id}}", response_model=MessageOut, responses=_FAILURES, tags=["Classes"])
def delete_class(class_id: int, db: Session = Depends(get_session)):
    """Delete a class; its students stay and become unassigned."""
    return _to_response(services.SchoolClassService(db).delete_class(class_id), wrap_message=True)


@app.post(
    f"{API_PREFIX}/classes/{{class_id}}/students",
    response_model=MessageOut,
    responses=_FAILURES,
    tags=["Classes"],
    deprecated=True,
)
def add_student_to_class(class_id: int, payload: AddStudentToClassIn, db: Session = Depends(get_session)):
    """Deprecated: PATCH /students/{id} with `school_class_id` instead."""
    result = services.SchoolClassService(db).add_student_to_class(class_id, payload.student_id)
    return _to_response(result, wrap_message=True)


@app.delete(
    f"{API_PREFIX}/classes/{{class_id}}/students/{{student_id}}",
    response_model=MessageOut,
    responses=_FAILURES,
    tags=["Classes"],
    deprecated=True,
)
def remove_student_from_class(class_id: int, student_id: str, db: Session = Depends(get_session)):
    """Deprecated: PATCH /students/{id} with `school_class_id: null` instead."""
    result = services.SchoolClassService(db).remove_student_from_class(class_id, student_id)
    return _to_response(result, wrap_message=True)


# --- Health

def _check_database() -> dict:
    started = time.perf_counter()
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        status, description = "Healthy", "Database reachable"
    except Exception as exc:
        logger.warning("database health check failed: %s", exc)
        status, description = "Unhealthy", type(exc).__name__
    return {
        "name": "database",
        "status": status,
        "description": description,
        "duration": round((time.perf_counter() - started) * 1000.0, 2),
    }


def _run_checks() -> List[dict]:
    return [
        {"name": "self", "status": "Healthy", "description": "API is running", "duration": 0.0},
        _check_database(),
    ]


def _overall(checks: List[dict]) -> str:
    return "Healthy" if all(c["status"] == "Healthy" for c in checks) else "Unhealthy"


@app.get("/health", tags=["Health"])
def health():
    """Full health report for monitoring."""
    started = time.perf_counter()
    checks = _run_checks()
    status = _overall(checks)
    body = {
        "status": status,
        "checks": checks,
        "totalDuration": round((time.perf_counter() - started) * 1000.0, 2),
    }
    return JSONResponse(status_code=200 if status == "Healthy" else 503, content=body)


@app.get("/health/live", tags=["Health"])
def health_live():
    """Liveness probe; does not touch dependencies."""
    return {"status": "Healthy"}


@app.get("/health/ready", tags=["Health"])
def health_ready():
    """Readiness probe; fails while the database is unreachable."""
    status = _overall(_run_checks())
    return JSONResponse(status_code=200 if status == "Healthy" else 503, content={"status": status})
