"""
HTTP API.

Routes decode JSON into the wire models, call the services and map
outcomes and service errors to status codes. All routes live under /v1.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from storage.repositories import JobRepository, SkillRepository, UserRepository

from . import __version__
from .cleanup import cleanup_expired_jobs
from .database import get_session_factory, init_database
from .env import Settings
from .errors import JobBoardError, ValidationError
from .job_service import JobService, Outcome
from .logger import get_logger
from .models import JobOut, JobPayload, JobUrlRequest, SkillOut, SkillRequest, UserOut, UserRequest
from .skill_service import SkillService
from .user_service import UserService

logger = get_logger()

SERVICE_NAME = "jobboard"

OUTCOME_RESPONSES = {
    Outcome.CREATED: (201, "Job created successfully."),
    Outcome.UPDATED: (200, "Job already exists, updated with new information and extended expiration."),
    Outcome.UNCHANGED: (409, "Job already exists, unchanged."),
}


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _services(request: Request):
    return request.app.state


def build_router() -> APIRouter:
    router = APIRouter(prefix="/v1")

    @router.get("/health")
    def health() -> dict:
        return {"status": "healthy", "service": SERVICE_NAME}

    # Jobs

    @router.post("/jobs")
    def create_job(payload: JobPayload, request: Request):
        outcome = _services(request).jobs.create_or_update(payload.to_fields())
        logger.record_outcome("job", outcome.value)
        status_code, message = OUTCOME_RESPONSES[outcome]
        return _message(status_code, message)

    @router.get("/jobs")
    def list_jobs(request: Request):
        jobs = _services(request).jobs.find_all()
        logger.debug("Returned jobs", count=len(jobs))
        return [JobOut.model_validate(j).model_dump(mode="json", by_alias=True) for j in jobs]

    @router.put("/jobs")
    def update_job(payload: JobPayload, request: Request):
        _services(request).jobs.update_only_if_url_exists(payload.to_fields())
        logger.record_outcome("job", "replaced")
        return _message(200, "Job updated successfully")

    @router.delete("/jobs")
    def delete_job(payload: JobUrlRequest, request: Request):
        _services(request).jobs.delete_only_if_url_exists(payload.url)
        logger.record_outcome("job", "deleted")
        return _message(200, "Job deleted successfully")

    # Users

    @router.post("/users", status_code=201)
    def create_user(payload: UserRequest, request: Request):
        _services(request).users.create_user(payload.username, payload.password, payload.role)
        logger.record_outcome("user", "created")
        return _message(201, "User created successfully")

    @router.get("/users")
    def get_user(
        request: Request,
        id: Optional[str] = Query(default=None),
        username: Optional[str] = Query(default=None),
    ):
        users = _services(request).users
        if username:
            user = users.get_user_by_username(username)
        elif id:
            user = users.get_user_by_id(id)
        else:
            raise ValidationError("Either 'id' or 'username' query parameter is required")
        return UserOut.model_validate(user).model_dump(mode="json", by_alias=True)

    @router.put("/users")
    def update_user(payload: UserRequest, request: Request):
        user = _services(request).users.update_user(payload.username, payload.password, payload.role)
        logger.record_outcome("user", "updated")
        return UserOut.model_validate(user).model_dump(mode="json", by_alias=True)

    @router.delete("/users", status_code=204)
    def delete_user(request: Request, username: str = Query(default="")):
        _services(request).users.delete_user(username)
        logger.record_outcome("user", "deleted")
        return Response(status_code=204)

    # Skills

    @router.get("/skills")
    def get_skills(request: Request, username: str = Query(default="")):
        doc = _services(request).skills.get_all_skills(username)
        return SkillOut.model_validate(doc).model_dump(mode="json", by_alias=True)

    @router.post("/skills")
    def add_skill(payload: SkillRequest, request: Request):
        _services(request).skills.add_skill(payload.username, payload.skill)
        logger.record_outcome("skill", "added")
        return _message(201, "Skill added successfully")

    @router.put("/skills")
    def remove_skill(payload: SkillRequest, request: Request):
        _services(request).skills.remove_skill(payload.username, payload.skill)
        logger.record_outcome("skill", "removed")
        return _message(200, "Skill removed successfully")

    @router.delete("/skills")
    def delete_skills(request: Request, username: str = Query(default="")):
        _services(request).skills.delete_user_skills(username)
        logger.record_outcome("skill", "deleted")
        return _message(200, "User skills deleted successfully")

    return router


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def invalid_payload(request: Request, exc: RequestValidationError):
        logger.warning("Invalid payload", path=request.url.path, errors=str(exc.errors()))
        logger.record_error("InvalidPayload")
        return JSONResponse(status_code=400, content={"error": "Invalid payload"})

    @app.exception_handler(JobBoardError)
    async def service_error(request: Request, exc: JobBoardError):
        logger.record_error(type(exc).__name__)
        content = {"error": str(exc)}
        if isinstance(exc, ValidationError) and len(exc.errors) > 1:
            content["details"] = exc.errors
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(SQLAlchemyError)
    async def database_error(request: Request, exc: SQLAlchemyError):
        logger.error("Database error", path=request.url.path, error=str(exc))
        logger.record_error(type(exc).__name__)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.critical("Unhandled error", path=request.url.path, error_type=type(exc).__name__)
        logger.record_error(type(exc).__name__)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    settings: Optional[Settings] = None,
    session_factory: Optional[sessionmaker] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Runtime settings; read from the environment when omitted
        session_factory: Pre-built sessionmaker; when omitted the database
            from settings is initialized (fails if it never answers)
    """
    settings = settings or Settings()
    if session_factory is None:
        engine = init_database(
            settings.database_url,
            timeout=settings.db_timeout,
            retries=settings.db_connect_retries,
        )
        session_factory = get_session_factory(engine)

    job_repo = JobRepository(session_factory)
    user_repo = UserRepository(session_factory)
    skill_repo = SkillRepository(session_factory)
    for repo in (job_repo, user_repo, skill_repo):
        repo.ensure_indexes()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cleanup_expired_jobs(job_repo)
        logger.info("Server ready", version=__version__)
        try:
            yield
        finally:
            logger.log_metrics_summary()
            logger.info("Application stopped")

    app = FastAPI(title="Job Board API", version=__version__, lifespan=lifespan)
    app.state.jobs = JobService(job_repo)
    app.state.users = UserService(user_repo)
    app.state.skills = SkillService(skill_repo)

    @app.middleware("http")
    async def request_metrics(request: Request, call_next):
        response = await call_next(request)
        logger.record_request(request.method, response.status_code)
        logger.debug(f"{request.method} {request.url.path} -> {response.status_code}")
        return response

    install_error_handlers(app)
    app.include_router(build_router())
    return app
