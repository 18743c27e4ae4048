import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from lms.core.config import LOG_LEVEL
from lms.core.logging_middleware import LoggingMiddleware
from lms.db.init_db import init_db
from lms.routers.assignments import router as assignments_router
from lms.routers.auth import router as auth_router
from lms.routers.courses import router as courses_router
from lms.routers.dashboard import router as dashboard_router
from lms.routers.enrollments import router as enrollments_router
from lms.routers.lessons import router as lessons_router
from lms.routers.progress import router as progress_router
from lms.routers.submissions import router as submissions_router
from lms.routers.subscriptions import router as subscriptions_router
from lms.routers.users import router as users_router

logging.basicConfig(level=LOG_LEVEL)

logger = logging.getLogger(__name__)

app = FastAPI(title="Course Hub LMS")

# Middleware
app.add_middleware(LoggingMiddleware)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(users_router, prefix="/users", tags=["users"])
app.include_router(courses_router, prefix="/courses", tags=["courses"])
app.include_router(lessons_router, tags=["lessons"])
app.include_router(enrollments_router, prefix="/enrollments", tags=["enrollments"])
app.include_router(assignments_router, tags=["assignments"])
app.include_router(submissions_router, tags=["submissions"])
app.include_router(progress_router, tags=["progress"])
app.include_router(subscriptions_router, tags=["subscriptions"])
app.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
