# ───────────────────────────────────────────────────────────────
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# ─── Local imports ─────────────────────────────────────────────
from coursework.config.settings import CORS_ORIGINS, LOG_LEVEL
from coursework.db.session import create_db_and_tables
from coursework.routers import (
    auth_router, class_router, teacher_assignment_router, teacher_question_router,
    student_submission_router, grading_router,
)
from coursework.utils.errors import CourseworkError, ErrorKind

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# ─── FastAPI app ───────────────────────────────────────────────
app = FastAPI(
    title="Coursework API",
    description="Assignments, submissions and grading for teachers and students",
    version="1.0.0",
)

# ─── Middlewares ───────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─── Error mapping ─────────────────────────────────────────────
ERROR_STATUS = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorKind.INVALID_STATE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DEADLINE_EXCEEDED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
}

@app.exception_handler(CourseworkError)
async def coursework_error_handler(request: Request, exc: CourseworkError):
    status_code = ERROR_STATUS.get(exc.kind, status.HTTP_400_BAD_REQUEST)
    logger.info(f"{request.method} {request.url.path} -> {status_code} ({exc.kind.value}: {exc.message})")
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "kind": exc.kind.value})

# ─── Startup ───────────────────────────────────────────────────
@app.on_event("startup")
async def on_startup():
    logger.info("Creating database and tables...")
    try:
        create_db_and_tables()
    except Exception as e:
        logger.error(f"Failed to create database and tables: {e}", exc_info=True)
        raise

# ─── Routers ───────────────────────────────────────────────────
app.include_router(auth_router.router, prefix="/api/auth")
app.include_router(class_router.router, prefix="/api/teacher/classes")
app.include_router(teacher_assignment_router.router, prefix="/api/teacher/assignments")
app.include_router(teacher_question_router.router, prefix="/api/teacher/questions")
app.include_router(grading_router.router, prefix="/api/teacher/grading")
app.include_router(student_submission_router.router, prefix="/api/student/submissions")

# ─── Simple endpoints ──────────────────────────────────────────
@app.get("/")
async def root():
    return {
        "message": "Welcome to the Coursework API",
        "docs_url": "/docs",
        "redoc_url": "/redoc",
    }

@app.get("/health")
async def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
