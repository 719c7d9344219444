import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.errors import PreconditionFailed, StudioError, ValidationFailed
from app.db.init_db import init_db
from app.api.routes import auth
from app.api.routes import users as users_router
from app.api.routes import admin as admin_router
from app.api.routes import admin_dashboard as admin_dashboard_router
from app.api.routes import technicians as technicians_router
from app.api.routes import availability as availability_router
from app.api.routes import appointments as appointments_router
from app.api.routes import review as review_router
from app.api.routes import loyalty as loyalty_router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(title="Nail Studio Booking API")

@app.on_event("startup")
def startup():
    init_db()


@app.exception_handler(StudioError)
async def studio_error_handler(request: Request, exc: StudioError):
    body = {"detail": exc.detail, "error": exc.code}
    if isinstance(exc, ValidationFailed) and exc.field:
        body["field"] = exc.field
    if isinstance(exc, PreconditionFailed):
        body["remediation"] = exc.remediation
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Store failure on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Something went wrong, please try again.", "error": "store_unavailable"},
    )


@app.get("/")
def root():
    return {"message": f"{settings.studio_name} booking API running"}


app.include_router(auth.router, prefix="/api/auth")
app.include_router(users_router.router)
app.include_router(admin_router.router)
app.include_router(admin_dashboard_router.router)
app.include_router(technicians_router.router)
app.include_router(availability_router.router)
app.include_router(appointments_router.router)
app.include_router(review_router.router)
app.include_router(loyalty_router.router)
