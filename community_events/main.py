import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from community_events.db.init_db import create_database, create_tables
from community_events.core.config import settings
from community_events.core.logging import configure_logging
from community_events.domain.errors import DomainError
from community_events.schemas.common import ErrorResponse
from community_events.api.v1.router import api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)

    if settings.CREATE_LOCAL_DATABASE:
        create_database()
        create_tables()
    logger.info("%s started", settings.PROJECT_NAME)
    yield


from fastapi.middleware.cors import CORSMiddleware

app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error=exc.code.value, message=exc.message).model_dump(),
    )


@app.get("/")
def read_root():
    return {"Hello": "Community Events"}
