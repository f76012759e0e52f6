from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pawsi.api.v1.router import api_router
from pawsi.core.config import settings
from pawsi.core.errors import LifecycleError
from pawsi.core.logging import configure_logging
from pawsi.core.operators import get_operator_policy
from pawsi.db.init_db import init_db
from pawsi.services.dispatch import reset_dispatcher

configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Fail at startup on a malformed OPERATOR_EMAILS rather than on first use.
    get_operator_policy()
    init_db()
    yield
    reset_dispatcher(wait=True)

app = FastAPI(title=settings.PROJECT_NAME, debug=settings.DEBUG, lifespan=lifespan)

allow_origins = settings.CORS_ORIGINS
allow_credentials = '*' not in allow_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=allow_credentials,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.exception_handler(LifecycleError)
async def lifecycle_error_handler(request: Request, exc: LifecycleError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error('http.dependency_error', path=request.url.path, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content={'detail': exc.detail})


app.include_router(api_router)
