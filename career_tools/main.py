import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from career_tools.api.v1.health import router as health_router
from career_tools.api.v1.tools import router as tools_router
from career_tools.core.cors import cors_allow_origin_regex, cors_allowed_origins
from career_tools.core.rate_limit import limiter
from career_tools.core.config import settings
from career_tools.core.lifespan import lifespan

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    # Request bodies carry resumes and job descriptions; never attach them to events.
    sentry_sdk.init(dsn=settings.sentry_dsn, send_default_pii=False, max_request_body_size="never")

app = FastAPI(title="Career Tools API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_origin_regex=cors_allow_origin_regex(),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset", "Retry-After"],
    max_age=86400,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/api", tags=["Health"])
app.include_router(tools_router, prefix="/api", tags=["Career Tools"])
