"""
Cross-origin and rate-limit setup

The collection web app runs on its own origin (CORS_ORIGINS). Routes opt
into per-client-IP limits with `@limiter.limit(...)`; photo icons get the
tightest limit because they decode images.
"""
import logging
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi.middleware.cors import CORSMiddleware

from monocollector.config import CORS_ORIGINS

logger = logging.getLogger(__name__)

# Per-client-IP limiter shared by all routes
limiter = Limiter(key_func=get_remote_address)


def setup_cors(app):
    """Allow the configured web app origins to call the API"""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    logger.info(f"CORS configured for origins: {CORS_ORIGINS}")


def setup_rate_limiting(app):
    """Attach the shared limiter and its 429 handler"""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    logger.info("Rate limiting configured")
