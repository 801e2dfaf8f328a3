"""API middleware for rate limiting and CORS"""
import logging
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi.middleware.cors import CORSMiddleware

from src.config import CORS_ORIGINS, RATE_LIMIT_ENABLED

logger = logging.getLogger(__name__)

# AI calls are expensive
AI_RATE_LIMIT = "10/minute"
DEFAULT_RATE_LIMIT = "30/minute"

# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)


def setup_cors(app):
    """Configure CORS middleware"""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    logger.info(f"CORS configured for origins: {CORS_ORIGINS}")


def setup_rate_limiting(app):
    """Configure rate limiting"""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    if limiter.enabled:
        logger.info(f"Rate limiting configured: {AI_RATE_LIMIT} for AI routes, {DEFAULT_RATE_LIMIT} otherwise")
    else:
        logger.info("Rate limiting disabled (RATE_LIMIT_ENABLED=false)")
