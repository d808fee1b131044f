"""
Logging setup and authentication event logging.
"""
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request

logger = logging.getLogger(__name__)


ALLOWED_EVENT_TYPES = {
    "register",
    "login_success",
    "login_failure",
    "user_deleted",
}


def configure_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """Log to stdout, and to ``<log_dir>/story_service.log`` when a directory is given."""
    handlers = [logging.StreamHandler(sys.stdout)]

    # Continue with stdout only if the log directory is not usable
    if log_dir:
        try:
            os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(os.path.join(log_dir, "story_service.log")))
        except OSError as e:
            print(f"WARNING: Could not set up file logging: {e}", file=sys.stderr)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None:
        return None
    if request.client:
        return request.client.host
    # X-Forwarded-For can contain multiple IPs, take the first one
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return None


def log_auth_event(
    event_type: str,
    user_id: Optional[str],
    identifier: Optional[str],
    request: Optional[Request] = None,
) -> None:
    """
    Log an authentication event.

    Args:
        event_type: One of: register, login_success, login_failure, user_deleted
        user_id: Id of the affected user, if known
        identifier: Email or username the caller supplied
        request: FastAPI Request object, used for client IP and user agent

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    user_agent = request.headers.get("user-agent") if request is not None else None
    logger.info(
        "AUTH %s user_id=%s identifier=%s ip=%s user_agent=%s timestamp=%s",
        event_type, user_id, identifier, client_ip(request), user_agent,
        datetime.now(timezone.utc).isoformat(),
    )
