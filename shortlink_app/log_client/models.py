"""
Log event model and the vocabularies accepted by the remote log service.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from shortlink_app.utils.clock import utc_now

VALID_STACKS = ("backend", "frontend")

VALID_LEVELS = ("debug", "info", "warn", "error", "fatal")

BACKEND_PACKAGES = (
    "cache", "controller", "cron_job", "db", "domain",
    "handler", "repository", "route", "service",
)

FRONTEND_PACKAGES = (
    "api", "component", "hook", "page", "state", "style",
)

SHARED_PACKAGES = (
    "auth", "config", "middleware", "utils",
)

ALL_PACKAGES = BACKEND_PACKAGES + FRONTEND_PACKAGES + SHARED_PACKAGES


class LogValidationError(ValueError):
    """Raised when a log call uses a stack, level or package the service rejects"""


def validate_log_params(stack: str, level: str, package: str, message: str) -> None:
    """
    Check a log call against the remote service's vocabularies.

    Matching is case-insensitive. Backend stacks cannot use frontend-only
    packages and vice versa.

    Raises:
        LogValidationError: On the first rule that fails
    """
    stack = (stack or "").lower()
    level = (level or "").lower()
    package = (package or "").lower()

    if stack not in VALID_STACKS:
        raise LogValidationError(f"Invalid stack: {stack}. Must be one of: {', '.join(VALID_STACKS)}")

    if level not in VALID_LEVELS:
        raise LogValidationError(f"Invalid level: {level}. Must be one of: {', '.join(VALID_LEVELS)}")

    if package not in ALL_PACKAGES:
        raise LogValidationError(f"Invalid package: {package}. Must be one of: {', '.join(ALL_PACKAGES)}")

    if stack == "backend" and package in FRONTEND_PACKAGES:
        raise LogValidationError(f"Package '{package}' can only be used in frontend applications")

    if stack == "frontend" and package in BACKEND_PACKAGES:
        raise LogValidationError(f"Package '{package}' can only be used in backend applications")

    if not isinstance(message, str) or not message.strip():
        raise LogValidationError("Message must be a non-empty string")


class LogEvent(BaseModel):
    """
    A validated log entry waiting for delivery.

    Published to the log queue by AppLogger and consumed by LogWorker.
    """

    stack: str = Field(..., description="backend or frontend")
    level: str = Field(..., description="debug, info, warn, error or fatal")
    package: str = Field(..., description="Emitting package, e.g. handler")
    message: str
    created_at: datetime = Field(default_factory=utc_now)

    # Set by queue backends that need acknowledgment (Redis Streams)
    message_id: Optional[str] = Field(None, exclude=True)

    def to_payload(self) -> dict:
        """Request body expected by the remote log endpoint"""
        return {
            "stack": self.stack,
            "level": self.level,
            "package": self.package,
            "message": self.message,
        }

    def console_line(self) -> str:
        return f"[{self.level.upper()}] {self.package}: {self.message}"

    @classmethod
    def build(cls, stack: str, level: str, package: str, message: str) -> "LogEvent":
        """Validate and normalize (lower-case names, stripped message)"""
        validate_log_params(stack, level, package, message)
        return cls(
            stack=stack.lower(),
            level=level.lower(),
            package=package.lower(),
            message=message.strip(),
        )
