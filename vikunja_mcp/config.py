"""
Configuration for Vikunja MCP, read from the environment.

Variables:
    VIKUNJA_URL         Base URL of the Vikunja instance (required)
    VIKUNJA_TOKEN       API token sent as a bearer token (required)
    VIKUNJA_PROJECT_ID  Default project for listing and creating tasks
    VIKUNJA_TIMEOUT     Request timeout in seconds
    VIKUNJA_LOG_LEVEL   Logging level for the server process
"""

import os

from pydantic import BaseModel, Field, ValidationError, field_validator


def clean_base_url(url: str) -> str:
    """Strip whitespace, trailing slashes and an accidental '/api/v1' suffix."""
    if not url:
        return ""
    cleaned = url.strip().rstrip("/")
    if cleaned.endswith("/api/v1"):
        cleaned = cleaned[: -len("/api/v1")]
    return cleaned.rstrip("/")


def build_task_link(base_url: str, project_id: int | None, task_id: int | None) -> str:
    """Build the web UI link for a task, or an empty string if anything is missing."""
    cleaned = clean_base_url(base_url)
    if not cleaned or not project_id or not task_id:
        return ""
    return f"{cleaned}/projects/{project_id}/tasks/{task_id}"


class VikunjaConfig(BaseModel):
    """Connection settings for a Vikunja instance."""

    url: str = Field(..., min_length=1)
    token: str = Field(..., min_length=1)
    default_project_id: int = Field(default=1, ge=1)
    timeout: float = Field(default=30.0, gt=0)
    log_level: str = "WARNING"

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        cleaned = clean_base_url(v)
        if not cleaned.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return cleaned

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("API token cannot be empty")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.strip().upper() or "WARNING"

    @property
    def api_url(self) -> str:
        return f"{self.url}/api/v1"


def load_config() -> tuple[bool, VikunjaConfig | str]:
    """
    Load the configuration from environment variables.

    Returns:
        Tuple of (success: bool, config: VikunjaConfig | error: str)
    """
    url = os.environ.get("VIKUNJA_URL", "")
    token = os.environ.get("VIKUNJA_TOKEN", "")
    if not url or not token:
        return False, (
            "Error: Missing Vikunja configuration (URL or token).\n"
            "Tip: Set the VIKUNJA_URL and VIKUNJA_TOKEN environment variables."
        )

    values: dict[str, str] = {"url": url, "token": token}
    for key, env_name in (
        ("default_project_id", "VIKUNJA_PROJECT_ID"),
        ("timeout", "VIKUNJA_TIMEOUT"),
        ("log_level", "VIKUNJA_LOG_LEVEL"),
    ):
        if value := os.environ.get(env_name):
            values[key] = value

    try:
        return True, VikunjaConfig.model_validate(values)
    except ValidationError as e:
        errors = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
        return False, f"Error: Invalid Vikunja configuration - {errors}"
