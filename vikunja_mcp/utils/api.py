"""HTTP utilities for Vikunja REST API interaction."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from vikunja_mcp.config import VikunjaConfig, load_config
from vikunja_mcp.models.task import TaskModel
from vikunja_mcp.utils.parsers import _parse_tasks

logger = logging.getLogger("vikunja_mcp.api")

PER_PAGE = 250
MAX_PAGES = 50


def _api_request(
    method: str,
    endpoint: str,
    payload: dict[str, Any] | None = None,
    params: dict[str, Any] | None = None,
    config: VikunjaConfig | None = None,
) -> tuple[bool, Any]:
    """
    Execute a Vikunja API request and return the decoded result.

    Args:
        method: HTTP method (GET, PUT, POST, DELETE)
        endpoint: Path below /api/v1, e.g. '/tasks/5'
        payload: Optional JSON body
        params: Optional query parameters
        config: Connection settings, loaded from the environment if omitted

    Returns:
        Tuple of (success: bool, data | error: str). A 204 response yields None.
    """
    success, data, _ = _api_request_with_headers(method, endpoint, payload, params, config)
    return success, data


def _api_request_with_headers(
    method: str,
    endpoint: str,
    payload: dict[str, Any] | None = None,
    params: dict[str, Any] | None = None,
    config: VikunjaConfig | None = None,
) -> tuple[bool, Any, httpx.Headers]:
    """Same as _api_request, also returning the response headers (for pagination)."""
    empty = httpx.Headers()
    if config is None:
        ok, loaded = load_config()
        if not ok:
            return False, loaded, empty
        config = loaded

    path = endpoint if endpoint.startswith("/") else f"/{endpoint}"
    url = f"{config.api_url}{path}"

    headers = {"Authorization": f"Bearer {config.token}"}
    # Strict servers reject a Content-Type on body-less requests
    if method not in ("GET", "HEAD"):
        headers["Content-Type"] = "application/json"

    logger.debug("%s %s params=%s", method, url, params)

    try:
        response = httpx.request(
            method,
            url,
            headers=headers,
            json=payload,
            params=params,
            timeout=config.timeout,
        )
    except httpx.TimeoutException:
        logger.warning("%s %s timed out after %ss", method, url, config.timeout)
        return False, f"Error: Request timed out after {config.timeout:g} seconds", empty
    except httpx.RequestError as e:
        logger.warning("%s %s failed: %s", method, url, e)
        return False, (
            f"Error: Could not connect to Vikunja at {config.url} - {e}\n"
            "Tip: Check VIKUNJA_URL and that the server is reachable."
        ), empty

    logger.debug("%s %s -> %s", method, url, response.status_code)

    if not response.is_success:
        error_text = response.text.strip() or "No error text returned"
        logger.warning("%s %s -> %s: %s", method, url, response.status_code, error_text)
        if response.status_code == 401:
            return False, (
                f"Error: Authentication failed (401). Check your API token. Server said: {error_text}"
            ), response.headers
        if response.status_code == 404:
            return False, (
                f"Error: Not found (404). Check the server URL and the requested ID. Server said: {error_text}"
            ), response.headers
        return False, f"Error: Vikunja API error ({response.status_code}): {error_text}", response.headers

    if response.status_code == 204 or not response.content:
        return True, None, response.headers

    try:
        return True, response.json(), response.headers
    except ValueError as e:
        return False, f"Error: Failed to parse Vikunja response - {str(e)}", response.headers


def _unwrap_results(data: Any) -> list[dict[str, Any]]:
    """Accept either a bare JSON list or a {'results': [...]} envelope."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        results = data.get("results")
        if isinstance(results, list):
            return results
    return []


def _get_project_tasks(
    project_id: int | None = None,
    config: VikunjaConfig | None = None,
) -> tuple[bool, list[dict[str, Any]] | str]:
    """
    Get all tasks of a project, following Vikunja's pagination.

    Args:
        project_id: Project to read, defaults to the configured project
        config: Connection settings, loaded from the environment if omitted

    Returns:
        Tuple of (success: bool, tasks: List[dict] | error: str)
    """
    if config is None:
        ok, loaded = load_config()
        if not ok:
            return False, loaded
        config = loaded

    project = project_id or config.default_project_id
    tasks: list[dict[str, Any]] = []

    page = 1
    while page <= MAX_PAGES:
        success, data, headers = _api_request_with_headers(
            "GET",
            f"/projects/{project}/tasks",
            params={"page": page, "per_page": PER_PAGE},
            config=config,
        )
        if not success:
            return False, data

        batch = _unwrap_results(data)
        tasks.extend(batch)

        try:
            total_pages = int(headers.get("x-pagination-total-pages", "1"))
        except ValueError:
            total_pages = 1

        if page >= total_pages or not batch:
            break
        page += 1

    return True, tasks


def _get_task(task_id: int, config: VikunjaConfig | None = None) -> tuple[bool, dict[str, Any] | str]:
    """Get a single raw task by ID."""
    success, data = _api_request("GET", f"/tasks/{task_id}", config=config)
    if not success:
        return False, data
    if not isinstance(data, dict):
        return False, f"Error: Unexpected response for task {task_id}"
    return True, data


def _get_projects(config: VikunjaConfig | None = None) -> tuple[bool, list[dict[str, Any]] | str]:
    """Get all projects visible to the token."""
    success, data = _api_request("GET", "/projects", config=config)
    if not success:
        return False, data
    return True, _unwrap_results(data)


def _get_users(search: str | None = None, config: VikunjaConfig | None = None) -> tuple[bool, list[dict[str, Any]] | str]:
    """Get users visible to the token, narrowed by a search term if given."""
    params = {"s": search} if search else None
    success, data = _api_request("GET", "/users", params=params, config=config)
    if not success:
        return False, data
    return True, _unwrap_results(data)


def _fetch_tasks(
    project_id: int | None = None,
    config: VikunjaConfig | None = None,
) -> tuple[bool, list[TaskModel] | str]:
    """
    Get a parsed snapshot of a project's tasks.

    Returns:
        Tuple of (success: bool, tasks: List[TaskModel] | error: str)
    """
    success, result = _get_project_tasks(project_id, config)
    if not success:
        return False, str(result)

    raw_tasks = result if isinstance(result, list) else []
    try:
        return True, _parse_tasks(raw_tasks)
    except (ValidationError, KeyError) as e:
        return False, f"Error: Vikunja returned an invalid task - {e}"
