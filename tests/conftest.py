"""Pytest configuration and fixtures for vikunja-mcp tests."""

import pytest


@pytest.fixture(autouse=True)
def vikunja_env(monkeypatch):
    """Point every test at a fake Vikunja instance."""
    monkeypatch.setenv("VIKUNJA_URL", "https://vikunja.example.com")
    monkeypatch.setenv("VIKUNJA_TOKEN", "test-token")
    monkeypatch.setenv("VIKUNJA_PROJECT_ID", "1")
    monkeypatch.delenv("VIKUNJA_TIMEOUT", raising=False)
    monkeypatch.delenv("VIKUNJA_LOG_LEVEL", raising=False)


@pytest.fixture
def sample_raw_tasks():
    """
    A project snapshot as returned by GET /projects/1/tasks.

    #2 is overdue and blocks #3, #4 is done. Ranking: #2, #1, #3, then #4.
    """
    return [
        {
            "id": 1,
            "title": "Write report",
            "description": "Quarterly numbers",
            "done": False,
            "priority": 2,
            "due_date": "0001-01-01T00:00:00Z",
            "start_date": "0001-01-01T00:00:00Z",
            "project_id": 1,
            "labels": [{"id": 1, "title": "writing"}],
            "related_tasks": {},
        },
        {
            "id": 2,
            "title": "Fix login bug",
            "description": "",
            "done": False,
            "priority": 4,
            "due_date": "2000-01-01T00:00:00Z",
            "project_id": 1,
            "labels": None,
            "related_tasks": {"blocking": [{"id": 3, "title": "Release v2"}]},
        },
        {
            "id": 3,
            "title": "Release v2",
            "description": "",
            "done": False,
            "priority": 3,
            "project_id": 1,
            "related_tasks": {"blocked": [{"id": 2, "title": "Fix login bug"}]},
        },
        {
            "id": 4,
            "title": "Old chore",
            "description": "",
            "done": True,
            "priority": 1,
            "project_id": 1,
            "related_tasks": None,
        },
    ]


@pytest.fixture
def sample_raw_projects():
    """Projects as returned by GET /projects."""
    return [
        {"id": 1, "title": "Inbox", "description": "", "is_archived": False},
        {"id": 2, "title": "Backlog", "description": "Later", "is_archived": False},
        {"id": 3, "title": "2023", "description": "", "is_archived": True},
    ]
