# tests/conftest.py
import copy
import pytest

from saas_architect.schemas import GenerateRequest

SAMPLE_BLUEPRINT = {
    "project_summary": "A habit tracker for remote teams with weekly check-ins.",
    "mvp_features": ["Sign up and login", "Create habits", "Weekly check-in reminders"],
    "future_features": ["Slack integration", "Mobile app"],
    "roles": [
        {"name": "Admin", "description": "Manages the workspace", "permissions": ["create", "read", "update", "delete"]},
        {"name": "Member", "description": "Tracks habits", "permissions": ["read", "update"]},
    ],
    "database_schema": [
        {
            "table_name": "habits",
            "columns": [
                {"name": "id", "type": "UUID PRIMARY KEY", "description": "Habit id"},
                {"name": "title", "type": "VARCHAR(255)", "description": "Habit title"},
            ],
        }
    ],
    "folder_structure": {"frontend": ["src/", "├── app/"], "backend": ["src/", "├── habits/"]},
}

IDEA = "A habit tracking tool that helps remote teams build healthy routines together"


@pytest.fixture
def sample_blueprint():
    return copy.deepcopy(SAMPLE_BLUEPRINT)


@pytest.fixture
def make_request():
    def _make(**overrides):
        payload = {
            "idea": IDEA,
            "roles": ["Admin", "Member"],
            "monetization": "subscription",
            "tenantType": "multi",
            "techStack": ["Next.js", "PostgreSQL"],
        }
        payload.update(overrides)
        return GenerateRequest(**payload)
    return _make
