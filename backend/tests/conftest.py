"""Shared test fixtures."""

import pytest

from config import settings

SAMPLE_RESUME = """Jane Doe
jane.doe@example.com | (555) 123-4567

SUMMARY
QA engineer focused on test automation and release quality.

EXPERIENCE
QA Lead, Acme Corp
Jan 2020 – Present
• Led automation initiative across 3 teams
• Built regression suite in Selenium covering checkout and payments
• Worked with the QA team on testing

Globex | QA Tester
Mar 2017 - Dec 2019
- Tested REST APIs with Postman and tracked defects in Jira
- Documented test plans for mobile releases

SKILLS
Selenium, Jira, Postman
"""

SAMPLE_JOB = (
    "Looking for a QA Engineer with strong experience in Selenium and CI/CD pipelines. "
    "Requirements: Jira, Postman."
)


@pytest.fixture
def sample_resume() -> str:
    return SAMPLE_RESUME


@pytest.fixture
def sample_job() -> str:
    return SAMPLE_JOB


@pytest.fixture
def gemini_key(monkeypatch):
    """Pretend a Gemini key is configured without touching the network."""
    monkeypatch.setattr(settings, "gemini_api_key", "test-key")
    return "test-key"
