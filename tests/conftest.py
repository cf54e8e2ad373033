"""
Shared fixtures for dep-grouper tests.
"""

import json

import pytest
import yaml

from src.dep_grouper.cli_config import reset_config
from src.dep_grouper.dependency import Dependency
from src.dep_grouper.error_handling import setup_error_handling


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep user config files and environment overrides out of tests."""
    for key in (
        "DEP_GROUPER_LOG_LEVEL",
        "DEP_GROUPER_JSON_LOGGING",
        "DEP_GROUPER_OUTPUT_FORMAT",
        "DEP_GROUPER_OUTPUT_FILE",
        "DEP_GROUPER_SHOW_EMPTY_GROUPS",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)

    reset_config()
    setup_error_handling()
    yield
    reset_config()


@pytest.fixture
def temp_dir(tmp_path):
    """Directory for job files created by a test."""
    job_dir = tmp_path / "jobs"
    job_dir.mkdir()
    return job_dir


@pytest.fixture
def sample_job_data():
    return {
        "dependency-groups": [
            {
                "name": "test-tools",
                "rules": {
                    "patterns": ["pytest*", "coverage"],
                    "dependency-type": "development",
                },
            },
            {
                "name": "web",
                "rules": {
                    "patterns": ["django*", "requests"],
                    "exclude-patterns": ["django-debug-toolbar"],
                    "update-types": ["minor", "patch"],
                },
            },
            {"name": "typos", "rules": {"patterns": ["reqeusts"]}},
        ],
        "dependencies": [
            {"name": "requests", "version": "2.31.0"},
            {"name": "Django", "version": "4.2.7"},
            {"name": "django-debug-toolbar", "version": "4.2.0", "type": "development"},
            {"name": "pytest", "version": "7.4.3", "type": "development"},
            {"name": "pytest-cov", "version": "4.1.0", "type": "development"},
            {"name": "numpy", "version": "1.26.2"},
        ],
    }


@pytest.fixture
def sample_job_yaml(temp_dir, sample_job_data):
    job_file = temp_dir / "job.yaml"
    job_file.write_text(yaml.safe_dump(sample_job_data, sort_keys=False))
    return job_file


@pytest.fixture
def sample_job_json(temp_dir, sample_job_data):
    job_file = temp_dir / "job.json"
    job_file.write_text(json.dumps(sample_job_data, indent=2))
    return job_file


@pytest.fixture
def dependencies():
    """Three dependencies for the restrictive/permissive group scenario."""
    return {
        "a": Dependency(name="acme-security", version="1.0.0"),
        "b": Dependency(name="acme-minor", version="2.0.0"),
        "c": Dependency(name="unrelated", version="3.0.0"),
    }
