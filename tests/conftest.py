"""Shared fixtures for cocommit tests."""

import pytest
from git import Repo

from cocommit.config import AIConfig


@pytest.fixture(autouse=True)
def isolated_git(monkeypatch):
    """Keep the user's global and system git config out of the tests."""
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", "/dev/null")
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")


@pytest.fixture
def temp_repo(tmp_path):
    """Create a temporary git repository for testing."""
    repo = Repo.init(tmp_path)

    # Configure git user for commits
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")
        writer.set_value("commit", "gpgsign", "false")

    return repo


@pytest.fixture
def repo_with_commit(temp_repo, tmp_path):
    """Create a repo with an initial commit."""
    test_file = tmp_path / "initial.txt"
    test_file.write_text("initial content\n")
    temp_repo.index.add(["initial.txt"])
    temp_repo.index.commit("Initial commit")

    return temp_repo


@pytest.fixture
def ai_config():
    """A complete configuration that never reaches a real provider."""
    return AIConfig(provider="openai", model="gpt-4o-mini", api_key="sk-test")


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point the config file at a temporary directory and clear overrides."""
    config_home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    for name in ("COCOMMIT_PROVIDER", "COCOMMIT_MODEL", "COCOMMIT_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("cocommit.config.load_dotenv", lambda *args, **kwargs: False)
    return config_home / "cocommit" / "config.json"
