import shutil
from datetime import datetime
from pathlib import Path

import pytest
from git import Actor, Repo

from gitexperts.tests.helpers import record, utc

ENV_VARS = (
    "GIT_EXPERTS_WEIGHTS",
    "GIT_EXPERTS_SCORE_SCALE",
    "GIT_EXPERTS_REV",
    "GIT_EXPERTS_DETECT_MOVES",
    "GIT_EXPERTS_DETECT_COPIES",
    "GIT_EXPERTS_FIRST_PARENT",
    "GIT_EXPERTS_TABLE",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Unset every setting and run from an empty directory without a .env file."""
    for name in ENV_VARS:
        # setenv first so values loaded from a .env during the test are undone too
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)

    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


@pytest.fixture
def scenario_records():
    """Alice: 4 commits / 10 lines, Bob: 2 commits / 12 lines."""
    alice = ("Alice", "alice@example.com")
    bob = ("Bob", "bob@example.com")

    commits = [
        ("a1", alice, utc(2019, 2, 1), 4),
        ("a2", alice, utc(2019, 6, 1), 2),
        ("a3", alice, utc(2019, 12, 1), 2),
        ("a4", alice, utc(2020, 4, 10), 2),
        ("b1", bob, utc(2019, 1, 1), 6),
        ("b2", bob, utc(2019, 1, 1), 6),
    ]

    records = []
    line = 1
    for commit_id, (name, email), when, count in commits:
        for _ in range(count):
            records.append(record(line, commit_id, name, email, when))
            line += 1
    return records


class RepoBuilder:
    """Creates commits with explicit authors and dates in a scratch repository."""

    def __init__(self, path: Path):
        self.path = path
        self.repo = Repo.init(path)

    def commit(self, file_path: str, content: str, name: str, email: str, when: datetime) -> str:
        target = self.path / file_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)

        self.repo.index.add([file_path])
        actor = Actor(name, email)
        date = f"{int(when.timestamp())} +0000"
        commit = self.repo.index.commit(
            f"Update {file_path}",
            author=actor,
            committer=actor,
            author_date=date,
            commit_date=date
        )
        return commit.hexsha


@pytest.fixture
def repo_builder(tmp_path):
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    return RepoBuilder(tmp_path / "repo")
