"""Pytest configuration and shared fixtures."""

import base64
import logging
import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Add formula_bump to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from formula_bump.config import RunOptions  # noqa: E402
from formula_bump.github_client import (  # noqa: E402
    FileContent,
    Release,
    Repository,
    RepositoryClient,
    Tag,
)

FORMULA_TEXT = """class Foo < Formula
  desc "Foo does things"
  homepage "https://github.com/acme/foo"
  url "https://github.com/acme/foo/archive/v1.0.0.tar.gz"
  sha256 "abc123"
  version "v1.0.0"
  license "MIT"

  def install
    bin.install "foo"
  end
end
"""


class FakeRepositoryClient(RepositoryClient):
    """In-memory RepositoryClient that records every call."""

    def __init__(
        self,
        formula_text: str = FORMULA_TEXT,
        releases: list[str] | None = None,
        tags: list[str] | None = None,
        repo_name: str = "foo",
    ):
        self.formula_text = formula_text
        self.release_tags = ["v1.1.0", "v1.0.0"] if releases is None else releases
        self.tag_names = list(self.release_tags) if tags is None else tags
        self.repo_name = repo_name
        self.token: str | None = None
        self.revision = "rev-1"
        self.calls: list[str] = []
        self.writes: list[dict] = []

    def authenticate(self, token: str) -> None:
        self.calls.append("authenticate")
        self.token = token

    def get_repository(self, identifier: str) -> Repository:
        self.calls.append("get_repository")
        return Repository(
            name=self.repo_name,
            full_name=identifier,
            description="Foo does things",
            html_url=f"https://github.com/{identifier}",
            license_spdx_id="MIT",
            releases_link=f"https://api.github.com/repos/{identifier}/releases",
            tags_link=f"https://api.github.com/repos/{identifier}/tags",
        )

    def list_releases(self, link: str) -> list[Release]:
        self.calls.append("list_releases")
        return [Release(tag_name=tag) for tag in self.release_tags]

    def list_tags(self, link: str) -> list[Tag]:
        self.calls.append("list_tags")
        return [Tag(name=name) for name in self.tag_names]

    def get_file_content(self, repository: str, path: str) -> FileContent:
        self.calls.append("get_file_content")
        encoded = base64.b64encode(self.formula_text.encode("utf-8")).decode("ascii")
        return FileContent(path=path, encoded_content=encoded, revision=self.revision)

    def update_file_content(
        self, repository: str, path: str, message: str, revision: str, content: str
    ) -> str:
        self.calls.append("update_file_content")
        self.writes.append({
            "repository": repository,
            "path": path,
            "message": message,
            "revision": revision,
            "content": content,
        })
        return "commit-sha-1"


@pytest.fixture
def fake_client() -> FakeRepositoryClient:
    return FakeRepositoryClient()


@pytest.fixture
def run_options() -> RunOptions:
    return RunOptions(
        repository="acme/foo",
        tap="acme/homebrew-tap",
        formula="Formula/foo.rb",
        download_url="https://github.com/acme/foo/archive/v1.1.0.tar.gz",
        sha256="def456",
    )


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Reset the package logger between tests."""
    yield
    logger = logging.getLogger("formula_bump")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
