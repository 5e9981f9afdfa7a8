"""
Repository Hosting Client

This module defines the capability interface the formula updater consumes
and a GitHub REST API implementation of it.
"""

import base64
import binascii
import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar
from urllib.parse import quote

import requests

from formula_bump import __version__
from formula_bump.config import DEFAULT_API_URL
from formula_bump.errors import MalformedContentError, RemoteCallError
from formula_bump.logging_config import get_logger

logger = get_logger(__name__)

# Strips RFC 6570 suffixes such as "{/id}" from hypermedia links
_URI_TEMPLATE_RE = re.compile(r"\{[^}]*\}")

T = TypeVar("T")


# ============================================================
# Data Classes
# ============================================================

@dataclass(frozen=True)
class Repository:
    """Source repository record."""

    name: str
    full_name: str
    description: str = ""
    html_url: str = ""
    license_spdx_id: str | None = None
    releases_link: str = ""
    tags_link: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Repository":
        license_info = data.get("license") or {}
        return cls(
            name=data["name"],
            full_name=data.get("full_name", data["name"]),
            description=data.get("description") or "",
            html_url=data.get("html_url") or "",
            license_spdx_id=license_info.get("spdx_id"),
            releases_link=expand_link(data.get("releases_url", "")),
            tags_link=expand_link(data.get("tags_url", "")),
        )


@dataclass(frozen=True)
class Release:
    """A published release."""

    tag_name: str
    name: str = ""
    html_url: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Release":
        return cls(
            tag_name=data["tag_name"],
            name=data.get("name") or "",
            html_url=data.get("html_url") or "",
        )


@dataclass(frozen=True)
class Tag:
    """A git tag."""

    name: str
    commit_sha: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Tag":
        commit = data.get("commit") or {}
        return cls(name=data["name"], commit_sha=commit.get("sha", ""))


@dataclass(frozen=True)
class FileContent:
    """A file fetched through the contents API."""

    path: str
    encoded_content: str
    revision: str

    def decoded(self) -> str:
        """Return the file text, decoded from its base64 transport encoding."""
        try:
            raw = base64.b64decode(self.encoded_content)
            return raw.decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise MalformedContentError(f"Cannot decode content of {self.path}: {e}") from e


def expand_link(link: str) -> str:
    """Drop URI template placeholders from a hypermedia link."""
    return _URI_TEMPLATE_RE.sub("", link)


def _as_list(data: Any) -> list[Any]:
    if not isinstance(data, list):
        raise TypeError(f"expected a list, got {type(data).__name__}")
    return data


# ============================================================
# Capability Interface
# ============================================================

class RepositoryClient(ABC):
    """Remote operations needed to bump a formula."""

    @abstractmethod
    def authenticate(self, token: str) -> None:
        """Use the bearer token for every subsequent call."""

    @abstractmethod
    def get_repository(self, identifier: str) -> Repository:
        """Fetch a repository by "owner/name"."""

    @abstractmethod
    def list_releases(self, link: str) -> list[Release]:
        """List releases, most recent first."""

    @abstractmethod
    def list_tags(self, link: str) -> list[Tag]:
        """List tags."""

    @abstractmethod
    def get_file_content(self, repository: str, path: str) -> FileContent:
        """Fetch a file together with its revision identifier."""

    @abstractmethod
    def update_file_content(
        self, repository: str, path: str, message: str, revision: str, content: str
    ) -> str:
        """Commit new file content and return the commit sha."""


# ============================================================
# GitHub Client
# ============================================================

class GitHubClient(RepositoryClient):
    """
    RepositoryClient backed by the GitHub REST API.
    """

    def __init__(self, api_url: str = DEFAULT_API_URL, session: requests.Session | None = None):
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/vnd.github+json",
            "User-Agent": f"formula-bump/{__version__}",
        })
        self.timeout = (3, 30)  # (connect_timeout, read_timeout)

    def authenticate(self, token: str) -> None:
        self.session.headers["Authorization"] = f"Bearer {token}"

    def _url(self, path: str) -> str:
        return f"{self.api_url}/{path.lstrip('/')}"

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            RemoteCallError: On transport errors, non-2xx responses or
                bodies that are not JSON.
        """
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise RemoteCallError(f"{method} {url} failed: {e}", status_code=status) from e
        except requests.exceptions.RequestException as e:
            raise RemoteCallError(f"{method} {url} failed: {e}") from e
        except ValueError as e:
            raise RemoteCallError(f"{method} {url} returned invalid JSON: {e}") from e

    def _parse(self, url: str, parse: Callable[[Any], T]) -> T:
        """Build records from a response body.

        Raises:
            RemoteCallError: If the body does not have the expected shape.
        """
        try:
            return parse(self._request("GET", url))
        except (KeyError, TypeError, AttributeError) as e:
            raise RemoteCallError(f"GET {url} returned an unexpected payload: {e!r}") from e

    def get_repository(self, identifier: str) -> Repository:
        return self._parse(self._url(f"repos/{identifier}"), Repository.from_api)

    def list_releases(self, link: str) -> list[Release]:
        return self._parse(link, lambda data: [Release.from_api(item) for item in _as_list(data)])

    def list_tags(self, link: str) -> list[Tag]:
        return self._parse(link, lambda data: [Tag.from_api(item) for item in _as_list(data)])

    def _contents_url(self, repository: str, path: str) -> str:
        return self._url(f"repos/{repository}/contents/{quote(path.lstrip('/'))}")

    def get_file_content(self, repository: str, path: str) -> FileContent:
        def parse(data: Any) -> FileContent:
            if not isinstance(data, dict) or "content" not in data:
                raise RemoteCallError(f"{repository}:{path} is not a file")
            return FileContent(
                path=data.get("path", path),
                encoded_content=data["content"],
                revision=data["sha"],
            )

        return self._parse(self._contents_url(repository, path), parse)

    def update_file_content(
        self, repository: str, path: str, message: str, revision: str, content: str
    ) -> str:
        payload = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "sha": revision,
        }
        url = self._contents_url(repository, path)
        data = self._request("PUT", url, json=payload)
        if not isinstance(data, dict):
            raise RemoteCallError(f"PUT {url} returned an unexpected payload")
        commit = data.get("commit") or {}
        return commit.get("sha", "")
