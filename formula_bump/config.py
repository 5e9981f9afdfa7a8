"""
Run configuration for Formula Bump.

Options come from command line flags; the commit token and the API base URL
come from the environment.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from formula_bump.errors import ConfigurationError

# Environment variable names
ENV_COMMIT_TOKEN = "COMMIT_TOKEN"
ENV_API_URL = "GITHUB_API_URL"  # Set by GitHub Actions, also on Enterprise hosts

DEFAULT_API_URL = "https://api.github.com"

# (attribute, flag label) in validation order
REQUIRED_OPTIONS: tuple[tuple[str, str], ...] = (
    ("repository", "-r/--repository"),
    ("tap", "-t/--tap"),
    ("formula", "-f/--formula"),
    ("download_url", "-d/--download-url"),
    ("sha256", "-s/--sha256"),
)


@dataclass(frozen=True)
class RunOptions:
    """Everything a single formula update run needs to know."""

    repository: str
    tap: str
    formula: str
    download_url: str
    sha256: str
    message: str = ""
    verbose: bool = False
    api_url: str = DEFAULT_API_URL


def resolve_token(environ: Mapping[str, str] | None = None) -> str:
    """Return the commit token, failing if it is unset or empty."""
    if environ is None:
        environ = os.environ
    token = environ.get(ENV_COMMIT_TOKEN, "")
    if not token:
        raise ConfigurationError(f"{ENV_COMMIT_TOKEN} environment variable is not set")
    return token


def resolve_api_url(environ: Mapping[str, str] | None = None) -> str:
    if environ is None:
        environ = os.environ
    return (environ.get(ENV_API_URL) or DEFAULT_API_URL).rstrip("/")


def build_run_options(
    namespace: Any, environ: Mapping[str, str] | None = None
) -> tuple[RunOptions, str]:
    """Validate parsed arguments and the environment.

    Args:
        namespace: Parsed argparse namespace (or any object with the same attributes)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Tuple of (options, commit token).

    Raises:
        ConfigurationError: If the token or a required argument is missing.
    """
    if environ is None:
        environ = os.environ

    token = resolve_token(environ)

    for attr, label in REQUIRED_OPTIONS:
        if not getattr(namespace, attr, None):
            raise ConfigurationError(f"missing argument: {label}")

    message = getattr(namespace, "message", None) or ""

    options = RunOptions(
        repository=namespace.repository,
        tap=namespace.tap,
        formula=namespace.formula,
        download_url=namespace.download_url,
        sha256=namespace.sha256,
        message=message.strip(),
        verbose=bool(getattr(namespace, "verbose", False)),
        api_url=resolve_api_url(environ),
    )
    return options, token
