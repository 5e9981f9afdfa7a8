#!/usr/bin/env python3
"""Formula Bump CLI - update a tap formula to the latest release."""

import argparse
import sys

from formula_bump import __version__
from formula_bump.config import ENV_COMMIT_TOKEN, build_run_options
from formula_bump.errors import ConfigurationError, FormulaBumpError
from formula_bump.github_client import GitHubClient, RepositoryClient
from formula_bump.logging_config import get_logger, set_debug_mode, setup_logging
from formula_bump.updater import FormulaUpdater

logger = get_logger(__name__)


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors as ConfigurationError."""

    def error(self, message: str):
        raise ConfigurationError(message)


def build_parser() -> ArgumentParser:
    # Required flags are checked by build_run_options, not argparse.
    parser = ArgumentParser(
        prog="formula-bump",
        description="Point a Homebrew tap formula at the latest release of a repository.",
        epilog=f"The {ENV_COMMIT_TOKEN} environment variable must hold a token "
        "allowed to push to the tap repository.",
    )
    parser.add_argument("-r", "--repository", help="The project repository (owner/name)")
    parser.add_argument("-t", "--tap", help="The Homebrew tap repository (owner/name)")
    parser.add_argument("-f", "--formula", metavar="PATH",
                        help="The path to the formula in the tap repository")
    parser.add_argument("-d", "--download-url", dest="download_url",
                        help="The download release url")
    parser.add_argument("-s", "--sha256", metavar="DOWNLOAD-URL-SHA256",
                        help="The download release url sha256")
    parser.add_argument("-m", "--commit-message", dest="message", metavar="MESSAGE",
                        help="The message of the commit updating the formula")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Output more information")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None, client: RepositoryClient | None = None) -> int:
    """Run one formula update and return the process exit code."""
    setup_logging()

    try:
        args = build_parser().parse_args(argv)
        options, token = build_run_options(args)
        if options.verbose:
            set_debug_mode(True)
        if client is None:
            client = GitHubClient(api_url=options.api_url)
        FormulaUpdater(client, options).run(token)
    except FormulaBumpError as e:
        logger.critical(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
