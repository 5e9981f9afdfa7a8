"""
Formula update pipeline.

Resolves the latest release of the source repository, compares the formula's
checksum with the new one and commits a rewritten formula when it changed:

    Validating -> Authenticated -> ReleaseResolved -> ContentFetched
        -> NoOp | Rewritten -> Committed

Any FormulaBumpError stops the run where it is raised.
"""

from dataclasses import dataclass
from enum import Enum

from formula_bump.config import RunOptions
from formula_bump.errors import NotFoundError
from formula_bump.formula import (
    FormulaRewrite,
    extract_sha256,
    formula_name_from_path,
    resolve_commit_message,
    rewrite_formula,
)
from formula_bump.github_client import FileContent, Release, Repository, RepositoryClient
from formula_bump.logging_config import get_logger

logger = get_logger(__name__)


class Outcome(Enum):
    """Successful end states of a run."""

    NOOP = "noop"
    COMMITTED = "committed"


@dataclass(frozen=True)
class UpdateResult:
    """What a run did."""

    outcome: Outcome
    tag_name: str
    commit_message: str = ""
    commit_sha: str = ""
    rewrite: FormulaRewrite | None = None


class FormulaUpdater:
    """Updates one formula in a tap repository from one source repository."""

    def __init__(self, client: RepositoryClient, options: RunOptions):
        self.client = client
        self.options = options

    def resolve_latest_release(self) -> tuple[Repository, Release]:
        """Return the source repository and its latest release.

        The first release in API order is taken as the latest. Its tag must
        exist in the repository's tag list.

        Raises:
            NotFoundError: If there are no releases or the tag is missing.
        """
        repo = self.client.get_repository(self.options.repository)
        logger.debug(
            f"Repository {repo.full_name}: {repo.description!r} "
            f"({repo.html_url}, license {repo.license_spdx_id})"
        )

        releases = self.client.list_releases(repo.releases_link)
        if not releases:
            raise NotFoundError("No releases found")
        latest = releases[0]
        logger.debug(f"Latest release: {latest.tag_name}")

        tags = self.client.list_tags(repo.tags_link)
        if not any(tag.name == latest.tag_name for tag in tags):
            raise NotFoundError(f"Tag {latest.tag_name} not found")

        return repo, latest

    def fetch_formula(self) -> FileContent:
        return self.client.get_file_content(self.options.tap, self.options.formula)

    def checksum_changed(self, formula_text: str) -> bool:
        current = extract_sha256(formula_text)
        logger.debug(f"Current sha256 {current}, new sha256 {self.options.sha256}")
        return current != self.options.sha256

    def publish(self, repo: Repository, release: Release, content: str) -> tuple[str, str]:
        """Commit the new formula content.

        Returns:
            Tuple of (commit message, commit sha).
        """
        # Revision must be current at write time
        revision = self.fetch_formula().revision

        message = resolve_commit_message(self.options.message, repo.name, release.tag_name)
        logger.info(message)

        commit_sha = self.client.update_file_content(
            self.options.tap, self.options.formula, message, revision, content
        )
        logger.info("Update formula and push commit completed!")
        return message, commit_sha

    def run(self, token: str) -> UpdateResult:
        self.client.authenticate(token)

        repo, release = self.resolve_latest_release()

        original = self.fetch_formula().decoded()

        if not self.checksum_changed(original):
            logger.info("No changes in sha256 value. Skipping commit.")
            return UpdateResult(outcome=Outcome.NOOP, tag_name=release.tag_name)

        formula_name = formula_name_from_path(self.options.formula)
        logger.debug(f"Updating formula {formula_name} to {release.tag_name}")

        rewrite = rewrite_formula(
            original, self.options.download_url, self.options.sha256, release.tag_name
        )
        for field in rewrite.missing:
            logger.warning(f'Formula {formula_name} has no {field} "..." line; left unchanged')

        logger.info(rewrite.content)

        message, commit_sha = self.publish(repo, release, rewrite.content)
        return UpdateResult(
            outcome=Outcome.COMMITTED,
            tag_name=release.tag_name,
            commit_message=message,
            commit_sha=commit_sha,
            rewrite=rewrite,
        )
