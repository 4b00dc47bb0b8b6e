"""Ratchet configuration."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


MEASURES_REF_FORMAT = "git-ratchet-1-{prefix}"
EXCLUSIONS_REF_FORMAT = "git-ratchet-excuse-1-{prefix}"


class RatchetSettings(BaseSettings):
    """Settings shared by the readers, writers and the CLI.

    Loads from environment variables automatically:
        RATCHET_PREFIX, RATCHET_SLACK, RATCHET_GIT_BINARY,
        RATCHET_GIT_TIMEOUT, RATCHET_REPO_PATH

    Command line flags override individual fields.
    """

    prefix: str = Field(default="default", min_length=1, description="Namespace for the measure and exclusion notes")
    slack: int = Field(default=0, ge=0, description="Tolerance added to each baseline before a value regresses")
    git_binary: str = Field(default="git", description="Git executable")
    git_timeout: float | None = Field(
        default=60.0, gt=0, description="Seconds a single git invocation may run (None disables the limit)"
    )
    repo_path: Path | None = Field(default=None, description="Repository working directory (cwd when unset)")

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix="RATCHET_",
    )

    @property
    def measures_ref(self) -> str:
        return MEASURES_REF_FORMAT.format(prefix=self.prefix)

    @property
    def exclusions_ref(self) -> str:
        return EXCLUSIONS_REF_FORMAT.format(prefix=self.prefix)
