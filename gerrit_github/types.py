"""Types specific to gerrit_github."""

from __future__ import annotations

import dataclasses
import enum


class PullRequestImportType(enum.Enum):
    # One change per pull request commit.
    COMMITS = "Commits"
    # A single change for the whole pull request.
    SQUASH = "Squash"


@dataclasses.dataclass(frozen=True)
class PrId:
    """An id of a pull request: the repo owner and name, and a number."""
    organisation: str
    repository: str
    number: int

    @property
    def full_name(self):
        return f"{self.organisation}/{self.repository}"

    def __str__(self):
        return f"{self.full_name}#{self.number}"
