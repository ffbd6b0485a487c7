"""Shared vocabulary for Tor Browser releases."""

from enum import Enum

Version = str

# Normalized release platforms; "__unsupported" marks an unknown value
ReleasePlatform = str

UNSUPPORTED = "__unsupported"


class Branch(str, Enum):
    """Release track, told apart by the alpha marker in the version."""

    ALPHA = "alpha"
    STABLE = "stable"

    def __str__(self) -> str:
        return self.value

    def includes(self, version: Version) -> bool:
        """Check whether a version string belongs to this branch."""
        is_alpha = "a" in version
        return is_alpha if self is Branch.ALPHA else not is_alpha
