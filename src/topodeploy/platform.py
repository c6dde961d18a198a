"""Cluster platform flavours the manifests can be rendered for."""

from enum import Enum


class Platform(str, Enum):
    KUBERNETES = "kubernetes"
    OPENSHIFT = "openshift"

    @classmethod
    def parse(cls, text: str) -> "Platform":
        """Parse a platform name, case-insensitively."""
        try:
            return cls(text.strip().lower())
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown platform {text!r} (expected one of: {valid})") from None

    def __str__(self) -> str:
        return self.value
