"""Core data models shared across commentlinks components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class LinkKind(str, Enum):
    """How a link is checked: over the network or on disk."""

    ABSOLUTE = "absolute"
    RELATIVE = "relative"


class ReportVariant(str, Enum):
    """Report shapes; values double as template file stems."""

    NO_LINKS = "no-links"
    ALL_UPDATED = "all-updated"
    PENDING = "pending"


@dataclass(frozen=True)
class LinkCandidate:
    """A classified link token found in a file's comments."""

    text: str
    kind: LinkKind

    def to_dict(self) -> Dict[str, str]:
        return {"text": self.text, "kind": self.kind.value}


@dataclass
class FileScanResult:
    """Links discovered in one changed file, in discovery order."""

    filename: str
    links: List[LinkCandidate] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"filename": self.filename, "links": [link.to_dict() for link in self.links]}


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of checking a single link."""

    valid: bool
    resolved_path: Optional[str] = None
    status_code: Optional[int] = None
    message: Optional[str] = None

    def describe(self) -> str:
        """Short human-readable status used in reports."""
        if self.status_code is not None:
            return f"HTTP {self.status_code}"
        if self.message:
            return self.message
        return "OK" if self.valid else "Invalid"

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"valid": self.valid}
        if self.resolved_path is not None:
            payload["resolved_path"] = self.resolved_path
        if self.status_code is not None:
            payload["status_code"] = self.status_code
        if self.message is not None:
            payload["message"] = self.message
        return payload


@dataclass(frozen=True)
class ValidatedLink:
    """A link together with the file it came from and its validation outcome."""

    filename: str
    link: LinkCandidate
    outcome: ValidationOutcome

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "link": self.link.to_dict(),
            "outcome": self.outcome.to_dict(),
        }


@dataclass(frozen=True)
class RepoIdentity:
    """Repository coordinates used to build permalinks."""

    owner: str
    name: str
    commit_sha: str

    @classmethod
    def parse(cls, slug: str, commit_sha: str) -> "RepoIdentity":
        """Build an identity from an ``owner/name`` slug."""
        owner, sep, name = slug.strip().partition("/")
        if not sep or not owner or not name:
            raise ValueError(f"Repository slug must look like 'owner/name', got {slug!r}")
        return cls(owner=owner, name=name, commit_sha=commit_sha.strip())

    def permalink(self, path: str) -> str:
        return f"https://github.com/{self.owner}/{self.name}/blob/{self.commit_sha}/{path}"


@dataclass
class CompletenessDecision:
    """Chosen report variant plus the first link that forced ``PENDING``."""

    variant: ReportVariant
    cause: Optional[ValidatedLink] = None


@dataclass
class CheckReport:
    """Everything a caller needs after a run: the variant and rendered text."""

    variant: ReportVariant
    markdown: str
    links: List[ValidatedLink] = field(default_factory=list)
    cause: Optional[ValidatedLink] = None

    @property
    def link_count(self) -> int:
        return len(self.links)

    @property
    def broken_links(self) -> List[ValidatedLink]:
        return [item for item in self.links if not item.outcome.valid]
