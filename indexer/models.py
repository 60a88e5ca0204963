"""Records passed in and out of the writer, matcher and maintenance."""

from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Sequence

from storage.errors import PartialDeletionFailure

INDEXED = "indexed"
NO_INDEXABLE_TEXT = "no_indexable_text"

STATUS_OK = "ok"
STATUS_ERROR = "error"


@dataclass
class ContentMetadata:
    """Optional per-content data. Absent link/roles leave stored values untouched."""

    direct_link: Optional[str] = None
    title: str = ""
    description: str = ""
    lang: Optional[str] = None
    read_roles: Optional[Sequence] = None


class IndexReport(NamedTuple):
    content_id: str
    status: str
    words: int = 0
    tokens: int = 0

    @property
    def indexed(self) -> bool:
        return self.status == INDEXED


class SearchHit(NamedTuple):
    content_id: str
    direct_link: str = ""
    title: str = ""
    description: str = ""

    def to_dict(self) -> Dict[str, str]:
        return self._asdict()


class SearchOutcome(NamedTuple):
    """Query result; status "error" means the service failed, not "no results"."""

    query: str
    items: List[SearchHit]
    status: str = STATUS_OK
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


@dataclass
class DeletionReport:
    """Per-table outcome of deleting one content id."""

    content_id: str
    removed: int = 0
    targets: Dict[str, bool] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def status(self) -> str:
        return "ok" if self.ok else "partial"

    def raise_for_failures(self) -> None:
        if self.errors:
            raise PartialDeletionFailure(self)

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "content_id": self.content_id,
            "removed": self.removed,
            "targets": dict(self.targets),
            "errors": dict(self.errors),
        }
