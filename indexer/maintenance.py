"""Index maintenance: drop every row of a content item when it is retired or re-embedded."""

import logging
from typing import Any, List, Mapping

from sqlalchemy.exc import SQLAlchemyError

from storage.content_ids import is_content_id, normalize_content_id
from storage.errors import MissingDependency
from storage.index_backend import TARGETS, IndexBackend

from .models import DeletionReport

logger = logging.getLogger(__name__)

FILTER_KEY = "content_uuid"


def content_ids_from_filter(filters: Mapping[str, Any]) -> List[str]:
    """Valid ids under filter["content_uuid"] (string or list); invalid entries are skipped."""
    value = (filters or {}).get(FILTER_KEY)
    if isinstance(value, str):
        values = [value]
    elif isinstance(value, (list, tuple)):
        values = [v for v in value if isinstance(v, str)]
    else:
        return []
    return list(dict.fromkeys(normalize_content_id(v) for v in values if is_content_id(v)))


class IndexMaintenance:
    def __init__(self, backend: IndexBackend) -> None:
        if backend is None:
            raise MissingDependency("IndexMaintenance needs a backend")
        self._backend = backend

    def delete_content(self, content_id: str) -> DeletionReport:
        """
        Delete search_index, direct_link and read_roles rows for content_id.
        Each table is attempted independently; failures are logged and reported,
        not raised. Unknown ids succeed with removed == 0.
        """
        hex_id = normalize_content_id(content_id)
        raw_id = bytes.fromhex(hex_id)
        report = DeletionReport(hex_id)

        self._backend.connect()
        for target in TARGETS:
            try:
                count = self._backend.delete_rows(target, raw_id)
            except SQLAlchemyError as e:
                logger.error("Index delete ERROR content_id=%s target=%s: %s", hex_id, target, e)
                report.targets[target] = False
                report.errors[target] = str(e)
                continue
            report.targets[target] = True
            if target == "search_index":
                report.removed = count

        if report.ok:
            logger.info("Index delete ok content_id=%s removed=%d", hex_id, report.removed)
        return report

    def delete_by_filter(self, filters: Mapping[str, Any]) -> List[DeletionReport]:
        return [self.delete_content(hex_id) for hex_id in content_ids_from_filter(filters)]
