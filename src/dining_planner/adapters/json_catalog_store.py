"""JSON file storage for the food catalog snapshot."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from dining_planner.domain.catalog import FoodItem
from dining_planner.services.catalog import CatalogStore

_logger = logging.getLogger(__name__)


@dataclass
class JsonCatalogStore(CatalogStore):
    """Catalog kept as a single JSON array on disk."""

    path: Path

    def load(self) -> list[dict[str, object]]:
        """Return all records; a missing file is an empty catalog."""
        if not self.path.exists():
            return []
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            _logger.warning("Catalog %s is not a JSON array; ignoring it", self.path)
            return []
        return [record for record in data if isinstance(record, dict)]

    def save(self, items: list[FoodItem]) -> None:
        """Rewrite the catalog with the given items."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [item.to_record() for item in items]
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
