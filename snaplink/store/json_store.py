"""Whole-document JSON file persistence."""

import asyncio
import json
import logging
import os
import tempfile
from typing import List, Optional, Tuple

from ..exceptions import StorageError
from ..models import URLEntry
from .base import URLStoreBase


class JSONFileStore(URLStoreBase):
    """Store the URL table as one JSON object keyed by short id.

    Every save rewrites the whole document. The file is replaced through a
    temporary sibling so readers never see a half-written document.
    """

    def __init__(
        self,
        data_dir: str = "data",
        filename: str = "urls.json",
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize JSON file store.

        Args:
            data_dir: Directory holding the document (created on load)
            filename: Document file name
            logger: Optional logger
        """
        self.data_dir = data_dir
        self.path = os.path.join(data_dir, filename)
        self.logger = logger or logging.getLogger(__name__)

    async def load(self) -> List[Tuple[str, URLEntry]]:
        return await asyncio.to_thread(self._load)

    async def save(self, items: List[Tuple[str, URLEntry]]) -> bool:
        document = {short_id: entry.to_dict() for short_id, entry in items}
        try:
            await asyncio.to_thread(self._write, document)
        except (OSError, TypeError, ValueError) as e:
            self.logger.error(f"Error saving data to {self.path}: {e}")
            return False
        self.logger.debug(f"Saved {len(document)} entries to {self.path}")
        return True

    def _load(self) -> List[Tuple[str, URLEntry]]:
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            if not os.path.exists(self.path):
                self._write({})
                self.logger.info(f"Created new data file at {self.path}")
                return []
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Error initializing storage at {self.path}: {e}") from e

        if not isinstance(document, dict):
            raise StorageError(f"Expected a JSON object in {self.path}")

        try:
            items = [
                (key, URLEntry.from_dict(value, key=key))
                for key, value in document.items()
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Malformed entry in {self.path}: {e}") from e

        self.logger.info(f"Loaded {len(items)} entries from {self.path}")
        return items

    def _write(self, document: dict) -> None:
        fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, prefix=".urls-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
