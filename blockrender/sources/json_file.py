"""
Offline JSON content source for blockrender.

Reads pages previously exported from the platform: a JSON file holding either a
single page object or a list of page objects, each with its block tree attached
under ``children``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models import Block, Page
from .base import BaseSource, ContentFetchError, ContentSourceError


class JSONFileSource(BaseSource):
    """
    Content source reading exported page JSON from disk.
    """

    def __init__(self, json_path: str):
        """
        Initialize the JSON source.

        Args:
            json_path: Path to a JSON file, or a directory of ``*.json`` files
        """
        self.json_path = Path(json_path)
        self._pages: Optional[List[Dict[str, Any]]] = None

        if not self.json_path.exists():
            logging.warning(f"JSON source path not found: {json_path}")

        logging.info(f"Initialized JSON source for: {self.json_path}")

    def _load(self) -> List[Dict[str, Any]]:
        if self._pages is not None:
            return self._pages

        if self.json_path.is_dir():
            files = sorted(self.json_path.glob("*.json"))
        else:
            files = [self.json_path]

        pages: List[Dict[str, Any]] = []
        for path in files:
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                raise ContentFetchError(f"Failed to read {path}: {e}") from e

            if isinstance(data, dict) and isinstance(data.get("results"), list):
                data = data["results"]
            pages.extend(data if isinstance(data, list) else [data])

        logging.info(f"Loaded {len(pages)} pages from {self.json_path}")
        self._pages = pages
        return pages

    def _find(self, object_id: str, nodes: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        for node in nodes:
            if node.get("id") == object_id:
                return node
            found = self._find(object_id, node.get("children") or [])
            if found is not None:
                return found
        return None

    async def get_blocks(self, block_id: str) -> List[Block]:
        node = self._find(block_id, self._load())
        if node is None:
            raise ContentSourceError(f"Block {block_id} not found in {self.json_path}")
        return [Block.from_api(child) for child in node.get("children") or []]

    async def get_page(self, page_id: str) -> Page:
        for data in self._load():
            if data.get("id") == page_id:
                return Page.from_api(data)
        raise ContentSourceError(f"Page {page_id} not found in {self.json_path}")

    async def get_pages(self, database_id: Optional[str] = None) -> List[Page]:
        """
        Return every exported page, restricted to ``database_id`` when the
        exported pages record their parent database.
        """
        pages = []
        for data in self._load():
            parent_id = (data.get("parent") or {}).get("database_id")
            if database_id and parent_id and parent_id != database_id:
                continue
            pages.append(Page.from_api(data))
        return pages
