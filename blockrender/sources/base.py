"""
Base content source interface for blockrender.

This module defines the abstract interface that every content source must
implement, plus the errors sources raise.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import Block, Page


class ContentSourceError(Exception):
    """Base content source error."""


class ContentFetchError(ContentSourceError):
    """A fetch failed and could not be completed within the retry budget."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ContentAuthError(ContentSourceError):
    """The platform rejected the credentials (401/403)."""


class BaseSource(ABC):
    """
    Abstract base class for all content sources.

    A content source turns a page (or database) identifier into fully
    populated Page/Block trees for the rendering engine.
    """

    @abstractmethod
    async def get_blocks(self, block_id: str) -> List[Block]:
        """
        Retrieve the child blocks of a page or block, recursively.

        Args:
            block_id: The page or block whose children are fetched

        Returns:
            Ordered list of Block trees
        """
        pass

    @abstractmethod
    async def get_page(self, page_id: str) -> Page:
        """
        Retrieve one page with its properties and block tree.

        Args:
            page_id: The page identifier

        Returns:
            The populated Page
        """
        pass

    async def get_pages(self, database_id: str) -> List[Page]:
        """
        Retrieve every page of a database with its block tree.

        Sources without a database concept raise ContentSourceError.
        """
        raise ContentSourceError(f"{type(self).__name__} does not support databases")

    async def fetch(self, page_id: str) -> Page:
        """Single abstract fetch operation used by callers of the engine."""
        return await self.get_page(page_id)

    async def close(self) -> None:
        """Release any resources held by the source."""
        return None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
