"""
Mock content source for testing blockrender.

This module provides a content source with hardcoded pages for exercising the
rendering pipeline without network access.
"""

from typing import Any, Dict, List, Optional
import uuid

from ..models import Block, Page
from .base import BaseSource, ContentSourceError


def text_span(content: str, **annotations: Any) -> Dict[str, Any]:
    """Build a raw ``text`` rich text object."""
    color = annotations.pop("color", "default")
    href = annotations.pop("href", None)
    return {
        "type": "text",
        "text": {"content": content, "link": {"url": href} if href else None},
        "annotations": {
            "bold": False,
            "italic": False,
            "strikethrough": False,
            "underline": False,
            "code": False,
            "color": color,
            **annotations,
        },
        "plain_text": content,
        "href": href,
    }


def raw_block(block_type: str, payload: Dict[str, Any], children: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """Build a raw block object in the platform's layout."""
    return {
        "object": "block",
        "id": str(uuid.uuid4()),
        "type": block_type,
        "has_children": bool(children),
        block_type: payload,
        "children": children or [],
    }


class MockSource(BaseSource):
    """
    Mock source that returns hardcoded test pages.

    Used for testing the rendering pipeline without a real workspace.
    """

    def __init__(self):
        """Initialize the mock source with test data."""
        self._test_pages = self._create_test_pages()

    async def get_blocks(self, block_id: str) -> List[Block]:
        for data in self._test_pages:
            if data["id"] == block_id:
                return [Block.from_api(child) for child in data["children"]]
        raise ContentSourceError(f"Unknown mock page: {block_id}")

    async def get_page(self, page_id: str) -> Page:
        for data in self._test_pages:
            if data["id"] == page_id:
                return Page.from_api(data)
        raise ContentSourceError(f"Unknown mock page: {page_id}")

    async def get_pages(self, database_id: str) -> List[Page]:
        return [Page.from_api(data) for data in self._test_pages]

    @property
    def page_ids(self) -> List[str]:
        return [data["id"] for data in self._test_pages]

    def _create_test_pages(self) -> List[Dict[str, Any]]:
        """
        Create hardcoded test pages covering the bundled block types.

        Returns:
            List of raw page objects with attached children
        """
        pages = []

        # Page 1: meeting notes with lists, a table and styled text
        pages.append({
            "object": "page",
            "id": "mock-page-meeting",
            "cover": {"type": "external", "external": {"url": "https://example.com/cover.png"}},
            "icon": {"type": "emoji", "emoji": "📝"},
            "properties": {
                "Name": {"id": "title", "type": "title", "title": [text_span("Weekly Sync")]},
                "Tags": {"id": "tags", "type": "multi_select", "multi_select": [
                    {"name": "meeting"}, {"name": "team"},
                ]},
                "Due Date": {"id": "due", "type": "date", "date": {"start": "2024-05-22", "end": None}},
                "Done": {"id": "done", "type": "checkbox", "checkbox": False},
            },
            "children": [
                raw_block("heading_1", {"rich_text": [text_span("Weekly Sync")]}),
                raw_block("paragraph", {"rich_text": [
                    text_span("Met with "),
                    text_span("Jane", bold=True),
                    text_span(" about the "),
                    text_span("roadmap", italic=True, color="blue"),
                    text_span("."),
                ]}),
                raw_block("bulleted_list_item", {"rich_text": [text_span("Budget approved")]}),
                raw_block("bulleted_list_item", {"rich_text": [text_span("Hiring plan")]}, children=[
                    raw_block("bulleted_list_item", {"rich_text": [text_span("Two engineers")]}),
                ]),
                raw_block("bulleted_list_item", {"rich_text": [text_span("Launch date")]}),
                raw_block("numbered_list_item", {"rich_text": [text_span("Draft proposal")]}),
                raw_block("numbered_list_item", {"rich_text": [text_span("Review with team")]}),
                raw_block("to_do", {"rich_text": [text_span("Send notes")], "checked": True}),
                raw_block("to_do", {"rich_text": [text_span("Book room")], "checked": False}),
                raw_block("table", {"table_width": 2, "has_column_header": True, "has_row_header": False}, children=[
                    raw_block("table_row", {"cells": [[text_span("Owner")], [text_span("Task")]]}),
                    raw_block("table_row", {"cells": [[text_span("Jane")], [text_span("Budget", code=True)]]}),
                ]),
                raw_block("divider", {}),
                raw_block("callout", {"rich_text": [text_span("Next sync on Friday")], "icon": {"type": "emoji", "emoji": "💡"}}),
            ],
        })

        # Page 2: reference page with media and an unknown block type
        pages.append({
            "object": "page",
            "id": "mock-page-reference",
            "cover": None,
            "icon": None,
            "properties": {
                "Name": {"id": "title", "type": "title", "title": [text_span("Reading List")]},
                "Status": {"id": "status", "type": "select", "select": {"name": "In progress"}},
            },
            "children": [
                raw_block("heading_2", {"rich_text": [text_span("Books")]}),
                raw_block("quote", {"rich_text": [text_span("Always use version control.")]}),
                raw_block("code", {"rich_text": [text_span("git commit -m 'wip'")], "language": "bash"}),
                raw_block("image", {
                    "type": "external",
                    "external": {"url": "https://example.com/book.png"},
                    "caption": [text_span("Cover art")],
                }),
                raw_block("video", {"type": "external", "external": {"url": "https://youtu.be/dQw4w9WgXcQ"}}),
                raw_block("bookmark", {"url": "https://example.com", "caption": []}),
                raw_block("ai_summary", {"rich_text": [text_span("Generated summary")]}),
            ],
        })

        return pages
