#!/usr/bin/env python3
"""
blockrender - Render block-structured pages to Markdown

Main entry point for blockrender. This orchestrator fetches pages from a
content source, renders their properties and block trees, and writes one
Markdown document per page.
"""

import asyncio
import logging
import sys
import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from blockrender import __version__
from blockrender.models import Page
from blockrender.rendering import render_page, render_properties
from blockrender.sources import BaseSource, ContentSourceError, JSONFileSource, MockSource, NotionSource
from blockrender.config import config


def setup_logging():
    """Configure logging for the application."""
    level = getattr(logging, config.get("logging.level", "INFO").upper())
    format_str = config.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    log_file = config.log_filename
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=handlers
    )


def get_output_path(page: Page, output_dir: str) -> Path:
    """
    Determine the output file path for a page based on its title.

    Args:
        page: The page to get the path for
        output_dir: Directory documents are written to

    Returns:
        Path of the page's Markdown file
    """
    # Create a safe filename from the page title, falling back to the id
    safe_name = (page.title or page.id).replace(' ', '_').replace('/', '_').replace('\\', '_')
    safe_name = ''.join(c for c in safe_name if c.isalnum() or c in '_-') or page.id

    return Path(output_dir) / f"{safe_name}{config.file_extension}"


def build_front_matter(properties: Dict[str, Any]) -> str:
    """Dump rendered properties as a YAML front matter block."""
    body = yaml.safe_dump(properties, allow_unicode=True, sort_keys=False, default_flow_style=False)
    return f"---\n{body}---\n\n"


async def render_document(page: Page, include_properties: bool = True) -> str:
    """
    Render a page to a complete Markdown document.

    Args:
        page: The populated page
        include_properties: Prepend the rendered properties as front matter

    Returns:
        The Markdown document
    """
    body = await render_page(page)
    if not include_properties:
        return body

    properties = await render_properties(page)
    return build_front_matter(properties) + body


def write_document(path: Path, content: str):
    """
    Write a rendered document, creating its directory if needed.

    Args:
        path: Destination file
        content: Rendered Markdown
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)

    logging.info(f"Wrote document: {path}")


def create_source(source_name: str, json_path: Optional[str] = None) -> BaseSource:
    """Instantiate the content source selected on the command line."""
    if source_name == "mock":
        return MockSource()
    if source_name == "json":
        if not json_path:
            raise ValueError("--json-path is required for the json source")
        return JSONFileSource(json_path)
    return NotionSource()


async def run_pipeline(source_name: str, page_ids: List[str], database_id: Optional[str],
                       json_path: Optional[str], output_dir: str, include_properties: bool) -> List[Path]:
    """
    Execute the pipeline: fetch -> render -> write.

    Returns:
        Paths of the written documents
    """
    logging.info(f"Starting blockrender pipeline with {source_name} source...")
    written: List[Path] = []

    async with create_source(source_name, json_path) as source:
        pages: List[Page] = []

        if database_id:
            pages.extend(await source.get_pages(database_id))
        for page_id in page_ids:
            pages.append(await source.fetch(page_id))

        if not pages and isinstance(source, MockSource):
            pages = [await source.fetch(page_id) for page_id in source.page_ids]
        elif not pages and isinstance(source, JSONFileSource):
            pages = await source.get_pages()

        logging.info(f"Retrieved {len(pages)} pages from {source_name} source")

        for i, page in enumerate(pages, 1):
            logging.info(f"Rendering page {i}/{len(pages)}: {page.title or page.id}")
            document = await render_document(page, include_properties)
            path = get_output_path(page, output_dir)
            write_document(path, document)
            written.append(path)

    logging.info(f"Pipeline completed. Wrote {len(written)} documents.")
    return written


def parse_arguments():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="blockrender - Render block-structured pages to Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                        # Render the built-in mock pages
  python main.py --source notion --page-id <id>         # Render one Notion page
  python main.py --source notion --database-id <id>     # Render every page of a database
  python main.py --source json --json-path export.json  # Render an offline export
        """
    )

    parser.add_argument(
        "--source",
        choices=["mock", "json", "notion"],
        default="mock",
        help="Content source to use (default: mock)"
    )

    parser.add_argument(
        "--page-id",
        dest="page_ids",
        action="append",
        default=[],
        help="Page to render (repeatable)"
    )

    parser.add_argument(
        "--database-id",
        type=str,
        help="Render every page of this database"
    )

    parser.add_argument(
        "--json-path",
        type=str,
        help="Path to exported page JSON (required for the json source)"
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for rendered documents (default: from config)"
    )

    parser.add_argument(
        "--no-properties",
        action="store_true",
        help="Do not prepend the property front matter"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"blockrender {__version__}"
    )

    return parser.parse_args()


def main():
    """Main entry point."""
    args = parse_arguments()
    setup_logging()

    logging.info("blockrender - Render block-structured pages to Markdown")

    try:
        written = asyncio.run(run_pipeline(
            args.source,
            args.page_ids,
            args.database_id,
            args.json_path,
            args.output_dir or config.output_directory,
            config.include_properties and not args.no_properties,
        ))

        print(f"\nRendered {len(written)} documents:")
        for path in written:
            print(f"- {path}")

    except KeyboardInterrupt:
        logging.info("Rendering interrupted by user")
        print("\nRendering interrupted.")

    except (ContentSourceError, ValueError, OSError) as e:
        logging.error(f"Rendering failed: {e}")
        print(f"\nRendering failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
