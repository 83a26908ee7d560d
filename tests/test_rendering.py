"""
Tests for the rendering engine.

Covers rich text composition, block tree walking, list grouping, error
isolation and page property rendering.
"""

import asyncio
import unittest

from blockrender.models import Block
from blockrender.rendering import (
    Registry,
    default_block_renderers,
    default_inline_renderers,
    default_property_renderers,
    render_blocks,
    render_blocks_sync,
    render_page,
    render_properties,
)
from blockrender.rendering.context import RenderContext
from blockrender.rendering.registry import UNSUPPORTED_PLACEHOLDER
from blockrender.sources.mock import MockSource, raw_block, text_span


def mention_span(mention_type, value, plain_text):
    return {
        "type": "mention",
        "mention": {"type": mention_type, mention_type: value},
        "annotations": {"bold": False, "italic": False, "strikethrough": False,
                        "underline": False, "code": False, "color": "default"},
        "plain_text": plain_text,
        "href": None,
    }


def paragraph(text):
    return raw_block("paragraph", {"rich_text": [text_span(text)]})


class TestRichText(unittest.IsolatedAsyncioTestCase):
    """Test rich text composition."""

    def setUp(self):
        """Set up a context over the default registry."""
        self.ctx = RenderContext(registry=default_block_renderers)

    async def test_plain_run(self):
        """Test spans are concatenated in order."""
        result = await self.ctx.rich_text({"rich_text": [text_span("Hello "), text_span("world")]})
        self.assertEqual(result, "Hello world")

    async def test_bold_and_italic_order(self):
        """Test bold is applied before italic regardless of flag order."""
        span = text_span("hi", italic=True, bold=True)
        span["annotations"] = dict(reversed(list(span["annotations"].items())))

        result = await self.ctx.rich_text([span])
        self.assertEqual(result, "_**hi**_")

    async def test_whitespace_preserved_outside_markers(self):
        """Test leading/trailing whitespace stays outside the styling."""
        result = await self.ctx.rich_text([text_span(" hi ", bold=True)])
        self.assertEqual(result, " **hi** ")

    async def test_whitespace_only_span_unstyled(self):
        """Test whitespace-only spans are returned as-is."""
        result = await self.ctx.rich_text([text_span("   ", bold=True)])
        self.assertEqual(result, "   ")

    async def test_background_color(self):
        """Test background colors style the background."""
        result = await self.ctx.rich_text([text_span("x", color="red_background")])
        self.assertEqual(result, '<span data-color="red_background" style="background: red">x</span>')

    async def test_foreground_color(self):
        """Test plain colors style the text color."""
        result = await self.ctx.rich_text([text_span("x", color="blue")])
        self.assertEqual(result, '<span data-color="blue" style="color: blue">x</span>')

    async def test_link(self):
        """Test linked spans are wrapped last."""
        result = await self.ctx.rich_text([text_span("docs", bold=True, href="https://x")])
        self.assertEqual(result, "[**docs**](https://x)")

    async def test_missing_markup_function_skips_step(self):
        """Test an annotation with no markup function leaves text unchanged."""
        registry = Registry({key: value for key, value in default_block_renderers.items() if key != "bold"})
        ctx = RenderContext(registry=registry)

        result = await ctx.rich_text([text_span("hi", bold=True, code=True)])
        self.assertEqual(result, "`hi`")

    async def test_caption_priority(self):
        """Test a non-empty rich_text wins over caption, caption is used otherwise."""
        both = {"rich_text": [text_span("body")], "caption": [text_span("caption")]}
        only_caption = {"rich_text": [], "caption": [text_span("caption")]}

        self.assertEqual(await self.ctx.rich_text(both), "body")
        self.assertEqual(await self.ctx.rich_text(only_caption), "caption")

    async def test_no_rich_text_field(self):
        """Test containers without span fields render to None."""
        self.assertIsNone(await self.ctx.rich_text({"foo": 1}))
        self.assertIsNone(await self.ctx.rich_text(None))

    async def test_empty_run(self):
        """Test empty runs render to the empty string."""
        self.assertEqual(await self.ctx.rich_text([]), "")
        self.assertEqual(await self.ctx.rich_text({"caption": []}), "")

    async def test_concurrent_spans_keep_order(self):
        """Test spans finishing out of order are joined in input order."""
        delays = {"first": 0.03, "second": 0.0, "third": 0.01}

        async def slow_text(ctx, span):
            await asyncio.sleep(delays[span.content])
            return span.content

        ctx = RenderContext(registry=default_block_renderers.with_overrides(text=slow_text))
        result = await ctx.rich_text([text_span("first"), text_span("second"), text_span("third")])
        self.assertEqual(result, "firstsecondthird")

    async def test_unknown_span_type(self):
        """Test an unknown span type degrades to the registry default."""
        result = await self.ctx.rich_text([{"type": "template_mention", "plain_text": "x"}])
        self.assertEqual(result, "<!-- Default block -->\n")

    async def test_date_mention(self):
        """Test date mentions render their range."""
        span = mention_span("date", {"start": "2024-01-01", "end": "2024-01-03"}, "January 1")
        self.assertEqual(await self.ctx.rich_text([span]), "2024-01-01 - 2024-01-03")

    async def test_user_mention(self):
        """Test user mentions render as @name."""
        span = mention_span("user", {"id": "u1", "name": "Jane"}, "@Jane Doe")
        self.assertEqual(await self.ctx.rich_text([span]), "@Jane")

    async def test_page_mention(self):
        """Test page mentions render as links."""
        span = mention_span("page", {"id": "abc"}, "Roadmap")
        self.assertEqual(await self.ctx.rich_text([span]), "[Roadmap](abc)")

    async def test_unknown_mention_falls_back_to_plain_text(self):
        """Test mention types with no renderer use the span's plain text."""
        span = mention_span("template_mention", {"type": "today"}, "Today")
        self.assertEqual(await self.ctx.rich_text([span]), "Today")

    async def test_inline_equation(self):
        """Test inline equations render between single dollars."""
        span = {"type": "equation", "equation": {"expression": "e=mc^2"}, "plain_text": "e=mc^2"}
        self.assertEqual(await self.ctx.rich_text([span]), "$e=mc^2$")


class TestBlockRendering(unittest.IsolatedAsyncioTestCase):
    """Test block tree rendering."""

    async def test_order_preserved(self):
        """Test output order matches input order."""
        result = await render_blocks([paragraph("a"), paragraph("b"), paragraph("c")])
        self.assertEqual(result, ["a\n", "b\n", "c\n"])

    async def test_headings(self):
        """Test heading levels."""
        result = await render_blocks([
            raw_block("heading_1", {"rich_text": [text_span("One")]}),
            raw_block("heading_2", {"rich_text": [text_span("Two")]}),
            raw_block("heading_3", {"rich_text": [text_span("Three")]}),
        ])
        self.assertEqual(result, ["# One\n", "## Two\n", "### Three\n"])

    async def test_list_grouping(self):
        """Test a run of bulleted items becomes one element."""
        blocks = [
            raw_block("bulleted_list_item", {"rich_text": [text_span("one")]}),
            raw_block("bulleted_list_item", {"rich_text": [text_span("two")]}),
            raw_block("bulleted_list_item", {"rich_text": [text_span("three")]}),
            paragraph("after"),
        ]

        result = await render_blocks(blocks)
        self.assertEqual(result, ["- one\n- two\n- three\n", "after\n"])

    async def test_list_types_do_not_merge(self):
        """Test adjacent lists of different types stay separate."""
        blocks = [
            raw_block("bulleted_list_item", {"rich_text": [text_span("a")]}),
            raw_block("numbered_list_item", {"rich_text": [text_span("b")]}),
            raw_block("bulleted_list_item", {"rich_text": [text_span("c")]}),
        ]

        result = await render_blocks(blocks)
        self.assertEqual(result, ["- a\n", "1. b\n", "- c\n"])

    async def test_to_do_list(self):
        """Test checked and unchecked to-do items."""
        blocks = [
            raw_block("to_do", {"rich_text": [text_span("done")], "checked": True}),
            raw_block("to_do", {"rich_text": [text_span("open")], "checked": False}),
        ]

        result = await render_blocks(blocks)
        self.assertEqual(result, ["- [x] done\n- [ ] open\n"])

    async def test_nested_list_item(self):
        """Test children of a list item are nested under it."""
        blocks = [
            raw_block("bulleted_list_item", {"rich_text": [text_span("Hiring plan")]}, children=[
                raw_block("bulleted_list_item", {"rich_text": [text_span("Two engineers")]}),
            ]),
        ]

        result = await render_blocks(blocks)
        self.assertEqual(result, ["- Hiring plan\n  - Two engineers\n"])

    async def test_table(self):
        """Test tables get a header separator sized by table width."""
        blocks = [
            raw_block("table", {"table_width": 2}, children=[
                raw_block("table_row", {"cells": [[text_span("Owner")], [text_span("Task")]]}),
                raw_block("table_row", {"cells": [[text_span("Jane")], [text_span("Budget", code=True)]]}),
            ]),
        ]

        result = await render_blocks(blocks)
        self.assertEqual(result, ["| Owner | Task |\n| --- | --- |\n| Jane | `Budget` |\n"])
        self.assertEqual(result[0].count("---"), 2)

    async def test_table_without_declared_width(self):
        """Test the separator falls back to the header row's cell count."""
        blocks = [
            raw_block("table", {}, children=[
                raw_block("table_row", {"cells": [[text_span("A")], [text_span("B")], [text_span("C")]]}),
                raw_block("table_row", {"cells": [[text_span("1")], [text_span("2")], [text_span("3")]]}),
            ]),
        ]

        result = await render_blocks(blocks)
        self.assertEqual(result, ["| A | B | C |\n| --- | --- | --- |\n| 1 | 2 | 3 |\n"])

    async def test_unknown_block_is_logged(self):
        """Test unknown block types are reported at debug level."""
        with self.assertLogs(level="DEBUG") as logs:
            await render_blocks([raw_block("ai_summary", {})])

        self.assertTrue(any("Unknown block type 'ai_summary'" in line for line in logs.output))

    async def test_code_block(self):
        """Test code blocks are fenced with their language."""
        result = await render_blocks([
            raw_block("code", {"rich_text": [text_span("print(1)")], "language": "python"}),
        ])
        self.assertEqual(result, ["```python\nprint(1)\n```\n"])

    async def test_youtube_video(self):
        """Test short YouTube links are rewritten to embed URLs."""
        result = await render_blocks([
            raw_block("video", {"type": "external", "external": {"url": "https://youtu.be/abc"}}),
        ])
        self.assertIn('src="https://www.youtube.com/embed/abc"', result[0])

    async def test_equation_block(self):
        """Test equation blocks render as a display fence."""
        result = await render_blocks([raw_block("equation", {"expression": "a+b"})])
        self.assertEqual(result, ["$$\na+b\n$$\n"])

    async def test_unknown_block_uses_default(self):
        """Test unknown block types hit the registry default."""
        result = await render_blocks([raw_block("ai_summary", {"rich_text": []})])
        self.assertEqual(result, ["<!-- Default block -->\n"])

    async def test_unknown_block_without_default(self):
        """Test unknown block types degrade to the placeholder with no default."""
        registry = Registry({key: value for key, value in default_block_renderers.items() if key != "default"})

        result = await render_blocks([raw_block("ai_summary", {}), paragraph("after")], registry)
        self.assertEqual(result, [UNSUPPORTED_PLACEHOLDER, "after\n"])

    async def test_renderer_error_is_isolated(self):
        """Test a failing renderer yields a placeholder and later blocks still render."""
        async def broken(ctx, payload, content, children, block_id):
            raise RuntimeError("boom")

        registry = default_block_renderers.with_overrides(paragraph=broken)
        blocks = [paragraph("first"), raw_block("heading_1", {"rich_text": [text_span("Next")]})]

        with self.assertLogs(level="ERROR"):
            result = await render_blocks(blocks, registry)

        self.assertEqual(result, ["<!-- Render error: paragraph -->\n", "# Next\n"])

    async def test_sync_renderer_accepted(self):
        """Test plain functions work as renderers alongside coroutines."""
        def shout(ctx, payload, content, children, block_id):
            return content.upper() + "\n"

        registry = default_block_renderers.with_overrides(paragraph=shout)
        result = await render_blocks([paragraph("quiet")], registry)
        self.assertEqual(result, ["QUIET\n"])

    async def test_block_models_accepted(self):
        """Test Block models and raw dicts are interchangeable."""
        result = await render_blocks([Block.from_api(paragraph("model")), paragraph("raw")])
        self.assertEqual(result, ["model\n", "raw\n"])

    async def test_render_page(self):
        """Test a whole mock page renders into one document."""
        async with MockSource() as source:
            page = await source.fetch("mock-page-meeting")

        document = await render_page(page)

        self.assertTrue(document.startswith("# Weekly Sync\n"))
        self.assertIn("Met with **Jane** about the ", document)
        self.assertIn("- Budget approved\n- Hiring plan\n  - Two engineers\n- Launch date\n", document)
        self.assertIn("1. Draft proposal\n1. Review with team\n", document)
        self.assertIn('<div data-callout="💡">Next sync on Friday</div>', document)


class TestSyncWrapper(unittest.TestCase):
    """Test the blocking entry point."""

    def test_render_blocks_sync(self):
        """Test rendering outside an event loop."""
        result = render_blocks_sync([raw_block("divider", {}), paragraph("end")])
        self.assertEqual(result, ["---\n", "end\n"])


class TestPropertyRendering(unittest.IsolatedAsyncioTestCase):
    """Test page property rendering."""

    async def asyncSetUp(self):
        """Load the mock pages."""
        source = MockSource()
        self.meeting = await source.fetch("mock-page-meeting")
        self.reference = await source.fetch("mock-page-reference")

    async def test_meeting_properties(self):
        """Test every property type of the meeting page."""
        result = await render_properties(self.meeting)

        self.assertEqual(result, {
            "name": "Weekly Sync",
            "tags": ["meeting", "team"],
            "due_date": "2024-05-22",
            "done": False,
            "cover": "https://example.com/cover.png",
            "icon": "📝",
        })
        self.assertEqual(list(result), ["name", "tags", "due_date", "done", "cover", "icon"])

    async def test_idempotent(self):
        """Test rendering the same page twice gives the same result."""
        first = await render_properties(self.meeting)
        second = await render_properties(self.meeting)
        self.assertEqual(first, second)

    async def test_name_override(self):
        """Test a renderer keyed by property name wins over the type renderer."""
        registry = default_property_renderers.with_overrides(Tags=lambda ctx, value, page_id: "custom")

        result = await render_properties(self.meeting, registry)
        self.assertEqual(result["tags"], "custom")
        self.assertEqual(result["done"], False)

    async def test_missing_cover_and_icon(self):
        """Test absent cover/icon render to None."""
        result = await render_properties(self.reference)

        self.assertEqual(result["status"], "In progress")
        self.assertIsNone(result["cover"])
        self.assertIsNone(result["icon"])

    async def test_property_names_matching_span_renderers(self):
        """Test properties named like inline renderers still render by type."""
        result = await render_properties({
            "id": "p1",
            "properties": {
                "Link": {"type": "url", "url": "https://example.com"},
                "Text": {"type": "rich_text", "rich_text": [text_span("body", bold=True)]},
                "Page": {"type": "relation", "relation": [{"id": "r1"}, {"id": "r2"}]},
                "User": {"type": "people", "people": [{"id": "u1", "name": "Ana"}]},
                "Color": {"type": "select", "select": {"name": "Blue"}},
                "Mention": {"type": "checkbox", "checkbox": True},
            },
        })

        self.assertEqual(result["link"], "https://example.com")
        self.assertEqual(result["text"], "**body**")
        self.assertEqual(result["page"], ["r1", "r2"])
        self.assertEqual(result["user"], ["Ana"])
        self.assertEqual(result["color"], "Blue")
        self.assertTrue(result["mention"])

    async def test_inline_registry_override(self):
        """Test rich text property values use the inline registry passed in."""
        inline = default_inline_renderers.with_overrides(bold=lambda content: f"<b>{content}</b>")

        result = await render_properties({
            "id": "p1",
            "properties": {"Name": {"type": "title", "title": [text_span("Hi", bold=True)]}},
        }, inline_registry=inline)

        self.assertEqual(result["name"], "<b>Hi</b>")

    async def test_raw_page_accepted(self):
        """Test raw page objects are accepted."""
        result = await render_properties({
            "id": "p1",
            "properties": {
                "Score": {"type": "number", "number": 7},
                "Owner": {"type": "people", "people": [{"id": "u1", "name": "Ana"}]},
                "Total": {"type": "formula", "formula": {"type": "number", "number": 42}},
            },
        })

        self.assertEqual(result["score"], 7)
        self.assertEqual(result["owner"], ["Ana"])
        self.assertEqual(result["total"], 42)


if __name__ == "__main__":
    unittest.main()
