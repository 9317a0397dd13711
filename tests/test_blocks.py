"""Tests for block dispatch."""

from learnstage.core.blocks import block_type, render_blocks


class TestBlockType:
    """Tests for block_type()."""

    def test__template_key(self) -> None:
        """Read the stored template name."""
        assert block_type({"_template": "hero"}) == "hero"

    def test__typename(self) -> None:
        """Strip the GraphQL type prefix."""
        assert block_type({"__typename": "PageBlocksCta"}) == "cta"

    def test__missing_tag(self) -> None:
        """Return None for untagged blocks."""
        assert block_type({"headline": "x"}) is None
        assert block_type({"__typename": "PageBlocks"}) is None


class TestRenderBlocks:
    """Tests for render_blocks()."""

    def test__blocks__rendered_in_order(self) -> None:
        """Keep the stored block order."""
        html = render_blocks(
            [
                {"_template": "callout", "text": "First"},
                {"_template": "cta", "title": "Second"},
            ]
        )

        assert html.index("First") < html.index("Second")

    def test__unknown_block__skipped(self) -> None:
        """Render nothing for unknown or untagged blocks."""
        html = render_blocks(
            [
                {"_template": "carousel", "text": "nope"},
                {"text": "untagged"},
                "not a block",
                {"_template": "callout", "text": "kept"},
            ]
        )

        assert "nope" not in html
        assert "untagged" not in html
        assert "kept" in html

    def test__none__empty(self) -> None:
        """Render nothing without blocks."""
        assert render_blocks(None) == ""

    def test__hero__headline_actions_image(self) -> None:
        """Render hero headline, actions and image."""
        html = render_blocks(
            [
                {
                    "_template": "hero",
                    "tagline": "New",
                    "headline": "Learn security",
                    "text": "Hands-on labs.",
                    "actions": [{"label": "Start", "link": "/tracks"}, {"link": "/no-label"}],
                    "image": {"src": "/hero.png", "alt": "Hero"},
                }
            ]
        )

        assert "<h1>Learn security</h1>" in html
        assert '<a class="action" href="/tracks">Start</a>' in html
        assert "/no-label" not in html
        assert '<img src="/hero.png" alt="Hero">' in html

    def test__text__escaped(self) -> None:
        """Escape HTML in text fields."""
        html = render_blocks([{"_template": "callout", "text": "<script>x</script>"}])

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test__stats__items(self) -> None:
        """Render each stat with its label."""
        html = render_blocks(
            [{"__typename": "PageBlocksStats", "title": "Numbers", "stats": [{"stat": "10k", "type": "Learners"}]}]
        )

        assert "<strong>10k</strong>" in html
        assert "Learners" in html

    def test__content__markdown_body(self) -> None:
        """Render content block bodies as markdown."""
        html = render_blocks([{"_template": "content", "body": "Some **bold** text"}])

        assert "<strong>bold</strong>" in html

    def test__video__without_url__empty(self) -> None:
        """Skip video blocks without a URL."""
        assert render_blocks([{"_template": "video"}]) == ""
        assert 'src="https://video.example/1"' in render_blocks(
            [{"_template": "video", "url": "https://video.example/1"}]
        )
