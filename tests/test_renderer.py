"""Tests for DocumentRenderer."""

from pathlib import Path

import pytest
from learnstage.core.collections import INSTRUCTOR, LESSON, PAGE, TRACK
from learnstage.core.documents import Document, DocumentSys
from learnstage.core.renderer import BreadcrumbItem, DocumentRenderer


def make_document(collection: str, relative_path: str, body: str = "", **fields) -> Document:
    return Document(
        sys=DocumentSys.from_relative_path(collection, relative_path),
        fields=fields,
        body=body,
    )


class TestDocumentRenderer:
    """Tests for DocumentRenderer.render()."""

    @pytest.fixture
    def renderer(self) -> DocumentRenderer:
        return DocumentRenderer()

    def test__body__rendered_as_html(self, renderer: DocumentRenderer) -> None:
        """Render the markdown body."""
        document = make_document("lesson", "a/intro.mdx", "# Welcome\n\nFirst *lesson*.", name="Intro")

        result = renderer.render(LESSON, document)

        assert "<h1>Welcome</h1>" in result.html
        assert "<em>lesson</em>" in result.html

    def test__mdx_component__passes_through(self, renderer: DocumentRenderer) -> None:
        """Leave MDX component tags in the output."""
        document = make_document(
            "lesson", "a/intro.mdx", '<Callout type="info">Note</Callout>\n', name="Intro"
        )

        result = renderer.render(LESSON, document)

        assert '<Callout type="info">' in result.html

    def test__empty_body__empty_html(self, renderer: DocumentRenderer) -> None:
        """Render nothing for a whitespace-only body."""
        document = make_document("track", "soc.mdx", "\n\n", name="SOC")

        result = renderer.render(TRACK, document)

        assert result.html == ""

    def test__title__joins_title_fields(self, renderer: DocumentRenderer) -> None:
        """Join first and last name for instructors."""
        document = make_document("instructor", "jane-doe.md", firstName="Jane", lastName="Doe")

        result = renderer.render(INSTRUCTOR, document)

        assert result.title == "Jane Doe"

    def test__title__falls_back_to_filename(self, renderer: DocumentRenderer) -> None:
        """Use the filename when title fields are missing."""
        document = make_document("lesson", "a/intro.mdx")

        result = renderer.render(LESSON, document)

        assert result.title == "intro"

    def test__path__from_identifier(self, renderer: DocumentRenderer) -> None:
        """Route rendered documents by their collection scheme."""
        instructor = renderer.render(INSTRUCTOR, make_document("instructor", "jane-doe.md"))
        lesson = renderer.render(LESSON, make_document("lesson", "a/b/intro.mdx"))

        assert instructor.identifier == "jane-doe"
        assert instructor.path == "/instructors/jane-doe"
        assert lesson.identifier == ("a", "b", "intro")
        assert lesson.path == "/lessons/a/b/intro"

    def test__rich_text_fields__rendered(self, renderer: DocumentRenderer) -> None:
        """Render rich-text front matter fields to HTML."""
        document = make_document("instructor", "jane-doe.md", bio="Threat **hunter**.")

        result = renderer.render(INSTRUCTOR, document)

        assert "<strong>hunter</strong>" in result.fields["bio"]

    def test__reference_fields__resolved(self, renderer: DocumentRenderer) -> None:
        """Resolve references to the target route."""
        document = make_document(
            "lesson",
            "a/intro.mdx",
            module="content/modules/a/module-1.mdx",
            lab="content/labs/a/lab-1.mdx",
        )

        result = renderer.render(LESSON, document)

        assert result.fields["module"] == {
            "value": "content/modules/a/module-1.mdx",
            "path": "/modules/a/module-1",
        }
        assert result.fields["lab"]["path"] == "/labs/a/lab-1"

    def test__topic_reference__resolved(self, renderer: DocumentRenderer) -> None:
        """Resolve a track's topic to the topic route."""
        document = make_document("track", "soc.mdx", name="SOC", topic="content/topics/kql.md")

        result = renderer.render(TRACK, document)

        assert result.fields["topic"] == {"value": "content/topics/kql.md", "path": "/topics/kql"}

    def test__breadcrumbs__nested_document(self, renderer: DocumentRenderer) -> None:
        """Build Home, collection index and ancestors, excluding the page."""
        result = renderer.render(LESSON, make_document("lesson", "track-a/module-1/intro.mdx"))

        assert result.breadcrumbs == [
            BreadcrumbItem(title="Home", path="/"),
            BreadcrumbItem(title="Lessons", path="/lessons"),
            BreadcrumbItem(title="track-a", path="/lessons/track-a"),
            BreadcrumbItem(title="module-1", path="/lessons/track-a/module-1"),
        ]

    def test__breadcrumbs__home_page(self, renderer: DocumentRenderer) -> None:
        """The home page only has the Home crumb."""
        result = renderer.render(PAGE, make_document("page", "home.mdx", title="Home"))

        assert result.path == "/"
        assert result.breadcrumbs == [BreadcrumbItem(title="Home", path="/")]

    def test__blocks__rendered_before_body(self, renderer: DocumentRenderer) -> None:
        """Render page blocks ahead of the body."""
        document = make_document(
            "page",
            "home.mdx",
            "Footer text.",
            title="Home",
            blocks=[{"_template": "hero", "headline": "Learn"}],
        )

        result = renderer.render(PAGE, document)

        assert result.html.index("<h1>Learn</h1>") < result.html.index("Footer text.")

    def test__to_dict__payload_shape(self, renderer: DocumentRenderer) -> None:
        """Serialize meta, breadcrumbs, fields and content."""
        document = make_document("track", "soc.mdx", "Body", name="SOC")
        document.source_path = Path("/content/tracks/soc.mdx")

        data = renderer.render(TRACK, document).to_dict()

        assert data["meta"] == {
            "collection": "track",
            "title": "SOC",
            "path": "/tracks/soc",
            "source_file": "/content/tracks/soc.mdx",
        }
        assert data["breadcrumbs"][0] == {"title": "Home", "path": "/"}
        assert data["fields"]["name"] == "SOC"
        assert "Body" in data["content"]
