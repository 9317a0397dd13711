"""Shared test fixtures."""

from pathlib import Path

import pytest
from learnstage.config import BuildConfig, Config, ContentConfig, ServerConfig


def write_document(root: Path, relative_path: str, text: str) -> Path:
    """Write a content file, creating parent directories."""
    path = root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Create a content tree with documents in every collection."""
    root = tmp_path / "site"
    write_document(
        root,
        "content/instructors/jane-doe.md",
        "---\nfirstName: Jane\nlastName: Doe\nbio: Threat **hunter**.\n"
        "expertise:\n  - Azure Security\nslug: jane-doe\n---\n",
    )
    write_document(
        root,
        "content/labs/track-a/phishing-lab.mdx",
        "---\nname: Phishing Lab\nmodule: content/modules/track-a/module-1.mdx\n---\n"
        "Open the mailbox.\n",
    )
    write_document(
        root,
        "content/lessons/track-a/module-1/intro.mdx",
        "---\nname: Introduction\nmodule: content/modules/track-a/module-1.mdx\n"
        "lab: content/labs/track-a/phishing-lab.mdx\ndurationMinutes: 15\n---\n"
        "# Welcome\n\nFirst lesson.\n",
    )
    write_document(
        root,
        "content/modules/track-a/module-1.mdx",
        "---\nname: Module One\ninstructor: content/instructors/jane-doe.md\n---\n"
        "Module body.\n",
    )
    write_document(
        root,
        "content/tracks/soc-analyst.mdx",
        "---\nname: SOC Analyst\ndescription: Become a *SOC* analyst.\n"
        "publishedAt: 2024-05-01\n---\n",
    )
    write_document(
        root,
        "content/pages/home.mdx",
        "---\ntitle: Home\nblocks:\n  - _template: hero\n    headline: Learn security\n"
        "  - _template: unknown\n    text: ignored\n---\n",
    )
    return root


@pytest.fixture
def test_config(tmp_path: Path, content_dir: Path) -> Config:
    """Create a test configuration with tmp_path directories."""
    return Config(
        server=ServerConfig(),
        content=ContentConfig(content_dir=content_dir, page_size=2),
        build=BuildConfig(output_dir=tmp_path / "dist"),
    )
