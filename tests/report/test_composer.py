"""Tests for template loading and report composition."""

from __future__ import annotations

from pathlib import Path

import pytest

import commentlinks.report.loader as loader_module
from commentlinks.errors import TemplateMissingError
from commentlinks.models import (
    LinkCandidate,
    LinkKind,
    RepoIdentity,
    ReportVariant,
    ValidatedLink,
    ValidationOutcome,
)
from commentlinks.report.composer import NONE_SENTINEL, ReportComposer, substitute
from commentlinks.report.fallbacks import fallback_template
from commentlinks.report.loader import TemplateLoader

REPO = RepoIdentity(owner="acme", name="widgets", commit_sha="abc123")


def _relative(valid: bool = True) -> ValidatedLink:
    return ValidatedLink(
        filename="src/app.js",
        link=LinkCandidate(text="../docs/guide.md", kind=LinkKind.RELATIVE),
        outcome=ValidationOutcome(
            valid=valid,
            resolved_path="docs/guide.md",
            message=None if valid else "File not found",
        ),
    )


def _absolute(status: int) -> ValidatedLink:
    return ValidatedLink(
        filename="lib/client.py",
        link=LinkCandidate(text="https://api.example.com/missing", kind=LinkKind.ABSOLUTE),
        outcome=ValidationOutcome(valid=200 <= status <= 399, status_code=status),
    )


def _loader_with(tmp_path: Path, files: dict[str, str]) -> TemplateLoader:
    templates = tmp_path / "templates"
    templates.mkdir()
    for name, text in files.items():
        (templates / name).write_text(text, encoding="utf-8")
    return TemplateLoader(templates)


def test_substitute_replaces_first_occurrence_only() -> None:
    rendered = substitute("{{LINK_COUNT}} and {{LINK_COUNT}}", {"{{LINK_COUNT}}": "2"})

    assert rendered == "2 and {{LINK_COUNT}}"


def test_substitute_does_not_rescan_inserted_text() -> None:
    rendered = substitute(
        "{{LINKS}} {{VALID_LINKS}}",
        {"{{LINKS}}": "{{VALID_LINKS}}", "{{VALID_LINKS}}": "ok"},
    )

    assert rendered == "{{VALID_LINKS}} ok"


def test_split_placeholders_group_broken_and_valid_links(tmp_path: Path) -> None:
    loader = _loader_with(
        tmp_path,
        {"pending.md": "count={{LINK_COUNT}}\nBROKEN:\n{{BROKEN_LINKS}}\nVALID:\n{{VALID_LINKS}}\n"},
    )
    composer = ReportComposer(loader, REPO)

    markdown = composer.compose(ReportVariant.PENDING, [_relative(), _absolute(404)])

    assert markdown.startswith("count=2\n")
    broken, valid = markdown.split("VALID:")
    assert "https://api.example.com/missing" in broken
    assert "HTTP 404" in broken
    assert "docs/guide.md" in valid
    assert "docs/guide.md" not in broken


def test_unified_placeholder_lists_every_link(tmp_path: Path) -> None:
    loader = _loader_with(tmp_path, {"all-updated.md": "{{LINK_COUNT}}\n{{LINKS}}\n"})
    composer = ReportComposer(loader, REPO)

    markdown = composer.compose(ReportVariant.ALL_UPDATED, [_relative()])

    assert markdown.startswith("1\n→ [`docs/guide.md`]")
    assert "(https://github.com/acme/widgets/blob/abc123/docs/guide.md)" in markdown
    assert "relative `../docs/guide.md`" in markdown
    assert "Referenced in: [`src/app.js`](https://github.com/acme/widgets/blob/abc123/src/app.js)" in markdown


def test_absolute_link_block_names_url_and_kind(tmp_path: Path) -> None:
    composer = ReportComposer(TemplateLoader(), REPO)

    block = composer.format_link(_absolute(404))

    assert block.splitlines() == [
        "→ [https://api.example.com/missing](https://api.example.com/missing) · absolute · ❌ HTTP 404",
        "  Referenced in: [`lib/client.py`](https://github.com/acme/widgets/blob/abc123/lib/client.py)",
    ]


def test_empty_lists_render_the_none_sentinel(tmp_path: Path) -> None:
    loader = _loader_with(tmp_path, {"pending.md": "{{BROKEN_LINKS}}|{{VALID_LINKS}}"})
    composer = ReportComposer(loader, REPO)

    markdown = composer.compose(ReportVariant.PENDING, [_absolute(200)])

    broken, valid = markdown.split("|")
    assert broken == NONE_SENTINEL
    assert "https://api.example.com/missing" in valid


def test_compose_is_deterministic() -> None:
    composer = ReportComposer(TemplateLoader(), REPO)
    links = [_relative(), _absolute(404), _relative(valid=False)]

    assert composer.compose(ReportVariant.PENDING, links) == composer.compose(ReportVariant.PENDING, links)


def test_packaged_templates_expand_every_placeholder() -> None:
    composer = ReportComposer(TemplateLoader(), REPO)

    for variant in ReportVariant:
        markdown = composer.compose(variant, [_relative()] if variant is not ReportVariant.NO_LINKS else [])
        assert "{{" not in markdown


def test_loader_prefers_custom_directory(tmp_path: Path) -> None:
    loader = _loader_with(tmp_path, {"no-links.md": "custom"})

    assert loader.load(ReportVariant.NO_LINKS) == "custom"
    assert "Comment link check" in loader.load(ReportVariant.PENDING)


def test_loader_raises_template_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    empty = tmp_path / "empty"
    empty.mkdir()
    monkeypatch.setattr(loader_module, "DEFAULT_TEMPLATES_DIR", empty)

    with pytest.raises(TemplateMissingError):
        TemplateLoader().load(ReportVariant.PENDING)


class _MissingTemplates(TemplateLoader):
    def load(self, variant: ReportVariant) -> str:
        raise TemplateMissingError(self.template_name(variant))


def test_missing_template_falls_back_to_builtin_text() -> None:
    composer = ReportComposer(_MissingTemplates(), REPO)

    markdown = composer.compose(ReportVariant.PENDING, [_absolute(404)])

    assert markdown.startswith(fallback_template(ReportVariant.PENDING).split("{{", 1)[0])
    assert "Found 1 link(s)" in markdown
    assert "HTTP 404" in markdown
    assert "{{" not in markdown


def test_relative_link_outside_repository_renders_without_permalink() -> None:
    item = ValidatedLink(
        filename="src/app.js",
        link=LinkCandidate(text="../../secret.md", kind=LinkKind.RELATIVE),
        outcome=ValidationOutcome(valid=False, message="Outside repository"),
    )

    block = ReportComposer(TemplateLoader(), REPO).format_link(item)

    assert block.splitlines() == [
        "→ `../../secret.md` · relative · ❌ Outside repository",
        "  Referenced in: [`src/app.js`](https://github.com/acme/widgets/blob/abc123/src/app.js)",
    ]
