"""Tests for section filtering and search."""

from __future__ import annotations

import pytest

from langref.parser import parse
from langref.sections import filter_blocks, filter_languages, filter_sections, normalize_section_title, search


@pytest.mark.parametrize(
    ("title", "normalized"),
    [
        ("  Concurrency ", "concurrency"),
        ("2.1 Error   Handling", "error handling"),
        ("Go Maps", "go maps"),
    ],
)
def test_normalize_section_title(title: str, normalized: str) -> None:
    assert normalize_section_title(title) == normalized


class TestFilterSections:
    """Tests for filter_sections."""

    def test_no_selection_returns_everything(self, sample_text: str) -> None:
        document = parse(sample_text)

        assert filter_sections(document.sections, mode="include", selected=[]) == document.sections

    def test_include_keeps_ancestors_and_subtree(self, sample_text: str) -> None:
        sections = filter_sections(parse(sample_text).sections, mode="include", selected=["Go"])

        root = sections[0]
        assert [child.anchor for child in root.children] == ["go"]
        assert [child.anchor for child in root.children[0].children] == ["go-concurrency", "go-maps"]

    def test_include_by_anchor(self, sample_text: str) -> None:
        sections = filter_sections(parse(sample_text).sections, mode="include", selected=["swift-actors"])

        swift = sections[0].children[0]
        assert swift.anchor == "swift"
        assert [child.anchor for child in swift.children] == ["swift-actors"]

    def test_exclude_drops_subtree(self, sample_text: str) -> None:
        sections = filter_sections(parse(sample_text).sections, mode="exclude", selected=["java"])

        assert [child.anchor for child in sections[0].children] == ["swift", "go"]

    def test_original_document_is_untouched(self, sample_text: str) -> None:
        document = parse(sample_text)

        filter_sections(document.sections, mode="exclude", selected=["Go"])

        assert len(document.sections[0].children) == 3

    def test_rejects_unknown_mode(self, sample_text: str) -> None:
        with pytest.raises(ValueError, match="Unknown section filter mode"):
            filter_sections(parse(sample_text).sections, mode="only", selected=["Go"])


class TestFilterLanguages:
    """Tests for filter_languages."""

    def test_keeps_only_selected_languages(self, sample_text: str) -> None:
        sections = filter_languages(parse(sample_text).sections, ["GO"])

        languages = {
            snippet.language
            for root in sections
            for section in root.iter_sections()
            for snippet in section.snippets
        }
        assert languages == {"go"}

    def test_prose_is_kept(self, sample_text: str) -> None:
        sections = filter_languages(parse(sample_text).sections, ["java"])

        actors = sections[0].children[0].children[0]
        assert actors.snippets == ()
        assert actors.body.startswith("Actors isolate mutable state.")

    def test_empty_selection_is_noop(self, sample_text: str) -> None:
        document = parse(sample_text)

        assert filter_languages(document.sections, []) == document.sections

    def test_filter_blocks_drops_untagged_snippets(self) -> None:
        blocks = parse("```go\nx\n```\n\n```\nplain\n```\n\nnotes\n").preamble

        kept = filter_blocks(blocks, ["go"])

        assert [type(block).__name__ for block in kept] == ["Snippet", "Prose"]
        assert kept[0].language == "go"


class TestSearch:
    """Tests for keyword search."""

    def test_finds_snippet_line(self, sample_text: str) -> None:
        hits = search(parse(sample_text), "worker")

        assert len(hits) == 1
        assert hits[0].anchor == "go-concurrency"
        assert hits[0].location == "snippet"
        assert hits[0].line == 22
        assert hits[0].excerpt == "go worker(ch)"

    def test_finds_title_and_prose(self, sample_text: str) -> None:
        hits = search(parse(sample_text), "actor")

        assert [(hit.anchor, hit.location) for hit in hits] == [
            ("swift-actors", "title"),
            ("swift-actors", "prose"),
            ("swift-actors", "snippet"),
        ]

    def test_case_sensitive(self, sample_text: str) -> None:
        document = parse(sample_text)

        assert search(document, "ACTOR", case_sensitive=True) == []
        assert search(document, "ACTOR")

    def test_empty_keyword(self, sample_text: str) -> None:
        assert search(parse(sample_text), "") == []

    def test_long_lines_are_truncated(self) -> None:
        document = parse("## A\n" + "needle " + "x" * 200 + "\n")

        excerpt = search(document, "needle")[0].excerpt

        assert len(excerpt) == 80
        assert excerpt.endswith("...")

    def test_preamble_is_searched(self, sample_text: str) -> None:
        """Text before the first heading is found too, without a section anchor."""
        hits = search(parse(sample_text), "ctrl+F")

        assert len(hits) == 1
        assert hits[0].anchor is None
        assert hits[0].title is None
        assert hits[0].location == "prose"
        assert hits[0].line == 1

    def test_preamble_snippet_is_searched(self) -> None:
        hits = search(parse("```go\nfmt.Println()\n```\n\n## A\n"), "println")

        assert [(hit.anchor, hit.location, hit.line) for hit in hits] == [(None, "snippet", 2)]
