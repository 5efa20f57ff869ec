"""Tests for the section parser."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from langref.exceptions import DuplicateAnchorError, ParseError, UnterminatedFenceError
from langref.parser import parse
from langref.schemas import Prose, Snippet


class TestScenario:
    """The canonical heading + snippet case."""

    def test_html_heading_with_go_snippet(self) -> None:
        """An anchored h3 followed by a go fence yields one section with one snippet."""
        text = '<h3 id="go-concurrency">Concurrency</h3>\n\n```go\ngo worker(ch)\n```\n'

        document = parse(text)

        assert len(document.sections) == 1
        section = document.sections[0]
        assert section.title == "Concurrency"
        assert section.anchor == "go-concurrency"
        assert section.level == 3
        assert section.explicit_anchor is True
        assert len(section.snippets) == 1
        assert section.snippets[0].language == "go"
        assert section.snippets[0].code == "go worker(ch)"


class TestHierarchy:
    """Tests for heading-level nesting."""

    def test_sample_tree_shape(self, sample_text: str) -> None:
        """Nesting follows heading levels across HTML and ATX headings."""
        document = parse(sample_text)

        assert document.title == "Language Reference"
        assert [s.title for s in document.sections] == ["Language Reference"]
        root = document.sections[0]
        assert [s.anchor for s in root.children] == ["swift", "go", "java"]
        go = root.children[1]
        assert [s.anchor for s in go.children] == ["go-concurrency", "go-maps"]
        assert root.children[2].children[0].anchor == "generics"

    def test_anchors_in_document_order(self, sample_text: str) -> None:
        document = parse(sample_text)

        assert document.anchors == [
            "language-reference",
            "swift",
            "swift-actors",
            "go",
            "go-concurrency",
            "go-maps",
            "java",
            "generics",
        ]

    def test_skipped_level_nests_under_nearest_lower_heading(self) -> None:
        """An h3 directly after an h1 becomes its child."""
        document = parse("# Top\n### Deep\n## Mid\n")

        top = document.sections[0]
        assert [child.title for child in top.children] == ["Deep", "Mid"]

    def test_same_level_headings_are_siblings(self) -> None:
        document = parse("## A\n## B\n## C\n")

        assert [s.title for s in document.sections] == ["A", "B", "C"]
        assert all(not s.children for s in document.sections)

    def test_records_heading_line_numbers(self, sample_text: str) -> None:
        document = parse(sample_text)

        assert document.find("swift").line == 5
        assert document.find("go-maps").line == 25


class TestEmptyDocuments:
    """Boundary cases with no headings."""

    def test_empty_text(self) -> None:
        document = parse("")

        assert document.sections == ()
        assert document.preamble == ()
        assert document.title is None

    def test_prose_only_is_not_an_error(self) -> None:
        """Text without headings becomes preamble, not a failure."""
        document = parse("Just some notes.\n\nNo headings here.\n")

        assert document.sections == ()
        assert len(document.preamble) == 1
        assert isinstance(document.preamble[0], Prose)
        assert document.preamble[0].text == "Just some notes.\n\nNo headings here."


class TestFences:
    """Tests for fenced code block handling."""

    def test_heading_inside_fence_is_code(self) -> None:
        """A '#' line inside a fence is not a heading."""
        text = "## Shell\n```bash\n# install deps\nmake\n```\n"

        document = parse(text)

        assert document.anchors == ["shell"]
        assert document.sections[0].snippets[0].code == "# install deps\nmake"

    def test_tilde_fence(self) -> None:
        document = parse("## A\n~~~swift\nlet x = 1\n~~~\n")

        snippet = document.sections[0].snippets[0]
        assert snippet.language == "swift"
        assert snippet.fence == "~~~"

    def test_shorter_fence_does_not_close(self) -> None:
        """A ``` line inside a ```` fence is part of the code."""
        text = "## A\n````markdown\n```go\nx\n```\n````\n"

        snippet = parse(text).sections[0].snippets[0]

        assert snippet.language == "markdown"
        assert snippet.code == "```go\nx\n```"

    def test_mismatched_fence_char_does_not_close(self) -> None:
        text = "## A\n```\n~~~\n```\n"

        snippet = parse(text).sections[0].snippets[0]

        assert snippet.code == "~~~"

    def test_untagged_fence_has_no_language(self) -> None:
        snippet = parse("## A\n```\nplain\n```\n").sections[0].snippets[0]

        assert snippet.language is None

    def test_info_string_uses_first_word(self) -> None:
        snippet = parse('## A\n```java title="Main.java"\nclass Main {}\n```\n').sections[0].snippets[0]

        assert snippet.language == "java"

    def test_indented_fence_is_dedented(self) -> None:
        text = "## A\n  ```go\n  if ok {\n      run()\n  }\n  ```\n"

        snippet = parse(text).sections[0].snippets[0]

        assert snippet.code == "if ok {\n    run()\n}"

    def test_form_feed_stays_inside_code(self) -> None:
        """Only \\n, \\r\\n and \\r end a line."""
        document = parse("## A\n```\na\x0cb\n```\nafter\n")

        section = document.sections[0]
        assert section.snippets[0].code == "a\x0cb"
        assert section.blocks[1].line == 5

    def test_crlf_line_endings(self) -> None:
        document = parse("## A\r\n```go\r\nx\r\n```\r\n")

        assert document.sections[0].snippets[0].code == "x"

    def test_prose_and_snippets_keep_source_order(self) -> None:
        text = "## A\nbefore\n```go\nx\n```\nafter\n"

        blocks = parse(text).sections[0].blocks

        assert [type(block) for block in blocks] == [Prose, Snippet, Prose]
        assert blocks[0].text == "before"
        assert blocks[2].text == "after"
        assert blocks[2].line == 6


class TestMalformedInput:
    """Structural errors surface instead of being repaired."""

    def test_unterminated_fence_raises(self) -> None:
        text = "## A\n\n```go\nfunc main() {}\n"

        with pytest.raises(UnterminatedFenceError, match="line 3") as exc_info:
            parse(text)

        assert exc_info.value.line == 3

    def test_unterminated_fence_is_a_parse_error(self) -> None:
        with pytest.raises(ParseError):
            parse("```\n")

    def test_duplicate_explicit_anchor_raises(self) -> None:
        text = '<h2 id="dup">One</h2>\n\n<h2 id="dup">Two</h2>\n'

        with pytest.raises(DuplicateAnchorError) as exc_info:
            parse(text)

        assert exc_info.value.anchor == "dup"
        assert exc_info.value.first_line == 1
        assert exc_info.value.line == 3


class TestAnchorsFromSource:
    """Tests for the ways a document can declare an anchor."""

    def test_inline_anchor_in_atx_heading(self, sample_text: str) -> None:
        section = parse(sample_text).find("go-maps")

        assert section is not None
        assert section.title == "Maps"
        assert section.explicit_anchor is True

    def test_anchor_line_binds_to_next_heading(self) -> None:
        document = parse('<a name="java-streams"></a>\n## Streams\n')

        assert document.anchors == ["java-streams"]
        assert document.preamble == ()

    def test_anchor_line_without_heading_stays_prose(self) -> None:
        document = parse('<a id="lonely"></a>\n\nSome text.\n')

        assert document.sections == ()
        assert document.preamble[0].text == '<a id="lonely"></a>\n\nSome text.'

    def test_inline_anchor_keeps_generic_type_in_title(self) -> None:
        """Angle brackets around a type parameter are title text, not markup."""
        section = parse('### List<String> <a id="java-list"></a>\n').sections[0]

        assert section.title == "List<String>"
        assert section.anchor == "java-list"
        assert section.explicit_anchor is True

    def test_generic_type_title_without_anchor_is_untouched(self) -> None:
        assert parse("## Map<K, V>\n").sections[0].title == "Map<K, V>"

    def test_generated_anchor_from_title(self) -> None:
        section = parse("## Error Handling\n").sections[0]

        assert section.anchor == "error-handling"
        assert section.explicit_anchor is False

    def test_html_heading_entities_and_markup(self) -> None:
        section = parse('<h3 id="java-generics">Generics &amp; <code>List&lt;T&gt;</code></h3>\n').sections[0]

        assert section.title == "Generics & List<T>"

    def test_closing_hashes_are_removed(self) -> None:
        assert parse("## Closures ##\n").sections[0].title == "Closures"

    def test_hash_without_space_is_prose(self) -> None:
        document = parse("#notaheading\n")

        assert document.sections == ()


class TestPreamble:
    """Content before the first heading."""

    def test_preamble_snippets_are_counted(self) -> None:
        document = parse("```go\nx\n```\n\n## A\n```swift\ny\n```\n")

        assert document.snippet_count == 2
        assert document.languages == {"go": 1, "swift": 1}
        assert [snippet.language for snippet in document.iter_snippets()] == ["go", "swift"]


class TestImmutability:
    """Parsed documents are frozen."""

    def test_section_cannot_be_mutated(self, sample_text: str) -> None:
        section = parse(sample_text).sections[0]

        with pytest.raises(ValidationError):
            section.title = "Changed"  # type: ignore[misc]

    def test_children_are_tuples(self, sample_text: str) -> None:
        document = parse(sample_text)

        assert isinstance(document.sections, tuple)
        assert isinstance(document.sections[0].children, tuple)

    def test_bom_is_ignored(self) -> None:
        assert parse("\ufeff# Title\n").anchors == ["title"]
