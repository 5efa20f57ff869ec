"""Document tree models."""

from __future__ import annotations

from collections import Counter
from typing import Annotated, Iterator, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Snippet(BaseModel):
    """A fenced example block, tagged with its language."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["snippet"] = "snippet"
    language: str | None = None
    code: str = ""
    fence: str = "```"
    line: int = Field(default=1, ge=1)


class Prose(BaseModel):
    """Free text between headings and snippets."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["prose"] = "prose"
    text: str
    line: int = Field(default=1, ge=1)


Block = Annotated[Union[Prose, Snippet], Field(discriminator="kind")]


class Section(BaseModel):
    """A heading with its content and nested sections."""

    model_config = ConfigDict(frozen=True)

    title: str
    level: int = Field(..., ge=1, le=6)
    anchor: str
    explicit_anchor: bool = False
    line: int = Field(default=1, ge=1)
    blocks: tuple[Block, ...] = ()
    children: tuple["Section", ...] = ()

    @property
    def snippets(self) -> tuple[Snippet, ...]:
        return tuple(block for block in self.blocks if isinstance(block, Snippet))

    @property
    def body(self) -> str:
        return "\n\n".join(block.text for block in self.blocks if isinstance(block, Prose))

    def iter_sections(self) -> Iterator["Section"]:
        yield self
        for child in self.children:
            yield from child.iter_sections()


class Document(BaseModel):
    """A parsed reference document.

    ``preamble`` holds anything before the first heading; ``sections`` are the
    top-level headings in source order.
    """

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    preamble: tuple[Block, ...] = ()
    sections: tuple[Section, ...] = ()

    def iter_sections(self) -> Iterator[Section]:
        """Walk every section depth-first, in document order."""
        for section in self.sections:
            yield from section.iter_sections()

    def find(self, anchor: str) -> Section | None:
        for section in self.iter_sections():
            if section.anchor == anchor:
                return section
        return None

    @property
    def anchors(self) -> list[str]:
        return [section.anchor for section in self.iter_sections()]

    def iter_snippets(self) -> Iterator[Snippet]:
        """Every snippet in document order, preamble included."""
        for block in self.preamble:
            if isinstance(block, Snippet):
                yield block
        for section in self.iter_sections():
            yield from section.snippets

    @property
    def snippet_count(self) -> int:
        return sum(1 for _ in self.iter_snippets())

    @property
    def languages(self) -> dict[str, int]:
        """Snippet count per language tag, most common first."""
        counts: Counter[str] = Counter(snippet.language or "(untagged)" for snippet in self.iter_snippets())
        return dict(counts.most_common())
