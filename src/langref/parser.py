"""Parse reference markdown into a document tree."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from langref.anchors import HeadingRef, assign_anchors
from langref.exceptions import UnterminatedFenceError
from langref.html_utils import extract_inline_anchor, parse_anchor_line, parse_html_heading
from langref.schemas import Block, Document, Prose, Section, Snippet

logger = logging.getLogger(__name__)

_FENCE_OPEN_RE = re.compile(r"^(?P<indent> {0,3})(?P<marker>`{3,}|~{3,})(?P<info>.*)$")
_FENCE_CLOSE_RE = re.compile(r"^ {0,3}(?P<marker>`{3,}|~{3,})[ \t]*$")
_ATX_HEADING_RE = re.compile(r"^ {0,3}(?P<hashes>#{1,6})[ \t]+(?P<title>.*?)(?:[ \t]+#+)?[ \t]*$")
_HTML_HEADING_RE = re.compile(r"^\s*<h(?P<level>[1-6])\b[^>]*>.*</h(?P=level)\s*>\s*$", re.IGNORECASE)
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class _Fence:
    indent: int
    marker: str
    language: str | None


@dataclass(frozen=True)
class _Heading:
    level: int
    title: str
    anchor: str | None


@dataclass
class _DraftSection:
    level: int
    title: str
    line: int
    explicit_anchor: str | None
    anchor: str = ""
    blocks: list[Block] = field(default_factory=list)
    children: list["_DraftSection"] = field(default_factory=list)


@dataclass
class _PendingAnchor:
    anchor: str
    raw: str
    line: int


class _DocumentBuilder:
    """Accumulates blocks under the most recent heading while scanning."""

    def __init__(self) -> None:
        self.preamble: list[Block] = []
        self.sections: list[_DraftSection] = []
        self._prose: list[tuple[int, str]] = []
        self._pending: _PendingAnchor | None = None

    @property
    def _target(self) -> list[Block]:
        return self.sections[-1].blocks if self.sections else self.preamble

    def add_prose_line(self, line_no: int, text: str) -> None:
        self.release_anchor()
        self._prose.append((line_no, text))

    def add_snippet(self, snippet: Snippet) -> None:
        self.release_anchor()
        self.flush_prose()
        self._target.append(snippet)

    def hold_anchor(self, anchor: str, raw: str, line_no: int) -> None:
        self.release_anchor()
        self._pending = _PendingAnchor(anchor=anchor, raw=raw, line=line_no)

    def release_anchor(self) -> None:
        """Demote a held anchor line back to prose; it did not precede a heading."""
        pending, self._pending = self._pending, None
        if pending is not None:
            self._prose.append((pending.line, pending.raw))

    def start_section(self, heading: _Heading, line_no: int) -> None:
        anchor = heading.anchor
        if anchor is None and self._pending is not None:
            anchor = self._pending.anchor
            self._pending = None
        else:
            self.release_anchor()
        self.flush_prose()
        self.sections.append(
            _DraftSection(level=heading.level, title=heading.title, line=line_no, explicit_anchor=anchor)
        )

    def flush_prose(self) -> None:
        lines, self._prose = self._prose, []
        while lines and not lines[0][1].strip():
            lines.pop(0)
        while lines and not lines[-1][1].strip():
            lines.pop()
        if lines:
            text = "\n".join(text for _, text in lines)
            self._target.append(Prose(text=text, line=lines[0][0]))

    def finish(self) -> None:
        self.release_anchor()
        self.flush_prose()


def parse(document_text: str) -> Document:
    """Parse markdown text into an immutable ``Document``.

    Raises:
        UnterminatedFenceError: A fenced block runs to end of input.
        DuplicateAnchorError: Two headings declare the same explicit id.
    """
    lines = _split_lines(document_text.lstrip("\ufeff"))
    builder = _DocumentBuilder()

    index = 0
    while index < len(lines):
        line = lines[index]
        line_no = index + 1

        fence = _match_fence_open(line)
        if fence is not None:
            end = _find_fence_close(lines, index + 1, fence)
            if end is None:
                raise UnterminatedFenceError(f"code fence {fence.marker!r} is never closed", line=line_no)
            code = "\n".join(_dedent(body, fence.indent) for body in lines[index + 1 : end])
            builder.add_snippet(Snippet(language=fence.language, code=code, fence=fence.marker, line=line_no))
            index = end + 1
            continue

        heading = _match_heading(line)
        if heading is not None:
            builder.start_section(heading, line_no)
            index += 1
            continue

        anchor = parse_anchor_line(line) if "<a" in line.lower() else None
        if anchor is not None:
            builder.hold_anchor(anchor, line, line_no)
        else:
            builder.add_prose_line(line_no, line)
        index += 1

    builder.finish()

    drafts = builder.sections
    anchors = assign_anchors(
        [HeadingRef(title=draft.title, line=draft.line, explicit_anchor=draft.explicit_anchor) for draft in drafts]
    )
    for draft, anchor in zip(drafts, anchors):
        draft.anchor = anchor

    title = next((draft.title for draft in drafts if draft.level == 1), None)
    document = Document(
        title=title,
        preamble=tuple(builder.preamble),
        sections=tuple(_freeze(node) for node in _nest(drafts)),
    )
    logger.debug(
        "Parsed document",
        extra={"sections": len(drafts), "snippets": document.snippet_count},
    )
    return document


def _match_fence_open(line: str) -> _Fence | None:
    match = _FENCE_OPEN_RE.match(line)
    if not match:
        return None
    marker = match.group("marker")
    info = match.group("info").strip()
    if marker[0] == "`" and "`" in info:
        return None
    language = info.split()[0] if info else None
    return _Fence(indent=len(match.group("indent")), marker=marker, language=language)


def _find_fence_close(lines: list[str], start: int, fence: _Fence) -> int | None:
    for index in range(start, len(lines)):
        match = _FENCE_CLOSE_RE.match(lines[index])
        if not match:
            continue
        marker = match.group("marker")
        if marker[0] == fence.marker[0] and len(marker) >= len(fence.marker):
            return index
    return None


def _dedent(line: str, width: int) -> str:
    stripped = len(line) - len(line.lstrip(" "))
    return line[min(stripped, width) :]


def _match_heading(line: str) -> _Heading | None:
    match = _HTML_HEADING_RE.match(line)
    if match:
        html_heading = parse_html_heading(line)
        if html_heading is None or not html_heading.title:
            return None
        return _Heading(level=html_heading.level, title=html_heading.title, anchor=html_heading.anchor)

    match = _ATX_HEADING_RE.match(line)
    if not match:
        return None
    title, anchor = extract_inline_anchor(match.group("title").strip())
    if not title:
        return None
    return _Heading(level=len(match.group("hashes")), title=title, anchor=anchor)


def _nest(drafts: list[_DraftSection]) -> list[_DraftSection]:
    roots: list[_DraftSection] = []
    stack: list[_DraftSection] = []
    for node in drafts:
        while stack and stack[-1].level >= node.level:
            stack.pop()
        if stack:
            stack[-1].children.append(node)
        else:
            roots.append(node)
        stack.append(node)
    return roots


def _freeze(draft: _DraftSection) -> Section:
    return Section(
        title=draft.title,
        level=draft.level,
        anchor=draft.anchor,
        explicit_anchor=draft.explicit_anchor is not None,
        line=draft.line,
        blocks=tuple(draft.blocks),
        children=tuple(_freeze(child) for child in draft.children),
    )


def _split_lines(text: str) -> list[str]:
    """Split on markdown line endings only; form feeds and other separators stay in the line."""
    lines = _LINE_BREAK_RE.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines
