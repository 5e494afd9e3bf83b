"""Structural parsing helpers for README and markdown documents.

The parser is deliberately lenient: it accepts any text and never raises. An
unterminated fenced block is dropped rather than reported, so callers that want
diagnostics should compare the returned structure against their expectations.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_FENCE_OPEN_RE = re.compile(r"^```\s*([\w+#.-]*)\s*$")
_FENCE_CLOSE_RE = re.compile(r"^```\s*$")
_SLUG_STRIP_RE = re.compile(r"[^\w\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_INSTALL_RE = re.compile(r"^\s*(npm|yarn|pnpm|pip|cargo|composer|gem|go get)\s+")

_PREVIEW_FENCE_RE = re.compile(r"```[\s\S]*?```")
_PREVIEW_HEADING_RE = re.compile(r"^#{1,6}[ \t]+.+$", re.MULTILINE)
_PARAGRAPH_SPLIT_RE = re.compile(r"\n[ \t]*\n")

SHELL_LANGUAGES = frozenset({"bash", "sh", "shell"})
DEFAULT_CODE_LANGUAGE = "text"
DEFAULT_PREVIEW_LIMIT = 300
MIN_PREVIEW_PARAGRAPH_CHARS = 20


@dataclass(slots=True)
class Heading:
    level: int
    text: str
    id: str


@dataclass(slots=True)
class Section:
    title: str
    content: str


@dataclass(slots=True)
class CodeBlock:
    language: str
    code: str


@dataclass(slots=True)
class ParsedMarkdown:
    """Structural summary of a markdown document."""

    headings: List[Heading] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)
    code_blocks: List[CodeBlock] = field(default_factory=list)
    install_commands: List[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "headings": [
                {"level": heading.level, "text": heading.text, "id": heading.id}
                for heading in self.headings
            ],
            "sections": [
                {"title": section.title, "content": section.content}
                for section in self.sections
            ],
            "codeBlocks": [
                {"language": block.language, "code": block.code}
                for block in self.code_blocks
            ],
            "installCommands": list(self.install_commands),
        }


def slugify_heading(text: str) -> str:
    """Return the anchor id used for deep links to a heading."""

    lowered = _SLUG_STRIP_RE.sub("", text.lower())
    return _WHITESPACE_RE.sub("-", lowered)


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _flush_section(sections: List[Section], title: str, content_lines: List[str]) -> None:
    content = "\n".join(content_lines).strip("\n")
    if title and content.strip():
        sections.append(Section(title=title, content=content))


def _install_commands(code: str) -> List[str]:
    return [line.strip() for line in code.split("\n") if _INSTALL_RE.match(line)]


def parse_markdown_structure(markdown: str) -> ParsedMarkdown:
    """Split markdown into headings, sections, fenced code and install commands."""

    result = ParsedMarkdown()
    install_commands: List[str] = []

    section_title = ""
    section_lines: List[str] = []
    in_code_block = False
    code_language = DEFAULT_CODE_LANGUAGE
    code_lines: List[str] = []

    for line in _normalize_newlines(markdown or "").split("\n"):
        if in_code_block:
            if _FENCE_CLOSE_RE.match(line):
                in_code_block = False
                code = "\n".join(code_lines)
                result.code_blocks.append(CodeBlock(language=code_language, code=code))
                if code_language.lower() in SHELL_LANGUAGES:
                    install_commands.extend(_install_commands(code))
                code_lines = []
            else:
                code_lines.append(line)
            continue

        heading_match = _HEADING_RE.match(line)
        if heading_match and heading_match.group(2).strip():
            text = heading_match.group(2).strip()
            result.headings.append(
                Heading(level=len(heading_match.group(1)), text=text, id=slugify_heading(text))
            )
            _flush_section(result.sections, section_title, section_lines)
            section_title = text
            section_lines = []
            continue

        fence_match = _FENCE_OPEN_RE.match(line)
        if fence_match:
            in_code_block = True
            code_language = fence_match.group(1) or DEFAULT_CODE_LANGUAGE
            code_lines = []
            continue

        section_lines.append(line)

    # An open fence at EOF is discarded on purpose.
    _flush_section(result.sections, section_title, section_lines)
    result.install_commands = list(dict.fromkeys(install_commands))
    return result


def extract_readme_preview(markdown: str, limit: int = DEFAULT_PREVIEW_LIMIT) -> str:
    """Return the first meaningful paragraph of *markdown*, capped at *limit* chars."""

    limit = max(int(limit), 0)
    text = _normalize_newlines(markdown or "")
    text = _PREVIEW_FENCE_RE.sub("", text)
    text = _PREVIEW_HEADING_RE.sub("", text)

    paragraphs = [paragraph.strip() for paragraph in _PARAGRAPH_SPLIT_RE.split(text)]
    paragraphs = [paragraph for paragraph in paragraphs if len(paragraph) >= MIN_PREVIEW_PARAGRAPH_CHARS]

    preview = paragraphs[0] if paragraphs else text[:limit]
    truncated = len(preview) > limit
    return preview[:limit].strip() + ("..." if truncated else "")


__all__ = [
    "CodeBlock",
    "Heading",
    "ParsedMarkdown",
    "Section",
    "extract_readme_preview",
    "parse_markdown_structure",
    "slugify_heading",
]
