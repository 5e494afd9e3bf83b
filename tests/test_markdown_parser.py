from __future__ import annotations

import pytest

from docviewer.markdown_parser import (
    extract_readme_preview,
    parse_markdown_structure,
    slugify_heading,
)


def test_headings_and_sections_skip_empty_sections() -> None:
    parsed = parse_markdown_structure("# A\n## B\ntext\n")

    assert [(h.level, h.text, h.id) for h in parsed.headings] == [(1, "A", "a"), (2, "B", "b")]
    assert [(s.title, s.content) for s in parsed.sections] == [("B", "text")]


def test_heading_ids_are_slugified() -> None:
    parsed = parse_markdown_structure("## Getting Started: Install & Run!\n")

    assert parsed.headings[0].id == "getting-started-install-run"
    assert slugify_heading("API  Reference (v2)") == "api-reference-v2"


def test_heading_levels_stay_within_bounds() -> None:
    markdown = "####### not a heading\n###### Six\n#NoSpace\n"
    parsed = parse_markdown_structure(markdown)

    assert [h.level for h in parsed.headings] == [6]
    assert all(1 <= heading.level <= 6 for heading in parsed.headings)


def test_install_commands_extracted_from_shell_blocks() -> None:
    markdown = "# Setup\n```bash\nnpm install foo\necho hi\nyarn add bar\n```\n"
    parsed = parse_markdown_structure(markdown)

    assert sorted(parsed.install_commands) == ["npm install foo", "yarn add bar"]
    assert parsed.code_blocks[0].language == "bash"
    assert parsed.code_blocks[0].code == "npm install foo\necho hi\nyarn add bar"


def test_install_commands_ignore_non_shell_blocks_and_deduplicate() -> None:
    markdown = (
        "```python\npip install nope\n```\n"
        "```sh\n  pip install requests\ngo get example.com/mod\n```\n"
        "```shell\npip install requests\n```\n"
    )
    parsed = parse_markdown_structure(markdown)

    assert parsed.install_commands == ["pip install requests", "go get example.com/mod"]


def test_code_block_defaults_to_text_and_keeps_blank_lines() -> None:
    parsed = parse_markdown_structure("```\nfirst\n\nsecond\n```\n")

    assert parsed.code_blocks[0].language == "text"
    assert parsed.code_blocks[0].code == "first\n\nsecond"


def test_heading_inside_fence_is_code() -> None:
    markdown = "# Intro\nhello\n```md\n# Not a heading\n```\n"
    parsed = parse_markdown_structure(markdown)

    assert [h.text for h in parsed.headings] == ["Intro"]
    assert parsed.code_blocks[0].code == "# Not a heading"
    assert parsed.sections[0].content == "hello"


def test_unterminated_fence_is_dropped() -> None:
    markdown = "# Title\nbody text\n```bash\nnpm install lost\n"
    parsed = parse_markdown_structure(markdown)

    assert parsed.code_blocks == []
    assert parsed.install_commands == []
    assert [(s.title, s.content) for s in parsed.sections] == [("Title", "body text")]


def test_tagged_fence_inside_block_does_not_close_it() -> None:
    markdown = "```text\n```bash\n```\n"
    parsed = parse_markdown_structure(markdown)

    assert len(parsed.code_blocks) == 1
    assert parsed.code_blocks[0].code == "```bash"


def test_duplicate_heading_ids_are_not_resolved() -> None:
    parsed = parse_markdown_structure("## Usage\none\n## Usage\ntwo\n")

    assert [h.id for h in parsed.headings] == ["usage", "usage"]
    assert [s.content for s in parsed.sections] == ["one", "two"]


def test_crlf_input_is_handled() -> None:
    parsed = parse_markdown_structure("# Title\r\nLine one\r\n")

    assert parsed.headings[0].text == "Title"
    assert parsed.sections[0].content == "Line one"


@pytest.mark.parametrize("markdown", ["", "\n\n", "```", "#", "# ", "```\n# x", "\x00\x01 weird"])
def test_parser_never_raises(markdown: str) -> None:
    parsed = parse_markdown_structure(markdown)
    assert isinstance(parsed.to_dict()["headings"], list)


def test_to_dict_uses_camel_case_keys() -> None:
    payload = parse_markdown_structure("# T\n```sh\nnpm i x\n```\n").to_dict()

    assert set(payload) == {"headings", "sections", "codeBlocks", "installCommands"}
    assert payload["installCommands"] == ["npm i x"]


def test_preview_skips_headings_and_short_paragraphs() -> None:
    long_paragraph = "This project renders documentation for every workspace repository."
    markdown = f"## Title\n\nShort intro.\n\n{long_paragraph}\n"

    assert extract_readme_preview(markdown) == long_paragraph


def test_preview_truncates_with_ellipsis() -> None:
    long_paragraph = "word " * 100
    markdown = f"## Title\n\nTiny.\n\n{long_paragraph}"

    preview = extract_readme_preview(markdown, limit=50)

    assert preview.endswith("...")
    assert preview[:-3] == long_paragraph.strip()[:50].strip()


def test_preview_ignores_code_blocks() -> None:
    markdown = "```bash\nnpm install something-quite-long-here\n```\n\nThe real description paragraph lives here."

    assert extract_readme_preview(markdown) == "The real description paragraph lives here."


def test_preview_falls_back_to_leading_text() -> None:
    markdown = "# Title\n\nshort\n\ntiny"

    preview = extract_readme_preview(markdown, limit=8)

    assert not preview.endswith("...")
    assert preview == "short"
