"""Filesystem traversal helpers for project documentation directories."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = {".md", ".markdown", ".mdx"}
DOC_TREE_SUFFIXES = {".md", ".txt"}
README_CANDIDATES = ("README.md", "readme.md", "Readme.md", "README.markdown", "README")

# Entries starting with "." are skipped separately.
EXCLUDED_DIRS = {
    "node_modules",
    "dist",
    "build",
    "out",
    "coverage",
    "target",
    "vendor",
    "venv",
    "__pycache__",
}

TREE_EXCLUDED_NAMES = {"node_modules", "dist", "build"}

DEFAULT_TREE_MAX_DEPTH = 5


class PathOutsideProjectError(ValueError):
    """Raised when a requested document lies outside its project root."""


@dataclass(slots=True)
class DocNode:
    """Entry in a project's documentation tree."""

    name: str
    path: str
    relative_path: str
    type: str
    children: List["DocNode"] | None = field(default=None)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "name": self.name,
            "path": self.path,
            "relativePath": self.relative_path,
            "type": self.type,
        }
        if self.children is not None:
            payload["children"] = [child.to_dict() for child in self.children]
        return payload


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def _scan(directory: Path) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(directory) as entries:
            return sorted(entries, key=lambda entry: entry.name)
    except OSError as exc:
        logger.warning("doc_scanner.directory_unreadable path=%s error=%s", directory, exc)
        return []


def _is_dir(entry: os.DirEntry[str]) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def _is_file(entry: os.DirEntry[str]) -> bool:
    try:
        return entry.is_file()
    except OSError:
        return False


def is_markdown_file(name: str) -> bool:
    return Path(name).suffix.lower() in MARKDOWN_SUFFIXES


def is_doc_file(name: str) -> bool:
    return Path(name).suffix.lower() in DOC_TREE_SUFFIXES or name.upper().startswith("README")


def iter_markdown_files(root: Path) -> Iterator[Path]:
    """Yield markdown files under *root*, skipping hidden and generated directories.

    Unreadable subdirectories are logged and skipped.
    """

    stack: list[Path] = [Path(root)]
    while stack:
        directory = stack.pop()
        subdirectories: list[Path] = []
        for entry in _scan(directory):
            if _is_hidden(entry.name):
                continue
            if _is_dir(entry):
                if entry.name not in EXCLUDED_DIRS:
                    subdirectories.append(Path(entry.path))
                continue
            if _is_file(entry) and is_markdown_file(entry.name):
                yield Path(entry.path)
        # Reverse so siblings are visited in name order.
        stack.extend(reversed(subdirectories))


def find_readme(root: Path) -> Path | None:
    root = Path(root)
    for candidate in README_CANDIDATES:
        path = root / candidate
        if path.is_file():
            return path
    for entry in _scan(root):
        if _is_file(entry) and Path(entry.name).stem.lower() == "readme" and is_markdown_file(entry.name):
            return Path(entry.path)
    return None


def build_doc_tree(root: Path, *, max_depth: int = DEFAULT_TREE_MAX_DEPTH) -> list[DocNode]:
    """Return the documentation tree under *root*.

    Directories without documentation descendants are omitted; siblings list
    directories first, then files, each ordered by name.
    """

    root = Path(root)
    top = DocNode(name=root.name, path=str(root), relative_path="", type="directory", children=[])
    stack: list[tuple[Path, DocNode, int]] = [(root, top, 0)]
    visited: list[DocNode] = []

    while stack:
        directory, node, depth = stack.pop()
        visited.append(node)
        for entry in _scan(directory):
            if _is_hidden(entry.name) or entry.name in TREE_EXCLUDED_NAMES:
                continue
            entry_path = Path(entry.path)
            relative = entry_path.relative_to(root).as_posix()
            if _is_dir(entry):
                if depth + 1 > max_depth:
                    continue
                child = DocNode(
                    name=entry.name,
                    path=str(entry_path),
                    relative_path=relative,
                    type="directory",
                    children=[],
                )
                node.children.append(child)
                stack.append((entry_path, child, depth + 1))
            elif is_doc_file(entry.name):
                node.children.append(
                    DocNode(name=entry.name, path=str(entry_path), relative_path=relative, type="file")
                )

    # Children are always visited after their parent, so walking backwards
    # prunes and sorts each subtree before the parent inspects it.
    for node in reversed(visited):
        kept = [child for child in node.children if child.type == "file" or child.children]
        kept.sort(key=lambda child: (child.type != "directory", child.name.casefold(), child.name))
        node.children = kept
    return top.children or []


def resolve_project_file(root: Path, relative_path: str) -> Path:
    """Resolve *relative_path* inside *root*, refusing paths that escape it."""

    base_dir = Path(root).resolve()
    cleaned = relative_path.strip().replace("\\", "/").lstrip("/")
    target = (base_dir / cleaned).resolve()
    try:
        target.relative_to(base_dir)
    except ValueError:
        raise PathOutsideProjectError("Path must reside inside the project directory") from None
    return target


def read_document(root: Path, relative_path: str) -> str:
    target = resolve_project_file(root, relative_path)
    return target.read_text(encoding="utf-8", errors="replace")


__all__ = [
    "DocNode",
    "EXCLUDED_DIRS",
    "PathOutsideProjectError",
    "build_doc_tree",
    "find_readme",
    "is_doc_file",
    "is_markdown_file",
    "iter_markdown_files",
    "read_document",
    "resolve_project_file",
]
