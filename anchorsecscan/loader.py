"""
Source loading for the scanner: Rust parsing, file discovery and the
Cargo.toml overflow-checks flag.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import tree_sitter_rust as tsrust
from tree_sitter import Language, Parser, Tree

# === Constants ===
RUST_EXTENSIONS = {".rs"}

DEFAULT_IGNORE_PATTERNS = [
    r"(^|/)target(/|$)",
    r"\.git",
    r"node_modules",
    r"\.anchor",
]

OVERFLOW_CHECK_FLAGS = ("overflow-checks = true", "overflow-checks=true")

RUST_LANGUAGE = Language(tsrust.language())

logger = logging.getLogger(__name__)


@dataclass
class ParseOutcome:
    """Either a parsed tree or the reason parsing failed."""
    tree: Optional[Tree] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.tree is not None


class RustSourceLoader:
    """Parses Rust source text with tree-sitter."""

    def __init__(self):
        self.parser = Parser(RUST_LANGUAGE)

    def parse(self, source: str) -> ParseOutcome:
        """
        Parse Rust source.

        tree-sitter recovers from syntax errors instead of failing, so a tree
        containing error nodes is reported as a failure.

        Args:
            source: Rust source text

        Returns:
            ParseOutcome with the tree, or with an error message
        """
        tree = self.parser.parse(source.encode("utf8"))
        root = tree.root_node
        if not root.has_error:
            return ParseOutcome(tree=tree)

        line = _first_error_line(root)
        where = f" near line {line}" if line else ""
        return ParseOutcome(error=f"syntax error{where}")


def _first_error_line(root) -> int:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        # children pushed in reverse so the earliest error is found first
        stack.extend(reversed([c for c in node.children if c.has_error or c.is_missing or c.type == "ERROR"]))
    return 0


# === File Discovery ===
def should_ignore_path(path: Path, ignore_patterns: List[str]) -> bool:
    """
    Check if path should be ignored based on patterns.

    Args:
        path: Path to check
        ignore_patterns: List of regex patterns to ignore

    Returns:
        True if should be ignored
    """
    path_str = path.as_posix()
    for pattern in ignore_patterns:
        if re.search(pattern, path_str):
            return True
    return False


def find_rust_files(scan_path: Path, ignore_patterns: Optional[List[str]] = None) -> List[Path]:
    """
    Find all Rust files to scan.

    Args:
        scan_path: A single file or a project directory
        ignore_patterns: Additional ignore patterns

    Returns:
        Sorted list of Rust file paths
    """
    patterns = DEFAULT_IGNORE_PATTERNS + list(ignore_patterns or [])
    files_to_scan = []

    if scan_path.is_file():
        if scan_path.suffix in RUST_EXTENSIONS:
            files_to_scan.append(scan_path)
        return files_to_scan

    for ext in RUST_EXTENSIONS:
        for file_path in scan_path.rglob(f"*{ext}"):
            relative = file_path.relative_to(scan_path)
            if not should_ignore_path(relative, patterns):
                files_to_scan.append(file_path)

    return sorted(files_to_scan)


# === Manifest ===
def check_overflow_checks(project_path: Path) -> bool:
    """
    Check whether the project's Cargo.toml enables overflow-checks.

    The manifest in the project directory is consulted first, then the one
    in its parent directory.

    Args:
        project_path: Project directory (or a file inside it)

    Returns:
        True if a literal overflow-checks = true flag is present
    """
    project_path = Path(project_path)
    base = project_path if project_path.is_dir() else project_path.parent

    for candidate in (base / "Cargo.toml", base.parent / "Cargo.toml"):
        try:
            content = candidate.read_text(encoding="utf-8", errors="ignore")
        except OSError:
            continue
        enabled = any(flag in content for flag in OVERFLOW_CHECK_FLAGS)
        logger.debug(f"{candidate}: overflow-checks {'enabled' if enabled else 'not enabled'}")
        return enabled

    return False
