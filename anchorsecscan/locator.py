"""
Best-effort source position resolution.

Positions are recovered by searching the raw file text for a node's literal
source snippet and counting the newlines before the first hit. When the same
snippet occurs more than once in a file the first occurrence wins, so the
reported line can point at an earlier copy of identical code.
"""

from typing import Dict, Tuple


class SourceLocator:
    """Maps source snippets to approximate (line, column) pairs."""

    def __init__(self, source: str):
        self.source = source
        self._cache: Dict[str, Tuple[int, int]] = {}

    def locate(self, snippet: str) -> Tuple[int, int]:
        """
        Find the approximate position of a snippet.

        Args:
            snippet: Literal source text of a syntax node

        Returns:
            1-based (line, column), or (0, 0) when the snippet is not found
        """
        if not snippet:
            return 0, 0
        if snippet in self._cache:
            return self._cache[snippet]

        offset = self.source.find(snippet)
        if offset < 0:
            # multi-line nodes can differ in line endings; retry on the first line
            first_line = snippet.splitlines()[0].strip() if snippet.strip() else ""
            offset = self.source.find(first_line) if first_line else -1

        if offset < 0:
            position = (0, 0)
        else:
            line = self.source.count("\n", 0, offset) + 1
            column = offset - (self.source.rfind("\n", 0, offset) + 1) + 1
            position = (line, column)

        self._cache[snippet] = position
        return position
