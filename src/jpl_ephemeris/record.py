"""Line records for the descriptor grammars (tokenizing reader and parse-issue log)."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from jpl_ephemeris.errors import DescriptorParseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseIssue:
    """One unparsable record: where it was and why it was rejected.

    line_no is 1-based; 0 marks a problem with the resource as a whole
    (for example a block that never appears).
    """

    line_no: int
    line: str
    reason: str

    def __str__(self) -> str:
        if self.line_no == 0:
            return self.reason
        return f'line {self.line_no}: {self.reason}: {self.line!r}'


class LineRecord:
    """Whitespace-tokenized input line read left to right with a cursor."""

    def __init__(self, line_no: int, text: str) -> None:
        """Split text into tokens; the cursor starts at the first token."""
        self.line_no = line_no
        self.text = text
        self._tokens = text.split()
        self._pos = 0

    def next(self) -> str | None:
        """Return the next token and advance, or None at end of line."""
        if self._pos >= len(self._tokens):
            return None
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def skip(self, count: int) -> int:
        """Advance past up to count tokens. Returns the number actually skipped."""
        skipped = min(max(count, 0), len(self._tokens) - self._pos)
        self._pos += skipped
        return skipped

    def remaining(self) -> int:
        """Number of tokens not yet consumed."""
        return len(self._tokens) - self._pos


class IssueLog:
    """Collects parse issues for one resource.

    In strict mode issues accumulate until raise_if_any(); otherwise each one
    is logged as a warning when it is added and parsing carries on with the
    field at its zero default.
    """

    def __init__(self, source: str, *, strict: bool = True) -> None:
        self.source = source
        self.strict = strict
        self.issues: list[ParseIssue] = []

    def add(self, line_no: int, line: str, reason: str) -> None:
        """Record an issue (and log it when lenient)."""
        issue = ParseIssue(line_no=line_no, line=line, reason=reason)
        self.issues.append(issue)
        if not self.strict:
            logger.warning('%s: %s', self.source, issue)

    def raise_if_any(self) -> None:
        """Raise DescriptorParseError listing every issue (strict mode only)."""
        if self.strict and self.issues:
            raise DescriptorParseError(self.source, self.issues)
