"""Index of test titles and describe blocks in a spec file."""

import re
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# it('title', ...), test('title', ...), test.only('title', ...)
TITLE_PATTERN = re.compile(
    r"""\b(?:it|test)(?:\.(?:only|skip))?\s*\(\s*(['"`])(?P<title>(?:(?!\1).)+)\1\s*,"""
)

# describe('group', ...), test.describe('group', ...), test.describe.serial(...)
GROUP_PATTERN = re.compile(
    r"""\b(?:test\.)?describe(?:\.(?:only|skip|serial|parallel))*\s*\(\s*(['"`])(?P<title>(?:(?!\1).)+)\1\s*,"""
)


@dataclass
class LabelIndex:
    """Titles found in a source text, in ascending offset order."""
    titles: List[Tuple[int, str]] = field(default_factory=list)
    groups: List[Tuple[int, str]] = field(default_factory=list)
    _offsets: List[int] = field(init=False, repr=False)

    def __post_init__(self):
        self._offsets = [start for start, _ in self.titles]

    @classmethod
    def from_source(cls, text: str) -> "LabelIndex":
        """Scan ``text`` once for test titles and group markers."""
        titles = [(m.start(), m.group("title")) for m in TITLE_PATTERN.finditer(text)]
        groups = [(m.start(), m.group("title")) for m in GROUP_PATTERN.finditer(text)]
        return cls(titles=titles, groups=groups)

    def nearest_at_or_before(self, offset: int) -> Optional[str]:
        """Return the title of the closest test starting at or before ``offset``."""
        position = bisect_right(self._offsets, offset)
        if position == 0:
            return None
        return self.titles[position - 1][1]

    @property
    def outermost_group(self) -> Optional[str]:
        """Title of the first describe block, if any."""
        if not self.groups:
            return None
        return self.groups[0][1]
