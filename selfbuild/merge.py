import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Sequence

from selfbuild.errors import MergeSentinelMissing
from selfbuild.models import MergeResult
from selfbuild.utils import read_lines


def generated_notice(timestamp: Optional[datetime] = None) -> str:
    """First line of every generated unit. Ignored when checking for changes."""
    timestamp = timestamp or datetime.now(timezone.utc)
    return f"/* THIS FILE IS GENERATED -- {timestamp.isoformat()} */"


class SourceMerger:
    """
    Concatenates the publishable bodies of several source modules.

    Each module starts with a private header (license, package, imports)
    terminated by the sentinel line. Header imports are collected into one
    shared set; everything after the sentinel is copied verbatim.
    """

    def __init__(self, sentinel: str, import_prefix: str = "import"):
        self.sentinel = sentinel
        self.import_pattern = re.compile(rf"^{re.escape(import_prefix)}\b")

    def read_module(self, source: Path, target: list[str], imports: set[str]):
        lines = read_lines(source)
        try:
            end_of_header = lines.index(self.sentinel)
        except ValueError:
            raise MergeSentinelMissing(source, self.sentinel) from None

        for line in lines[:end_of_header]:
            if self.import_pattern.match(line):
                imports.add(line)
        target.extend(lines[end_of_header + 1:])

    def merge(self, header: Sequence[str], sources: Iterable[Path]) -> MergeResult:
        """
        Merge the given modules below header. The import block goes right
        after the header; each module body is preceded by one blank line.
        """
        lines = list(header)
        imports: set[str] = set()
        import_index = len(lines)
        for source in sources:
            lines.append("")
            self.read_module(Path(source), lines, imports)
        return MergeResult(lines=lines, imports=imports, import_index=import_index)
