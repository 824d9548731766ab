import logging
import os
import subprocess
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from selfbuild.errors import InvalidMark, NonZeroExit
from selfbuild.models import Mark
from selfbuild.utils import walk_files

logger = logging.getLogger(__name__)

Token = Union[str, os.PathLike]


class CommandBuilder:
    """
    Ordered argument list for one external process invocation.

    The first token is the program. A prefix can be built once, marked and
    reused for several invocations:

        command = CommandBuilder("jar").add("--create")
        mark = command.mark()
        for archive in archives:
            command.reset_to_mark(mark)
            command.add("--file").add(archive).execute()
    """

    def __init__(self, program: Token, capture_output: bool = False, cwd: Optional[Path] = None):
        self.arguments: list[str] = []
        self.capture_output = capture_output
        self.cwd = cwd
        self.add(program)

    def __len__(self):
        return len(self.arguments)

    def add(self, token: Token) -> "CommandBuilder":
        if token is None:
            raise ValueError("command tokens must not be None")
        self.arguments.append(os.fspath(token) if isinstance(token, os.PathLike) else str(token))
        return self

    def add_all(
        self,
        roots: Union[Token, Iterable[Token]],
        predicate: Optional[Callable[[Path], bool]] = None,
    ) -> "CommandBuilder":
        """Append every file below the given root(s) accepted by predicate, sorted per root."""
        if isinstance(roots, (str, os.PathLike)):
            roots = [roots]
        for root in roots:
            root = Path(root)
            if not root.is_dir():
                logger.warning(f"Skipping missing directory {root}")
                continue
            for path in walk_files(root):
                if predicate is None or predicate(path):
                    self.add(path)
        return self

    def mark(self, offset: int = 0) -> Mark:
        """Snapshot the position `offset` tokens back from the current end."""
        if offset < 0 or offset > len(self.arguments):
            raise InvalidMark(f"offset {offset} outside of argument list of length {len(self.arguments)}")
        return Mark(position=len(self.arguments) - offset)

    def reset_to_mark(self, mark: Mark) -> "CommandBuilder":
        """Drop every token appended after the marked position."""
        if mark.position > len(self.arguments):
            raise InvalidMark(f"mark {mark.position} beyond argument list of length {len(self.arguments)}")
        del self.arguments[mark.position:]
        return self

    def dump(self, sink: Callable[[str], object] = print) -> "CommandBuilder":
        for token in self.arguments:
            sink(token)
        return self

    def execute(self) -> subprocess.CompletedProcess:
        logger.debug(f"Executing {self.arguments}")
        result = subprocess.run(
            list(self.arguments),
            cwd=self.cwd,
            capture_output=self.capture_output,
            text=True,
        )
        if result.returncode != 0:
            raise NonZeroExit(self.arguments, result.returncode, result.stderr if self.capture_output else "")
        return result
