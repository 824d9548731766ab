import shutil
from pathlib import Path
from typing import Iterable, Iterator


def is_java_file(path: Path) -> bool:
    path = Path(path)
    return path.suffix == ".java" and path.is_file()


def walk_files(root: Path) -> Iterator[Path]:
    """Yield every regular file below root in lexicographic order."""
    for path in sorted(Path(root).rglob("*")):
        if path.is_file():
            yield path


def tree_delete(path: Path):
    # Missing trees are fine, clean runs on fresh checkouts too
    path = Path(path)
    if path.is_dir():
        shutil.rmtree(path)
    elif path.exists():
        path.unlink()


def read_lines(path: Path) -> list[str]:
    # Only line feeds separate lines; form feeds and U+2028 stay inside a line
    lines = Path(path).read_text(encoding="utf-8").split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def write_lines(path: Path, lines: Iterable[str]):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = list(lines)
    text = "\n".join(lines) + "\n" if lines else ""
    path.write_text(text, encoding="utf-8")
