import hashlib
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Sequence

from selfbuild.utils import read_lines, write_lines

logger = logging.getLogger(__name__)


def normalize(lines: Sequence[str]) -> list[str]:
    """Blank the first line, it carries the generation timestamp."""
    lines = list(lines)
    if lines:
        lines[0] = ""
    return lines


def content_hash(lines: Sequence[str]) -> str:
    return hashlib.sha256("\n".join(lines).encode("utf-8")).hexdigest()


def replace_atomically(source: Path, target: Path):
    """Copy source over target via a temporary sibling and a rename."""
    target = Path(target)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
    os.close(fd)
    try:
        shutil.copyfile(source, temp_name)
        # mkstemp creates 0600, keep the permissions of the file being replaced
        shutil.copymode(target if target.exists() else source, temp_name)
        os.replace(temp_name, target)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise


class Publisher:
    def publish_if_changed(self, lines: Sequence[str], generated_path: Path, published_path: Path) -> bool:
        """
        Write lines to the scratch file at generated_path and copy it over
        published_path when the content differs, ignoring the first line.
        Returns True if the published file was (re)written.
        """
        write_lines(generated_path, lines)
        generated = normalize(read_lines(generated_path))

        published: Optional[list[str]] = None
        if Path(published_path).exists():
            published = normalize(read_lines(published_path))

        logger.info(f"generated hash is {content_hash(generated)}")
        if published is None:
            logger.info(f"{published_path} does not exist yet")
        else:
            logger.info(f"published hash is {content_hash(published)}")

        if generated == published:
            return False
        replace_atomically(generated_path, published_path)
        return True
