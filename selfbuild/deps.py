import logging
import os
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import urlparse

import requests

from selfbuild.errors import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def file_name_of(uri: str) -> str:
    name = urlparse(uri).path.rstrip("/").rsplit("/", 1)[-1]
    if not name:
        raise ValueError(f"cannot derive a file name from {uri}")
    return name


class ToolCache:
    """
    Local cache of downloaded tools and libraries.

    Artifacts are fetched once and reused on later calls and later runs.
    Nothing is written under the final name unless the transfer completed.
    """

    def __init__(self, libraries_dir: Path, repository: str, session: Optional[requests.Session] = None):
        self.libraries_dir = Path(libraries_dir)
        self.repository = repository.rstrip("/")
        self.owns_session = session is None
        self.session = session or requests.Session()

    def close(self):
        """Close the HTTP session if this cache created it."""
        if self.owns_session:
            self.session.close()

    def resolve_by_uri(
        self,
        uri: str,
        destination: Path,
        file_name: Optional[str] = None,
        accept: Optional[Callable[[Path], bool]] = None,
    ) -> Path:
        target = Path(destination) / (file_name or file_name_of(uri))
        if target.is_file() and (accept is None or accept(target)):
            logger.debug(f"Using cached {target}")
            return target
        target.parent.mkdir(parents=True, exist_ok=True)
        self.transfer(uri, target)
        return target

    def resolve_library(self, group: str, artifact: str, version: str) -> Path:
        file_name = f"{artifact}-{version}.jar"
        uri = "/".join([self.repository, group.replace(".", "/"), artifact, version, file_name])
        return self.resolve_by_uri(uri, self.libraries_dir / group / artifact / version, file_name)

    def transfer(self, uri: str, target: Path):
        logger.info(f"Downloading {uri}")
        partial = target.with_name(target.name + ".part")
        try:
            with self.session.get(uri, stream=True) as response:
                response.raise_for_status()
                with partial.open("wb") as out:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        out.write(chunk)
            os.replace(partial, target)
        except (requests.RequestException, OSError) as e:
            partial.unlink(missing_ok=True)
            raise DownloadError(uri, e) from e
        logger.info(f"Saved {target}")
