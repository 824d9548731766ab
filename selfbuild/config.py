import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from selfbuild.models import BuildConfig

TRUTHY = {"1", "true", "yes", "on"}


def _flag(value: str) -> bool:
    return value.strip().lower() in TRUTHY


def load_config(root: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> BuildConfig:
    """
    Build the configuration from defaults and SELFBUILD_* environment overrides.
    A .env file in the working directory is loaded first.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    overrides = {}
    if root is not None:
        overrides["root"] = Path(root)
    elif environ.get("SELFBUILD_ROOT"):
        overrides["root"] = Path(environ["SELFBUILD_ROOT"])

    if environ.get("SELFBUILD_FORMAT_REPLACE"):
        overrides["format_replace"] = _flag(environ["SELFBUILD_FORMAT_REPLACE"])
    if environ.get("SELFBUILD_MAVEN_REPOSITORY"):
        overrides["maven_repository"] = environ["SELFBUILD_MAVEN_REPOSITORY"]
    if environ.get("SELFBUILD_CACHE"):
        overrides["cache"] = Path(environ["SELFBUILD_CACHE"])
    if environ.get("SELFBUILD_PUBLISHED_FILE"):
        overrides["published_file"] = Path(environ["SELFBUILD_PUBLISHED_FILE"])
    if environ.get("JAVA_HOME"):
        overrides["java_home"] = Path(environ["JAVA_HOME"])

    return BuildConfig(**overrides)
