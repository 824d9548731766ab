import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

FORMATTER_URI = (
    "https://jitpack.io/com/github/sormuras/google-java-format/google-java-format/"
    "validate-SNAPSHOT/google-java-format-validate-SNAPSHOT-all-deps.jar"
)


class BuildConfig(BaseModel):
    """
    Everything the pipeline needs to know about the project layout,
    tool versions and remote locations. Immutable once constructed.
    Relative paths are resolved against `root`.
    """
    model_config = ConfigDict(frozen=True)

    root: Path = Path(".")
    cache: Path = Path(".selfbuild")
    source_main: Path = Path("src", "main", "java")
    source_test: Path = Path("src", "test", "java")
    target: Path = Path("target", "build")

    # Self generation
    published_file: Path = Path("Bundle.java")
    modules: tuple[str, ...] = ("Command.java", "Util.java", "Bundle.java")
    sentinel: Optional[str] = None # defaults to "// <published file name>"
    import_prefix: str = "import"
    header_lines: tuple[str, ...] = ("// default package",)
    artifact_name: str = "bundle"

    # Versions
    junit_jupiter_version: str = "5.0.0-RC2"
    junit_platform_version: str = "1.0.0-RC2"
    opentest4j_version: str = "1.0.0-RC1"

    # Remote locations
    maven_repository: str = "https://repo1.maven.org/maven2"
    formatter_uri: str = FORMATTER_URI
    javadoc_link: str = "https://docs.oracle.com/javase/9/docs/api"

    format_replace: bool = False
    format_roots: tuple[Path, ...] = (Path("src"), Path("demo"))
    java_home: Optional[Path] = None

    def resolve(self, path: Path) -> Path:
        return self.root / path

    @property
    def generated_sentinel(self) -> str:
        return self.sentinel or f"// {self.published_file.name}"

    @property
    def tools_dir(self) -> Path:
        return self.resolve(self.cache) / "tools"

    @property
    def libraries_dir(self) -> Path:
        return self.resolve(self.cache) / "libraries"

    @property
    def source_main_dir(self) -> Path:
        return self.resolve(self.source_main)

    @property
    def source_test_dir(self) -> Path:
        return self.resolve(self.source_test)

    @property
    def target_dir(self) -> Path:
        return self.resolve(self.target)

    @property
    def target_main_dir(self) -> Path:
        return self.target_dir / "classes" / "main"

    @property
    def target_test_dir(self) -> Path:
        return self.target_dir / "classes" / "test"

    @property
    def javadoc_dir(self) -> Path:
        return self.target_dir / "javadoc"

    @property
    def artifacts_dir(self) -> Path:
        return self.target_dir / "artifacts"

    @property
    def generated_path(self) -> Path:
        return self.target_dir / self.published_file.name

    @property
    def published_path(self) -> Path:
        return self.resolve(self.published_file)

    def jdk_tool(self, name: str) -> str:
        if self.java_home is None:
            return name
        return os.fspath(self.java_home / "bin" / name)


class Mark(BaseModel):
    """Length snapshot of a command's argument list."""
    model_config = ConfigDict(frozen=True)

    position: NonNegativeInt


class MergeResult(BaseModel):
    lines: list[str] = Field(default_factory=list)
    imports: set[str] = Field(default_factory=set)
    import_index: NonNegativeInt = 0

    def render(self) -> list[str]:
        """Return the merged lines with the sorted import block spliced in."""
        lines = list(self.lines)
        lines[self.import_index:self.import_index] = sorted(self.imports)
        return lines
