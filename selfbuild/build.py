import logging
import os
import sys
import traceback
from typing import Callable, Optional

from selfbuild.command import CommandBuilder
from selfbuild.config import load_config
from selfbuild.deps import ToolCache
from selfbuild.errors import StageFailed
from selfbuild.jdk import Jar, Javac, Jdeps, execute
from selfbuild.merge import SourceMerger, generated_notice
from selfbuild.models import BuildConfig
from selfbuild.publish import Publisher
from selfbuild.utils import is_java_file, tree_delete

logger = logging.getLogger(__name__)

STAGES = ("format", "clean", "generate", "compile", "test", "javadoc", "jar", "jdeps")


class Pipeline:
    """
    Runs the build stages in a fixed order. The first failing stage aborts
    the run with StageFailed.
    """

    def __init__(
        self,
        config: BuildConfig,
        cache: Optional[ToolCache] = None,
        merger: Optional[SourceMerger] = None,
        publisher: Optional[Publisher] = None,
    ):
        self.config = config
        self.owns_cache = cache is None
        self.cache = cache or ToolCache(config.libraries_dir, config.maven_repository)
        self.merger = merger or SourceMerger(config.generated_sentinel, config.import_prefix)
        self.publisher = publisher or Publisher()

    def close(self):
        if self.owns_cache:
            self.cache.close()

    def stages(self) -> list[tuple[str, Callable[[], None]]]:
        return [(name, getattr(self, name)) for name in STAGES]

    def run(self):
        for name, stage in self.stages():
            print(f"\n[{name}]\n")
            try:
                stage()
            except Exception as e:
                raise StageFailed(name, e) from e
            logger.debug(f"Stage {name} done")

    # --- Stages ---

    def format(self):
        config = self.config
        mode = "replace" if config.format_replace else "validate"
        name = "google-java-format"
        jar = self.cache.resolve_by_uri(config.formatter_uri, config.tools_dir / name)
        command = CommandBuilder(config.jdk_tool("java"), capture_output=True)
        command.add("-jar").add(jar).add(f"--{mode}")
        roots = [config.resolve(root) for root in config.format_roots]
        command.add_all(roots, lambda unit: is_java_file(unit) and unit.name != "module-info.java")
        command.dump(print)
        result = command.execute()
        if result.stdout:
            print(result.stdout, end="")

    def clean(self):
        tree_delete(self.config.target_dir)
        print(f"deleted {self.config.target_dir}")

    def generate(self):
        config = self.config
        header = [generated_notice(), *config.header_lines, ""]
        sources = [config.source_main_dir / module for module in config.modules]
        merged = self.merger.merge(header, sources)
        changed = self.publisher.publish_if_changed(merged.render(), config.generated_path, config.published_path)
        print(f"generated {config.generated_path}")
        if changed:
            print(
                f"copied new {config.published_file.name} version - don't forget to publish (commit/push)",
                file=sys.stderr,
            )

    def compile(self):
        config = self.config
        javac = Javac(generate_all_debugging_information=True, destination_path=config.target_main_dir)
        javac.to_command(config.jdk_tool("javac")).add(config.generated_path).dump(print).execute()

        javac.destination_path = config.target_test_dir
        javac.class_path = [
            config.target_main_dir,
            self.cache.resolve_library("org.junit.jupiter", "junit-jupiter-api", config.junit_jupiter_version),
            self.cache.resolve_library("org.junit.platform", "junit-platform-commons", config.junit_platform_version),
            self.cache.resolve_library("org.opentest4j", "opentest4j", config.opentest4j_version),
        ]
        command = javac.to_command(config.jdk_tool("javac"))
        command.add_all(config.source_test_dir, is_java_file).dump(print).execute()

    def test(self):
        config = self.config
        name = "junit-platform-console-standalone"
        version = config.junit_platform_version
        file_name = f"{name}-{version}.jar"
        uri = "/".join([config.maven_repository, "org/junit/platform", name, version, file_name])
        jar = self.cache.resolve_by_uri(uri, config.tools_dir / name, file_name, lambda path: True)
        execute(
            config.jdk_tool("java"),
            "-ea",
            "-jar",
            jar,
            "--class-path",
            config.target_test_dir,
            "--class-path",
            config.target_main_dir,
            "--scan-classpath",
        )

    def javadoc(self):
        config = self.config
        config.javadoc_dir.mkdir(parents=True, exist_ok=True)
        execute(
            config.jdk_tool("javadoc"),
            "-quiet",
            "-Xdoclint:all,-missing",
            "-package",
            "-linksource",
            "-link",
            config.javadoc_link,
            "-d",
            config.javadoc_dir,
            config.published_path,
        )

    def jar(self):
        config = self.config
        config.artifacts_dir.mkdir(parents=True, exist_ok=True)
        name = config.artifact_name
        archives = [
            (f"{name}.jar", config.target_main_dir),
            (f"{name}-sources.jar", config.source_main_dir),
            (f"{name}-javadoc.jar", config.javadoc_dir),
        ]
        command = Jar().to_command(config.jdk_tool("jar"))
        mark = command.mark()
        for artifact, root in archives:
            command.reset_to_mark(mark)
            command.add("--file").add(config.artifacts_dir / artifact)
            command.add("-C").add(root).add(".")
            command.dump(print)
            command.execute()

    def jdeps(self):
        config = self.config
        jdeps = Jdeps(summary=True, recursive=True)
        command = jdeps.to_command(config.jdk_tool("jdeps"))
        command.add(config.artifacts_dir / f"{config.artifact_name}.jar").execute()


def main(config: Optional[BuildConfig] = None) -> int:
    logging.basicConfig(
        level=os.environ.get("SELFBUILD_LOG_LEVEL", "INFO").upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = config or load_config()
    pipeline = Pipeline(config)
    try:
        pipeline.run()
    except StageFailed as e:
        print(f"build failed in stage {e.stage} due to: {e.cause!r}", file=sys.stderr)
        traceback.print_exception(e.cause, file=sys.stderr)
        return 1
    finally:
        pipeline.close()
    print("\n=== Build Complete ===")
    return 0


if __name__ == "__main__":
    sys.exit(main())
