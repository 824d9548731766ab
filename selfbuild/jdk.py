"""
Option models for the JDK tools driven by the build stages.

Each model renders a CommandBuilder holding the options only; callers append
the operands (source files, archive contents, ...) themselves.
"""
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from selfbuild.command import CommandBuilder, Token


class Javac(BaseModel):
    generate_all_debugging_information: bool = False
    destination_path: Optional[Path] = None
    class_path: list[Path] = []
    encoding: Optional[str] = "UTF-8"

    def to_command(self, program: str = "javac") -> CommandBuilder:
        command = CommandBuilder(program)
        if self.generate_all_debugging_information:
            command.add("-g")
        if self.destination_path is not None:
            command.add("-d").add(self.destination_path)
        if self.class_path:
            command.add("--class-path").add(os.pathsep.join(os.fspath(p) for p in self.class_path))
        if self.encoding:
            command.add("-encoding").add(self.encoding)
        return command


class Jar(BaseModel):
    verbose: bool = False
    main_class: Optional[str] = None

    def to_command(self, program: str = "jar") -> CommandBuilder:
        command = CommandBuilder(program).add("--create")
        if self.verbose:
            command.add("--verbose")
        if self.main_class:
            command.add("--main-class").add(self.main_class)
        return command


class Jdeps(BaseModel):
    summary: bool = False
    recursive: bool = False

    def to_command(self, program: str = "jdeps") -> CommandBuilder:
        command = CommandBuilder(program)
        if self.summary:
            command.add("-summary")
        if self.recursive:
            command.add("-recursive")
        return command


def execute(*tokens: Token, capture_output: bool = False):
    """Build and run a one-shot command from literal tokens."""
    if not tokens:
        raise ValueError("a command needs at least the program token")
    command = CommandBuilder(tokens[0], capture_output=capture_output)
    for token in tokens[1:]:
        command.add(token)
    return command.execute()
