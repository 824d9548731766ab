class BuildError(Exception):
    """Base class for every failure raised by a build stage."""
    pass


class InvalidMark(BuildError):
    """Raised when a command mark points outside the argument list"""
    pass


class NonZeroExit(BuildError):
    """Raised when an external tool exits with a non-zero status"""

    def __init__(self, arguments, exit_code: int, stderr: str = ""):
        self.arguments = list(arguments)
        self.exit_code = exit_code
        self.stderr = stderr or ""
        message = f"{self.arguments[0]} exited with code {exit_code}"
        if self.stderr.strip():
            message += f"\n{self.stderr.rstrip()}"
        super().__init__(message)


class DownloadError(BuildError):
    """Raised when a remote artifact could not be transferred"""

    def __init__(self, uri: str, cause: Exception):
        self.uri = uri
        self.cause = cause
        super().__init__(f"download of {uri} failed: {cause}")


class MergeSentinelMissing(BuildError):
    """Raised when a source module has no end-of-header marker line"""

    def __init__(self, path, sentinel: str):
        self.path = path
        self.sentinel = sentinel
        super().__init__(f"{path} does not contain the line {sentinel!r}")


class StageFailed(BuildError):
    """Raised by the pipeline when one of its stages fails"""

    def __init__(self, stage: str, cause: Exception):
        self.stage = stage
        self.cause = cause
        super().__init__(f"stage {stage} failed: {cause!r}")
