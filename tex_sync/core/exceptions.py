"""
Errors raised by the SyncTeX engine.

Every public lookup either returns a result or raises one of these; nothing
falls back to a guessed position.
"""


class SyncTexError(Exception):
    """Base class for all tex-sync errors."""

    pass


class SyncTexNotFoundError(SyncTexError):
    """Neither ``.synctex`` nor ``.synctex.gz`` exists for the PDF."""

    def __init__(self, pdf_path: str, paths: list[str]):
        self.pdf_path = pdf_path
        self.paths = paths
        super().__init__(f".synctex and .synctex.gz file not found for {pdf_path}: {paths}")


class SyncTexParseError(SyncTexError):
    """A synctex file exists but could not be decoded or parsed."""

    def __init__(self, message: str, paths: list[str] | None = None):
        self.paths = paths or []
        if self.paths:
            message = f"{message} (attempted: {', '.join(self.paths)})"
        super().__init__(message)


class NoSuchFileInSyncTex(SyncTexError):
    """The requested source file has no entry in the synctex data."""

    def __init__(self, file_path: str, inputs: list[str]):
        self.file_path = file_path
        self.inputs = inputs
        super().__init__(f"No entry of {file_path} found in the synctex file. Entries: {inputs}")


class NoLineRecorded(SyncTexError):
    pass


class NoEntriesInSyncTex(SyncTexError):
    pass


class NoMatchFound(SyncTexError):
    pass


class InputFileNotFoundError(SyncTexError):
    """The file a backward search points to does not exist on disk."""

    def __init__(self, file_path: str):
        self.file_path = file_path
        super().__init__(f"Input file to jump to does not exist in the file system: {file_path}")


class EncodingError(SyncTexError, ValueError):
    def __init__(self, code_point: int, index: int):
        self.code_point = code_point
        self.index = index
        super().__init__(f"Unknown code: {code_point:#x} at {index}")


class SyncTexCommandError(SyncTexError):
    """The ``synctex`` command failed or printed no usable result."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class SyncTexCommandNotFoundError(SyncTexCommandError):
    def __init__(self, command: str):
        self.command = command
        super().__init__(f"synctex command not found: {command}")
