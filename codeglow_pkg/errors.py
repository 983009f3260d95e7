"""Exception types raised by CodeGlow."""


class CodeGlowError(Exception):
    """Base class for CodeGlow errors."""


class MissingOutputDirectory(CodeGlowError, FileNotFoundError):
    """The generated site directory does not exist. Fatal."""


class HighlighterInitError(CodeGlowError):
    """The highlighting engine could not be set up (e.g. unknown theme). Fatal."""


class UnreadableFile(CodeGlowError, OSError):
    """An HTML file could not be read; the file is skipped."""


class UnwritableFile(CodeGlowError, OSError):
    """A highlighted HTML file could not be written back; the file is skipped."""


class HighlightEngineFailure(CodeGlowError):
    """A single code block could not be highlighted; the block is left as-is."""
