"""
CodeGlow - build-time syntax highlighting for statically generated sites.

CodeGlow walks a directory of generated HTML, finds fenced code blocks tagged
with a language class, and replaces them with Pygments-highlighted markup.
"""

__version__ = "1.0.0"

from .core import HighlightPostProcessor, ProcessingSummary, FileOutcome, SUPPORTED_LANGUAGES
from .errors import (
    CodeGlowError,
    MissingOutputDirectory,
    HighlighterInitError,
    HighlightEngineFailure,
    UnreadableFile,
    UnwritableFile,
)
from .highlighter import Highlighter, PygmentsHighlighter

__all__ = [
    'HighlightPostProcessor',
    'ProcessingSummary',
    'FileOutcome',
    'SUPPORTED_LANGUAGES',
    'Highlighter',
    'PygmentsHighlighter',
    'CodeGlowError',
    'MissingOutputDirectory',
    'HighlighterInitError',
    'HighlightEngineFailure',
    'UnreadableFile',
    'UnwritableFile',
]
