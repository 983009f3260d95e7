#!/usr/bin/env python3
"""
Highlighting engines for CodeGlow.

The post-processor only ever talks to a ``Highlighter``; the production engine
is Pygments, and tests swap in a deterministic stub.
"""

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .errors import HighlightEngineFailure, HighlighterInitError

DEFAULT_THEME = 'github-dark'


class Highlighter:
    """Turns source text plus a language tag into highlighted markup."""

    name = 'abstract'

    def highlight(self, code: str, language: str, theme: str) -> str:
        raise NotImplementedError


class PygmentsHighlighter(Highlighter):
    """Highlighter backed by Pygments with inline (class-free) styling."""

    name = 'Pygments'

    def __init__(self, theme: str = DEFAULT_THEME):
        try:
            get_style_by_name(theme)
        except ClassNotFound:
            raise HighlighterInitError(f"Unknown Pygments theme: {theme}")
        self.theme = theme
        self._formatters = {}

    def _formatter(self, theme):
        if theme not in self._formatters:
            try:
                self._formatters[theme] = HtmlFormatter(style=theme, noclasses=True, wrapcode=True)
            except ClassNotFound:
                raise HighlightEngineFailure(f"Unknown Pygments theme: {theme}")
        return self._formatters[theme]

    def highlight(self, code: str, language: str, theme: str = None) -> str:
        """
        Render ``code`` as an HTML fragment.

        Args:
            code: Literal source text (entities already decoded)
            language: Lexer alias, e.g. ``python`` or ``bash``
            theme: Pygments style name; defaults to the theme given at construction

        Returns:
            The highlighted ``<div class="highlight">`` fragment

        Raises:
            HighlightEngineFailure: if no lexer exists for ``language`` or rendering fails
        """
        try:
            lexer = get_lexer_by_name(language)
        except ClassNotFound:
            raise HighlightEngineFailure(f"No Pygments lexer for language '{language}'")

        formatter = self._formatter(theme or self.theme)
        try:
            return highlight(code, lexer, formatter).rstrip('\n')
        except Exception as e:
            raise HighlightEngineFailure(f"Pygments failed on {language} block: {e}") from e
