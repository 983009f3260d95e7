import os
import re
import html
import time
import logging
from dataclasses import dataclass, field
from concurrent.futures import ProcessPoolExecutor
from typing import Iterable, Iterator, List, Optional, Tuple

from .errors import (
    HighlightEngineFailure,
    MissingOutputDirectory,
    UnreadableFile,
    UnwritableFile,
)
from .highlighter import DEFAULT_THEME, Highlighter, PygmentsHighlighter

DEFAULT_OUTPUT_DIR = 'public'

SUPPORTED_LANGUAGES = frozenset([
    'typescript',
    'javascript',
    'python',
    'rust',
    'go',
    'bash',
    'json',
    'yaml',
    'toml',
    'markdown',
    'html',
    'css',
    'scss',
])

# Markdown renderers emit fenced blocks as <pre><code class="language-xxx">...</code></pre>
CODE_BLOCK_PATTERN = re.compile(
    r'<pre><code class="language-([\w+#-]+)">(.*?)</code></pre>',
    re.DOTALL
)

# Per-process processor used by pool workers
_worker_processor = None


@dataclass
class CodeBlockMatch:
    full_match: str
    language: str
    raw_html: str
    start: int
    end: int


@dataclass
class FileOutcome:
    path: str
    blocks_matched: int = 0
    blocks_highlighted: int = 0
    blocks_skipped: int = 0
    blocks_failed: int = 0
    modified: bool = False
    error: Optional[str] = None
    # (level, message) pairs recorded in pool workers, logged by the parent
    messages: List[Tuple[int, str]] = field(default_factory=list)


@dataclass
class ProcessingSummary:
    files_scanned: int = 0
    files_modified: int = 0
    files_failed: int = 0
    blocks_highlighted: int = 0
    blocks_skipped: int = 0
    blocks_failed: int = 0
    elapsed: float = 0.0
    modified_paths: List[str] = field(default_factory=list)

    def add(self, outcome: FileOutcome) -> None:
        """Fold one file's outcome into the run totals."""
        self.files_scanned += 1
        self.blocks_highlighted += outcome.blocks_highlighted
        self.blocks_skipped += outcome.blocks_skipped
        self.blocks_failed += outcome.blocks_failed
        if outcome.error:
            self.files_failed += 1
        if outcome.modified:
            self.files_modified += 1
            self.modified_paths.append(outcome.path)

    @property
    def has_failures(self) -> bool:
        return bool(self.blocks_failed or self.files_failed)


def decode_entities(text: str) -> str:
    """
    Turn HTML-escaped code back into literal source text.

    Decoding is a single pass, so ``&amp;lt;`` becomes ``&lt;`` and not ``<``.
    """
    return html.unescape(text)


def find_code_blocks(content: str) -> List[CodeBlockMatch]:
    """Collect every fenced code block in ``content``, left to right."""
    return [
        CodeBlockMatch(
            full_match=m.group(0),
            language=m.group(1),
            raw_html=m.group(2),
            start=m.start(),
            end=m.end(),
        )
        for m in CODE_BLOCK_PATTERN.finditer(content)
    ]


def iter_html_files(root_directory: str) -> Iterator[str]:
    """
    Yield every .html file under ``root_directory`` in a stable order.

    Symlinked directories are followed; a directory reached again through a
    link (including a link loop) is not descended a second time.
    """
    visited = set()
    for root, dirs, files in os.walk(root_directory, followlinks=True):
        real_root = os.path.realpath(root)
        if real_root in visited:
            dirs[:] = []
            continue
        visited.add(real_root)
        dirs.sort()
        for file in sorted(files):
            file_path = os.path.join(root, file)
            if file.endswith('.html') and os.path.isfile(file_path):
                yield file_path


def _init_worker(highlighter, theme, languages):
    """Build a HighlightPostProcessor in each pool worker."""
    global _worker_processor
    _worker_processor = HighlightPostProcessor(highlighter=highlighter, theme=theme, languages=languages)
    _worker_processor.defer_logging = True


def _process_in_worker(file_path):
    return _worker_processor.process_file(file_path)


class HighlightPostProcessor:
    """Rewrites fenced code blocks in generated HTML with highlighted markup."""

    def __init__(self, highlighter: Highlighter = None, theme: str = DEFAULT_THEME,
                 languages: Iterable[str] = None, workers: int = 1):
        self.theme = theme
        self.highlighter = highlighter or PygmentsHighlighter(theme)
        self.languages = frozenset(languages) if languages is not None else SUPPORTED_LANGUAGES
        self.workers = max(1, int(workers or 1))
        self.logger = logging.getLogger('CodeGlow')
        self.defer_logging = False

    def run(self, root_directory: str) -> ProcessingSummary:
        """
        Highlight every eligible code block under ``root_directory``.

        Args:
            root_directory: Directory holding the generated site

        Returns:
            ProcessingSummary with file and block counts

        Raises:
            MissingOutputDirectory: if ``root_directory`` is not an existing directory
        """
        if not os.path.isdir(root_directory):
            raise MissingOutputDirectory(f"Output directory '{root_directory}' does not exist")

        start_time = time.time()
        files = list(iter_html_files(root_directory))
        self.logger.debug(f"Found {len(files)} HTML files under {root_directory}")

        if self.workers > 1 and len(files) > 1:
            self.logger.debug(f"Using {self.workers} worker processes")
            outcomes = self._process_with_multiprocessing(files)
        else:
            outcomes = (self.process_file(file_path) for file_path in files)

        summary = ProcessingSummary()
        for outcome in outcomes:
            for level, message in outcome.messages:
                self.logger.log(level, message)
            summary.add(outcome)
            if outcome.modified:
                self.logger.info(f"  ✓ Highlighted code blocks in {outcome.path}")

        summary.elapsed = time.time() - start_time
        return summary

    def _process_with_multiprocessing(self, files):
        with ProcessPoolExecutor(
            max_workers=self.workers,
            initializer=_init_worker,
            initargs=(self.highlighter, self.theme, self.languages),
        ) as executor:
            # map() keeps results in submission order
            return list(executor.map(_process_in_worker, files))

    def process_file(self, file_path: str) -> FileOutcome:
        """Highlight the code blocks of one HTML file, writing it back if anything changed."""
        outcome = FileOutcome(path=file_path)

        try:
            content = self._read(file_path)
        except UnreadableFile as e:
            self._log(outcome, logging.ERROR, str(e))
            outcome.error = str(e)
            return outcome

        matches = find_code_blocks(content)
        outcome.blocks_matched = len(matches)

        pieces = []
        position = 0
        for match in matches:
            replacement = self.highlight_block(match, file_path, outcome)
            if replacement is None:
                continue
            pieces.append(content[position:match.start])
            pieces.append(replacement)
            position = match.end

        if not outcome.blocks_highlighted:
            return outcome

        pieces.append(content[position:])
        try:
            self._write(file_path, ''.join(pieces))
        except UnwritableFile as e:
            self._log(outcome, logging.ERROR, str(e))
            outcome.error = str(e)
            return outcome

        outcome.modified = True
        return outcome

    def highlight_block(self, match: CodeBlockMatch, file_path: str, outcome: FileOutcome) -> Optional[str]:
        """Return highlighted markup for one block, or None to leave it untouched."""
        if match.language not in self.languages:
            self._log(outcome, logging.DEBUG, f"Skipping unsupported language '{match.language}' in {file_path}")
            outcome.blocks_skipped += 1
            return None

        code = decode_entities(match.raw_html)
        try:
            highlighted = self.highlighter.highlight(code, match.language, self.theme)
        except HighlightEngineFailure as e:
            self._log(outcome, logging.ERROR, f"Error highlighting {match.language} in {file_path}: {e}")
            outcome.blocks_failed += 1
            return None
        except Exception as e:
            self._log(outcome, logging.ERROR, f"Unexpected error highlighting {match.language} in {file_path}: {e}")
            outcome.blocks_failed += 1
            return None

        outcome.blocks_highlighted += 1
        return highlighted

    def _log(self, outcome, level, message):
        # Worker processes may have no handlers, so their records travel back with the outcome
        if self.defer_logging:
            outcome.messages.append((level, message))
        else:
            self.logger.log(level, message)

    def _read(self, file_path):
        try:
            with open(file_path, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except (IOError, OSError, UnicodeDecodeError) as e:
            raise UnreadableFile(f"Failed to read HTML file {file_path}: {e}")

    def _write(self, file_path, content):
        try:
            with open(file_path, 'w', encoding='utf-8', newline='') as f:
                f.write(content)
        except (IOError, OSError) as e:
            raise UnwritableFile(f"Failed to write HTML file {file_path}: {e}")
