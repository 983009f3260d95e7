"""Test configuration and fixtures for CodeGlow tests."""

import pytest
import tempfile
import shutil
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from codeglow_pkg.errors import HighlightEngineFailure
from codeglow_pkg.highlighter import Highlighter


class StubHighlighter(Highlighter):
    """Deterministic highlighter that wraps code in a marker tag."""

    name = 'Stub'

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.calls = []

    def highlight(self, code, language, theme):
        self.calls.append((code, language, theme))
        if language in self.fail_on:
            raise HighlightEngineFailure(f"stub cannot highlight {language}")
        return f'<highlighted>{code}</highlighted>'


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def stub_highlighter():
    return StubHighlighter()


@pytest.fixture
def failing_rust_highlighter():
    return StubHighlighter(fail_on=['rust'])


@pytest.fixture
def mock_site_dir(temp_dir):
    """Create a generated-site tree with a mix of eligible and ineligible pages."""
    site_dir = Path(temp_dir) / 'public'
    posts_dir = site_dir / 'posts' / 'hello-world'
    posts_dir.mkdir(parents=True)
    (site_dir / 'assets').mkdir()

    (site_dir / 'index.html').write_text("""<!DOCTYPE html>
<html>
<body>
<h1>Home</h1>
<p>No code here.</p>
</body>
</html>
""", encoding='utf-8')

    (posts_dir / 'index.html').write_text("""<!DOCTYPE html>
<html>
<body>
<article>
<p>Hello:</p>
<pre><code class="language-python">print(&quot;hi&quot;)</code></pre>
<p>Something exotic:</p>
<pre><code class="language-brainfuck">++++[&gt;++&lt;-]</code></pre>
</article>
</body>
</html>
""", encoding='utf-8')

    (site_dir / 'assets' / 'app.js').write_text(
        '// <pre><code class="language-python">x</code></pre>\n', encoding='utf-8'
    )

    return str(site_dir)


@pytest.fixture(autouse=True)
def reset_codeglow_logger():
    """Drop handlers the CLI installs so each test starts clean."""
    yield
    logger = logging.getLogger('CodeGlow')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
