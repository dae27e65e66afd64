import logging
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


MODULE_PAGE = """<!DOCTYPE html>
<html>
<head><title>Module 1: Introduction</title></head>
<body>
  <img src="Images/Module 1/slide1.png" alt="Slide 1">
</body>
</html>
"""

EXAMS_PAGE = """<!DOCTYPE html>
<html>
<head><title>Exams</title></head>
<body>
  <label for="accordion1">Trimester 1 2023</label>
  <div class="content hidecontent">
    <h1>Final Exam</h1>
    <img src="Images/Exams/t1.png">
  </div>
  <label for="accordion2">Trimester 2 2023</label>
  <div class="content hidecontent">
    <img src="Images/Exams/t2.png">
  </div>
</body>
</html>
"""


@pytest.fixture
def isolate_logging():
    """Isolate logging configuration between tests to prevent CI issues.

    The CLI installs a RichHandler on the root logger; tests that invoke it
    restore the previous handlers afterwards.
    """
    original_handlers = logging.root.handlers[:]
    original_level = logging.root.level

    logging.root.handlers.clear()
    logging.root.addHandler(logging.NullHandler())

    yield

    logging.root.handlers.clear()
    logging.root.handlers.extend(original_handlers)
    logging.root.setLevel(original_level)


@pytest.fixture
def write_page(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write ``html`` to ``tmp_path / rel_path`` creating parent directories."""

    def _write(rel_path: str, html: str) -> Path:
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def material_tree(tmp_path: Path, write_page: Callable[[str, str], Path]) -> Path:
    """A source tree with one subject holding a module page and an exams page."""

    write_page("TSN 2201/Module 1.html", MODULE_PAGE)
    write_page("TSN 2201/Exams.html", EXAMS_PAGE)
    (tmp_path / "TSN 2201" / "Images").mkdir()
    return tmp_path
