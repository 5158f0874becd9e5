"""Shared fixtures for callsite tests."""

import pytest

from callsite.core.models import Symbol


@pytest.fixture
def bar():
    """The symbol most tests search for."""
    return Symbol("bar")


@pytest.fixture
def lisp_tree(tmp_path):
    """
    A small source tree:

    src/a.el        calls bar twice
    src/b.scm       defines bar, calls nothing
    src/notes.txt   not source
    .git/c.el       excluded directory
    """
    src = tmp_path / "src"
    src.mkdir()
    (src / "a.el").write_text(
        "(defun use-bar (x)\n"
        "  (bar x)\n"
        "  (when x (bar 1)))\n"
    )
    (src / "b.scm").write_text("(define (bar y) (* y 2))\n")
    (src / "notes.txt").write_text("(bar should not be read)\n")

    git = tmp_path / ".git"
    git.mkdir()
    (git / "c.el").write_text("(bar 'hidden)\n")

    return tmp_path
