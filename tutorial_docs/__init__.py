"""Render annotated TypeScript examples as tutorial Markdown.

This package exposes the CLI entry points used by ``tutorial-docs`` to turn
example files into documents that interleave prose, code, API tables and test
outcomes.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from tutorial_docs import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
