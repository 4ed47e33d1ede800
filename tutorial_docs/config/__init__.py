"""Load and validate tutorial configuration YAML.

This subpackage parses the project's ``tutorials.yaml`` file, applies defaults
for every missing key, resolves relative paths against the project root, and
produces a :class:`TutorialConfig` that the generator and CLI consume. The
primary entry point is :func:`load_tutorial_config`.

Examples
--------
>>> from pathlib import Path
>>> from tutorial_docs.config import load_tutorial_config
>>> config = load_tutorial_config(Path("tutorials.yaml"))  # doctest: +SKIP
>>> config.code_language  # doctest: +SKIP
'ts'
"""

from .loader import load_tutorial_config
from .models import IndexConfig, TutorialConfig, TutorialConfigError

__all__ = [
    "IndexConfig",
    "TutorialConfig",
    "TutorialConfigError",
    "load_tutorial_config",
]
