"""CLI package.

The ``cli`` sub-package contains the Click application.  Run it after
Composer has dumped its autoloader, e.g. from a ``post-autoload-dump``
script in ``composer.json``.
"""
from __future__ import annotations
