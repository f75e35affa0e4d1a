"""Process-wide switch controlling whether anything opens a web browser.

``options["browse"]`` is the in-process flag; the ``BROWSER`` environment
variable is what git credential helpers and other child processes consult.
:func:`browser_suppressed` overrides both for the duration of a block and
puts them back exactly as they were on every exit path.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

# POSIX ``true``: a browser command that accepts any URL and does nothing.
NOOP_BROWSER = "true"

options: dict[str, Any] = {"browse": True}

_UNSET = object()


def snapshot() -> tuple[Any, str | None]:
    """Return the current ``(browse option, BROWSER env)`` pair."""
    return options.get("browse", _UNSET), os.environ.get("BROWSER")


@contextmanager
def browser_suppressed() -> Iterator[None]:
    """Disable browser launching inside the block, then restore prior state."""
    old_browse, old_env = snapshot()
    options["browse"] = False
    os.environ["BROWSER"] = NOOP_BROWSER
    try:
        yield
    finally:
        if old_browse is _UNSET:
            options.pop("browse", None)
        else:
            options["browse"] = old_browse
        if old_env is None:
            os.environ.pop("BROWSER", None)
        else:
            os.environ["BROWSER"] = old_env
