"""DialysisCareBot: a keyword-driven dialysis education chat assistant.

The package provides a FastAPI application factory named ``create_app``
(see :mod:`carebot.server`) and a terminal front end (:mod:`carebot.console`).

Typical usage
-------------
from carebot import create_app
app = create_app()

or, from the provided launchers:

python scripts/run_server.py --host 127.0.0.1 --port 8000
carebot-console --delay 0.5
"""

from __future__ import annotations

from .responder import classify, respond
from .server import create_app
from .session import ChatSession, SessionRegistry

__all__ = [
    "ChatSession",
    "SessionRegistry",
    "classify",
    "create_app",
    "respond",
    "__version__",
    "get_version",
]

# ---------------------------------------------------------------------
# Version handling
# ---------------------------------------------------------------------
__version__ = "0.1.0"


def get_version() -> str:
    """Return the package version."""
    return __version__
