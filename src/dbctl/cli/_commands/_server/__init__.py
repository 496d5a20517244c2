"""Server control commands."""

from ._database import create_db
from ._lifecycle import init, start, status, stop

__all__ = ["create_db", "init", "start", "status", "stop"]
