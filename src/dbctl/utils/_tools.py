"""Discovery of the server's command-line tools.

Supervisors never search for binaries themselves. Callers resolve a
ServerTools value once at setup time, either by discovery or from explicit
configuration, and pass it in.
"""

import os
import shutil
from dataclasses import dataclass, fields
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from dbctl.exceptions import ToolNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

ToolName = Literal["mysqld_safe", "mysqld", "mysql_install_db", "mysqladmin"]

# mysqld lives in sbin on Debian and is usually not on PATH
DEFAULT_SBIN_DIRS: tuple[Path, ...] = (
    Path("/usr/sbin"),
    Path("/usr/local/sbin"),
    Path("/usr/local/mysql/bin"),
)


@dataclass(frozen=True, slots=True)
class ServerTools:
    """Resolved paths of the server's command-line tools.

    Attributes:
        mysqld_safe: Wrapper script that starts and monitors the server.
        mysqld: The server binary, used for initialization when
            mysql_install_db is unavailable.
        mysql_install_db: Legacy data directory initialization tool.
        mysqladmin: Administrative client for one-shot commands.
    """

    mysqld_safe: Path | None = None
    mysqld: Path | None = None
    mysql_install_db: Path | None = None
    mysqladmin: Path | None = None

    def require(self, name: ToolName) -> Path:
        """Return the path of a tool, failing if it was not resolved.

        Args:
            name: The tool name.

        Returns:
            The resolved executable path.

        Raises:
            ToolNotFoundError: If the tool is not available.
        """
        path: Path | None = getattr(self, name)
        if path is None:
            msg = f"unable to find {name}"
            raise ToolNotFoundError(msg, tool=name)
        return path

    def as_dict(self) -> dict[str, str | None]:
        """Return tool names mapped to their paths as strings."""
        result: dict[str, str | None] = {}
        for f in fields(self):
            value: Path | None = getattr(self, f.name)
            result[f.name] = str(value) if value is not None else None
        return result


def tool_names() -> tuple[ToolName, ...]:
    """Return the names of all tools a ServerTools value can hold."""
    return ("mysqld_safe", "mysqld", "mysql_install_db", "mysqladmin")


def find_tool(
    name: str,
    *,
    search_path: str | None = None,
    extra_dirs: Iterable[Path] = DEFAULT_SBIN_DIRS,
) -> Path | None:
    """Locate an executable on the search path or in extra directories.

    Args:
        name: Executable name.
        search_path: PATH-style string to search. Uses PATH if None.
        extra_dirs: Directories searched after the search path.

    Returns:
        The executable's path, or None if it was not found.
    """
    found = shutil.which(name, path=search_path)
    if found is not None:
        return Path(found)

    extra = os.pathsep.join(str(d) for d in extra_dirs)
    if not extra:
        return None
    found = shutil.which(name, path=extra)
    return Path(found) if found is not None else None


def validate_tool(name: str, path: Path) -> Path:
    """Check that an explicitly configured tool path is executable.

    Args:
        name: Tool name, for error reporting.
        path: Configured path.

    Returns:
        The path, unchanged.

    Raises:
        ToolNotFoundError: If the path is missing or not executable.
    """
    if not path.is_file() or not os.access(path, os.X_OK):
        msg = f"{name} at {path} is not an executable file"
        raise ToolNotFoundError(msg, tool=name, path=path)
    return path


def discover_tools(
    *,
    search_path: str | None = None,
    extra_dirs: Iterable[Path] = DEFAULT_SBIN_DIRS,
    overrides: Mapping[str, Path | None] | None = None,
) -> ServerTools:
    """Resolve every server tool.

    Explicit overrides win over discovery and must point at executables.
    Tools that cannot be found are left as None; operations that need them
    raise ToolNotFoundError when invoked.

    Args:
        search_path: PATH-style string to search. Uses PATH if None.
        extra_dirs: Directories searched after the search path.
        overrides: Explicit tool paths keyed by tool name.

    Returns:
        The resolved tools.

    Raises:
        ToolNotFoundError: If an override does not point at an executable.
    """
    dirs = tuple(extra_dirs)
    resolved: dict[str, Path | None] = {}
    for name in tool_names():
        override = overrides.get(name) if overrides else None
        if override is not None:
            resolved[name] = validate_tool(name, override)
        else:
            resolved[name] = find_tool(name, search_path=search_path, extra_dirs=dirs)

    return ServerTools(**resolved)
