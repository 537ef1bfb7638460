"""
Producer liveness detection.

The viewer waits for the process that writes the log (the game server) and
clears the log when that process goes away. This module answers the single
question "is a process with this name running right now?" using psutil, so
the same code works on Windows, Linux and macOS.
"""

import psutil

from ..errors import ProducerCheckError


def normalize_process_name(name: str) -> str:
    """
    Reduce a process name to a comparable form.

    Windows reports "valheim.exe" while the config says "valheim", so the
    comparison ignores case and a trailing ".exe".
    """
    name = name.strip().lower()
    if name.endswith(".exe"):
        name = name[:-4]
    return name


class ProcessMonitor:
    """
    Report whether a named process is alive, via the OS process table.

    Example:
        >>> ProcessMonitor().is_running("valheim")
        False
    """

    def is_running(self, process_name: str) -> bool:
        """
        Check the process table for a process called process_name.

        Args:
            process_name: Name with or without the ".exe" suffix.

        Returns:
            bool: True if at least one matching process exists.

        Raises:
            ProducerCheckError: If the process table cannot be read.
        """
        wanted = normalize_process_name(process_name)
        try:
            for proc in psutil.process_iter(["name"]):
                # Name is None for processes we are not allowed to inspect
                name = proc.info.get("name")
                if name and normalize_process_name(name) == wanted:
                    return True
        except (psutil.Error, OSError) as exc:
            raise ProducerCheckError(f"Could not list processes: {exc}") from exc
        return False
