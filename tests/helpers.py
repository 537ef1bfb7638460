"""Shared fakes for the fancierlog test suite."""

import os
import sys
from datetime import datetime

# Make the package importable without installing it
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, os.path.join(project_root, "tools"))

from fancierlog.errors import ProducerCheckError  # noqa: E402

FIXED_NOW = datetime(2024, 1, 1, 12, 0, 0)
TIME_FORMAT = "%H:%M:%S"
STAMP = "[12:00:00]: "


def fixed_clock():
    return FIXED_NOW


class MemoryRenderer:
    """Display sink that records every call as a tuple."""

    def __init__(self):
        self.events = []

    def clear(self):
        self.events.append(("clear",))

    def draw_header(self, text):
        self.events.append(("header", text))

    def write_line(self, text, foreground, background):
        self.events.append(("line", text, foreground, background))

    @property
    def lines(self):
        return [event[1:] for event in self.events if event[0] == "line"]

    @property
    def texts(self):
        return [event[1] for event in self.events if event[0] == "line"]

    def reset(self):
        self.events = []


class ScriptedMonitor:
    """Liveness source whose answer the test sets directly."""

    def __init__(self, running=False):
        self.running = running
        self.fail = False
        self.calls = []

    def is_running(self, process_name):
        self.calls.append(process_name)
        if self.fail:
            raise ProducerCheckError("Could not list processes: access denied")
        return self.running
