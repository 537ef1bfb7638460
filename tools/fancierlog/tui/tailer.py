"""
Real-time file tailing for the log viewer.

This module contains FileTailer, the loop at the heart of fancierlog. It
follows one log file written by an external process (the producer), turns
every new line into a colored, consistently formatted display line, and
reacts when the producer starts or stops or when the file shrinks.

States:
    WAITING_FOR_PRODUCER: the producer is not running; poll until it is,
        then clear the log file and the screen and start tailing.
    TAILING: read new lines each cycle and render them.
    PRODUCER_EXITED: transient; the log file is deleted and recreated
        empty, then the tailer goes back to waiting.

Design Decisions:
    - Uses polling rather than inotify; a change notification would not
      report "producer exited" and can miss a file replaced by an empty one
    - Opens the file read-only without locks so the producer keeps writing
    - Only complete lines are consumed; a trailing partial line is left in
      place and re-read once its newline arrives
    - Truncation (length < cursor) and replacement (different file at the
      same path) both rewind to offset 0 and clear the display
    - Read errors while polling are reported once and retried next cycle
"""

import os
import time
from datetime import datetime
from typing import Callable, Iterable, Optional

from .. import __version__
from ..errors import FileAccessError, ProducerCheckError
from ..utils.config import ViewerConfig
from ..utils.sessionlog import SessionLogger
from .colors import ColorRuleSet
from .model import ConsoleColor, ProducerMonitor, Renderer, TailerState, TailState
from .reformat import LineReformatter

# Tag shown on lines the viewer writes about itself
NOTICE_TAG = "FL"
NOTICE_COLOR = ConsoleColor.YELLOW


class FileTailer:
    """
    Follow a log file and render its new lines.

    Attributes:
        config: Viewer settings (path, producer, poll interval, colors).
        rules: Color rules applied to raw lines.
        reformatter: Rebuilds raw lines in canonical form.
        renderer: Display sink.
        monitor: Producer liveness source; None disables liveness checks.
        session_log: Optional logger mirroring notices to a file.
        clock: Returns the current time for timestamps.
        sleep: Sleeps between poll cycles.
        state: Current TailerState.
        tail: Read cursor bookkeeping.

    Example:
        >>> tailer = FileTailer(config, rules, LineReformatter(), AnsiRenderer())
        >>> tailer.run()  # never returns
    """

    def __init__(self, config: ViewerConfig, rules: ColorRuleSet,
                 reformatter: LineReformatter, renderer: Renderer,
                 monitor: Optional[ProducerMonitor] = None,
                 session_log: Optional[SessionLogger] = None,
                 clock: Callable[[], datetime] = datetime.now,
                 sleep: Callable[[float], None] = time.sleep):
        self.config = config
        self.rules = rules
        self.reformatter = reformatter
        self.renderer = renderer
        self.monitor = monitor
        self.session_log = session_log
        self.clock = clock
        self.sleep = sleep

        self.state = TailerState.WAITING_FOR_PRODUCER
        self.tail = TailState(config.log_path)
        self._handle = None
        # Last reported polling error, so a persisting error is shown once
        self._read_error: Optional[str] = None
        self._check_error: Optional[str] = None
        self._log_error: Optional[str] = None

    # ------------------------------------------------------------
    # Display helpers
    # ------------------------------------------------------------

    @property
    def path(self):
        return self.tail.path

    @property
    def checks_producer(self) -> bool:
        return self.monitor is not None and not self.config.skip_producer_check

    @property
    def header_text(self) -> str:
        return f"Fancier Log v{__version__}: {self.path}"

    def draw_header(self) -> None:
        self.renderer.draw_header(self.header_text)

    def reset_display(self) -> None:
        """Clear the screen and redraw the header."""
        self.renderer.clear()
        self.draw_header()

    def notice(self, text: str, level: str = "INFO") -> None:
        """
        Show a message from the viewer itself, one display line per text line.

        Notices go through the same display path as tailed content and are
        mirrored to the session log.
        """
        self._show(text)
        self._log(level, text)

    def _show(self, text: str) -> None:
        now = self.clock()
        for line in text.split("\n"):
            formatted = self.reformatter.stamp(line, NOTICE_TAG, now)
            self.renderer.write_line(formatted.text, NOTICE_COLOR, self.rules.default_background)

    def _log(self, level: str, message: str) -> None:
        """
        Append to the session log, if there is one.

        A failing session log is shown on screen once per distinct error and
        never stops the poll loop.
        """
        if self.session_log is None:
            return
        try:
            self.session_log.log(level, message)
        except OSError as exc:
            problem = f"Cannot write session log {self.session_log.path}: {exc}"
            if problem != self._log_error:
                self._log_error = problem
                self._show(problem)
            return
        self._log_error = None

    def render_line(self, raw_line: str) -> None:
        """Classify, reformat and display a single raw line."""
        colors = self.rules.classify(raw_line)
        formatted = self.reformatter.reformat(raw_line, self.clock())
        self.renderer.write_line(formatted.text, colors.foreground, colors.background)

    # ------------------------------------------------------------
    # File handling
    # ------------------------------------------------------------

    def _open(self) -> None:
        """Open the target file for shared reading."""
        try:
            # Plain read-only open takes no lock, so the producer can keep
            # the file open for writing at the same time
            self._handle = open(self.path, "rb")
        except OSError as exc:
            raise FileAccessError(f"Cannot open {self.path}: {exc}") from exc

    def _close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def _truncate_file(self) -> None:
        """Empty the log file, creating it if it does not exist."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8"):
                pass
        except OSError as exc:
            self.notice(f"Could not clear {self.path}: {exc}", "ERROR")

    def _report_read_error(self, message: str) -> None:
        if message != self._read_error:
            self._read_error = message
            self.notice(message, "WARN")

    # ------------------------------------------------------------
    # Producer liveness
    # ------------------------------------------------------------

    def producer_alive(self) -> bool:
        """
        Ask the monitor whether the producer is running.

        A failed check counts as "not running" and is reported once until
        a check succeeds again.
        """
        if not self.checks_producer:
            return True
        try:
            alive = self.monitor.is_running(self.config.producer_name)
        except ProducerCheckError as exc:
            if str(exc) != self._check_error:
                self._check_error = str(exc)
                self.notice(str(exc), "ERROR")
            return False
        self._check_error = None
        return alive

    def _enter_waiting(self, reason: str) -> None:
        self.state = TailerState.WAITING_FOR_PRODUCER
        self.notice(f"{reason}\nWaiting for {self.config.producer_name} to start...")

    def _producer_started(self) -> None:
        """Drop the previous session's log and start tailing fresh."""
        self._truncate_file()
        self.tail.rewind()
        self.reset_display()
        self._log("INFO", f"{self.config.producer_name} detected; tailing {self.path}")
        self.state = TailerState.TAILING

    def _producer_exited(self) -> None:
        """Delete and recreate the log file, then wait for the producer again."""
        self.state = TailerState.PRODUCER_EXITED
        # Windows will not delete a file we still hold open
        self._close()
        try:
            if self.path.exists():
                self.path.unlink()
        except OSError as exc:
            self.notice(f"Could not delete {self.path}: {exc}", "ERROR")

        self.notice(f"{self.config.producer_name} close detected. Clearing log.")
        self._truncate_file()
        try:
            self._open()
        except FileAccessError as exc:
            self._report_read_error(str(exc))
        self.tail.rewind()
        self.draw_header()
        self._enter_waiting(f"{self.config.producer_name} not running")

    # ------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------

    def _current_length(self) -> int:
        """
        Return the length of the file at the tailed path.

        Reopens the file (and rewinds) if the path now names a different
        file than the one we hold, which is how log rotation looks.
        """
        on_disk = os.stat(self.path)
        held = os.fstat(self._handle.fileno())
        if (on_disk.st_ino, on_disk.st_dev) != (held.st_ino, held.st_dev):
            self._close()
            self._open()
            self.tail.rewind()
            self.reset_display()
            self._log("INFO", f"{self.path} was replaced; reading from the start")
        return on_disk.st_size

    def poll_file(self) -> int:
        """
        Read and render every complete line appended since the last poll.

        Returns:
            int: Number of raw lines rendered.
        """
        try:
            if self._handle is None:
                self._open()
                self.tail.rewind()
            length = self._current_length()
        except (OSError, FileAccessError) as exc:
            self._report_read_error(f"Cannot read {self.path}: {exc}")
            return 0

        # Detect truncation: the file is now shorter than what we have read
        if length < self.tail.read_cursor:
            previous = self.tail.last_known_length
            self.tail.rewind()
            self.reset_display()
            self._log("INFO", f"{self.path} was truncated ({previous} -> {length} bytes); "
                              "reading from the start")
        self.tail.last_known_length = length

        if length == self.tail.read_cursor:
            return 0

        try:
            self._handle.seek(self.tail.read_cursor)
            data = self._handle.read()
        except OSError as exc:
            self._report_read_error(f"Cannot read {self.path}: {exc}")
            return 0
        self._read_error = None

        # Leave an unterminated last line for the next poll
        end = data.rfind(b"\n")
        if end < 0:
            return 0
        chunk = data[:end + 1]
        self.tail.read_cursor += len(chunk)

        rendered = 0
        for line in chunk.decode("utf-8", errors="replace").splitlines():
            self.render_line(line)
            rendered += 1
        return rendered

    # ------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------

    def start(self, notices: Iterable[str] = ()) -> None:
        """
        Clear the display, draw the header, show startup notices and open
        the log file.

        Args:
            notices: Messages to show under the header (config problems).

        Raises:
            FileAccessError: If the log file cannot be opened. Nothing can be
                             tailed without it, so this is fatal.
        """
        self.reset_display()
        for message in notices:
            self.notice(message, "WARN")

        if self.checks_producer and not self.path.exists():
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.touch()
            except OSError as exc:
                raise FileAccessError(f"Cannot create {self.path}: {exc}") from exc
        self._open()
        self.tail.rewind()

        if self.checks_producer and not self.producer_alive():
            self._enter_waiting(f"{self.config.producer_name} not detected")
        else:
            self.state = TailerState.TAILING
            self._log("INFO", f"Tailing {self.path}")

    def step(self) -> None:
        """Run one poll cycle."""
        if self.state == TailerState.WAITING_FOR_PRODUCER:
            if self.producer_alive():
                self._producer_started()
            return

        if self.checks_producer and not self.producer_alive():
            self._producer_exited()
            return

        self.poll_file()

    def run(self, notices: Iterable[str] = ()) -> None:
        """Start and poll forever; stopped only by the process ending."""
        self.start(notices)
        try:
            while True:
                self.step()
                self.sleep(self.config.poll_interval)
        finally:
            self._close()
