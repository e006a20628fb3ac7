"""
Interactive terminal view for PingTrack.
"""

import logging
from typing import Callable, Optional

import click

from ..core.errors import PersistenceError
from ..core.models import Sample
from ..tracking.tracker import PingTracker

HELP_TEXT = """Commands:
  start   begin tracking
  stop    stop tracking and save the session
  status  show the current ping
  log     show the live log (newest first)
  logs    show stored logs (newest first)
  clear   delete all stored logs
  retry   retry saving sessions that failed to save
  help    show this help
  quit    stop tracking and exit"""


class TrackerConsole:
    """Maps typed commands onto a PingTracker and prints its state."""

    def __init__(self, tracker: PingTracker, echo: Callable[..., None] = click.echo):
        self.tracker = tracker
        self.echo = echo
        self.logger = logging.getLogger(__name__)
        self.tracker.add_listener(self._on_sample)

        self._commands = {
            'start': self.start,
            'stop': self.stop,
            'status': self.status,
            'log': self.live_log,
            'logs': self.stored_logs,
            'clear': self.clear,
            'retry': self.retry,
            'help': self.help,
        }

    def format_ping(self, latency: Optional[int]) -> str:
        if latency is None:
            return click.style("N/A ms", fg='yellow')
        colour = 'red' if latency > self.tracker.threshold_ms else 'green'
        return click.style(f"{latency} ms", fg=colour)

    def _on_sample(self, sample: Sample, alerted: bool) -> None:
        line = f"[{sample.time_label}] - {self.format_ping(sample.latency_ms)}"
        if alerted:
            line += click.style("  HIGH", fg='red', bold=True)
        self.echo(line)

    def execute(self, command: str) -> bool:
        """Run one command; returns False when the console should exit."""
        command = command.strip().lower()
        if not command:
            return True
        if command in ('quit', 'exit'):
            return False

        handler = self._commands.get(command)
        if handler is None:
            self.echo(f"Unknown command: {command} (type 'help')")
            return True

        try:
            handler()
        except PersistenceError as e:
            self.logger.error(f"Storage error: {e}")
            self.echo(click.style(f"Storage error: {e}", fg='red'), err=True)
        return True

    def start(self) -> None:
        if self.tracker.start():
            self.echo("Tracking started")
        else:
            self.echo("Already tracking")

    def stop(self) -> None:
        session = self.tracker.stop()
        if session is None:
            self.echo("Not tracking")
            return
        if not len(session):
            self.echo("Tracking stopped, no samples to save")
            return
        self.echo(f"Tracking stopped, {len(session)} samples")
        self._report_pending()

    def status(self) -> None:
        started_at = self.tracker.recorder.started_at
        if started_at is not None:
            state = f"running since {started_at.astimezone().strftime('%X')}"
        else:
            state = 'stopped'
        self.echo(f"Current Ping: {self.format_ping(self.tracker.current_ping)} ({state})")

    def live_log(self) -> None:
        samples = self.tracker.live_log()
        if not samples:
            self.echo("Live log is empty")
        for sample in samples:
            self.echo(sample.describe())

    def stored_logs(self) -> None:
        sessions = self.tracker.stored_logs()
        if not sessions:
            self.echo("No stored logs yet.")
            return
        for session in sessions:
            self.echo(click.style(session.identity, bold=True))
            for sample in session.newest_first():
                self.echo(f"  {sample.describe()}")

    def clear(self) -> None:
        removed = self.tracker.delete_all_logs()
        self.echo(f"Deleted {removed} stored logs")

    def retry(self) -> None:
        saved = self.tracker.retry_pending()
        self.echo(f"Saved {saved} pending sessions")
        self._report_pending()

    def help(self) -> None:
        self.echo(HELP_TEXT)

    def _report_pending(self) -> None:
        pending = self.tracker.recorder.pending_sessions
        if pending:
            self.echo(click.style(
                f"{len(pending)} session(s) could not be saved, use 'retry'", fg='red'
            ), err=True)

    def run(self) -> None:
        """Read commands until quit or end of input."""
        self.echo(HELP_TEXT)
        try:
            while True:
                try:
                    command = click.prompt('pingtrack', default='', show_default=False)
                except (EOFError, click.Abort):
                    break
                if not self.execute(command):
                    break
        finally:
            self.tracker.close()
            self._report_pending()
