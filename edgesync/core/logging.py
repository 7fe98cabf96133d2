"""
Logging utilities for edgesync.

A deploy's terminal output is mirrored into a dated log file by installing a
TeeOutput as sys.stdout. debug_log() adds file-only detail (skip decisions,
retry attempts, API request ids) that would be noise on the terminal.
"""

import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable

REDACTED = "********"


class TeeOutput:
    """
    Write to both stdout and a log file.

    The file copy has terminal control codes stripped, one timestamp per
    non-blank line, and every configured secret replaced by REDACTED.
    """

    _ANSI_RE = re.compile(r'\x1b\[[0-9;]*[mKHJ]')

    def __init__(self, log_path: Path, version: str = None, secrets: Iterable[str] = ()):
        self.terminal = sys.stdout
        self.log_file = open(log_path, "a", encoding="utf-8")
        self._line_buffer = ""
        self._secrets = sorted({s for s in secrets if s}, key=len, reverse=True)

        version_str = f" v{version}" if version else ""
        self.log_file.write(f"\n{'='*60}\n")
        self.log_file.write(f"Deploy started: {datetime.now().isoformat()}{version_str}\n")
        self.log_file.write(f"{'='*60}\n\n")
        self.log_file.flush()

    def _redact(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        return text

    def _write_line(self, line: str):
        timestamp = datetime.now().strftime("[%H:%M:%S]")
        self.log_file.write(f"{timestamp} {self._redact(line)}\n")

    def write(self, message):
        self.terminal.write(message)
        self._line_buffer += self._ANSI_RE.sub('', message)

        while '\n' in self._line_buffer:
            line, self._line_buffer = self._line_buffer.split('\n', 1)
            # Carriage return redraws: only the final version of the line counts
            line = line.rsplit('\r', 1)[-1].rstrip()
            if line:
                self._write_line(line)

        self.log_file.flush()

    def flush(self):
        self.terminal.flush()
        self.log_file.flush()

    def close(self):
        remainder = self._line_buffer.rsplit('\r', 1)[-1].rstrip()
        if remainder:
            self._write_line(remainder)
        self._line_buffer = ""
        self.log_file.close()

    def log_only(self, message: str):
        """Write a message only to the log file, not to terminal."""
        self._write_line(message)
        self.log_file.flush()


def debug_log(message: str):
    """Log a debug message to file only (not shown to user)."""
    if hasattr(sys.stdout, 'log_only'):
        sys.stdout.log_only(message)
