"""
Logging utilities for Document Sync.

Terminal output is mirrored into a dated log file; debug_log() writes to
the log file only.
"""

import re
import sys
from datetime import datetime
from pathlib import Path

_ANSI_RE = re.compile(r'\x1b\[[0-9;]*[mKHJ]')

# Lines never worth keeping in the log
_NOISE_RE = re.compile('|'.join([
    r'[─━═│]',                    # Section rules
    r'^\s*↓.*\(\d+%\)\s*$',       # Download progress (↓ file.pdf (N%))
]))


class TeeOutput:
    """Write to both stdout and a log file, dropping progress redraws and rules."""

    def __init__(self, log_path: Path, version: str = None):
        self.terminal = sys.stdout
        self.log_file = open(log_path, "a", encoding="utf-8")
        self._pending = ""
        version_str = f" v{version}" if version else ""
        self.log_file.write(f"\n{'=' * 60}\nSession started: {datetime.now().isoformat()}{version_str}\n{'=' * 60}\n\n")
        self.log_file.flush()

    def write(self, message):
        self.terminal.write(message)

        self._pending += _ANSI_RE.sub('', message)
        *lines, self._pending = self._pending.split('\n')
        for line in lines:
            # a progress line redrawn with \r keeps only its final state
            self._log_line(line.rsplit('\r', 1)[-1])
        self.log_file.flush()

    def _log_line(self, line: str):
        line = line.rstrip()
        if line and not _NOISE_RE.search(line):
            self.log_only(line)

    def flush(self):
        self.terminal.flush()
        self.log_file.flush()

    def close(self):
        self.log_file.close()

    def log_only(self, message: str):
        """Write a message only to the log file, not to terminal."""
        self.log_file.write(f"{datetime.now().strftime('[%H:%M:%S]')} {message}\n")
        self.log_file.flush()


def debug_log(message: str):
    """Log a debug message to file only (not shown to user)."""
    if hasattr(sys.stdout, 'log_only'):
        sys.stdout.log_only(message)
    # If not using TeeOutput (e.g., tests), silently ignore
