"""Stream handler: writes to open streams and to per-tag files in directories."""

import fcntl
import io
import os
import sys
import threading
from collections.abc import Mapping

from taglog.formatter import DEFAULT_FORMAT
from taglog.handler import Handler, HandlerStatus
from taglog.record import LogRecord

NO_USABLE_SINK = "None of the streams provided could be initialized"


class LogDirectoryError(OSError):
    """Raised when a log directory cannot be created or read."""


def _dir_from_url(spec: str) -> str | None:
    """Map a sink path or ``file://`` URL to a directory; None for other schemes."""
    pos = spec.find("://")
    if pos == -1:
        return spec
    if spec.startswith("file://"):
        return os.path.dirname(spec[len("file://"):])
    return None


def _is_standard_stream(stream) -> bool:
    return any(stream is s for s in (sys.stdout, sys.stderr, sys.__stdout__, sys.__stderr__))


class StreamHandler(Handler):
    """Writes rendered records to open streams and/or per-tag log files.

    Args:
        streams: an open text stream, a directory path (or ``file://`` URL),
            or a list of either. Each directory gets one ``<tag>.log`` per tag,
            opened lazily in append mode.
        tags: optional filter, e.g. ``{"cron": None, "mail": [ERROR]}``.
        fmt: template string or ``(tag, record) -> str`` callable.
        file_permission: mode applied to newly opened per-tag files.
        use_locking: take an exclusive lock around every write to a shared stream.
        dir_permission: mode used when creating missing directories.
        bubble: let dispatch continue to later handlers after this one.

    Raises:
        LogDirectoryError: a directory path could not be created.
    """

    def __init__(
        self,
        streams,
        tags: Mapping | None = None,
        fmt=DEFAULT_FORMAT,
        file_permission: int | None = 0o775,
        use_locking: bool = False,
        dir_permission: int = 0o755,
        bubble: bool = True,
    ):
        super().__init__(tags=tags, fmt=fmt, bubble=bubble)
        self._streams: list = []
        self._dirs: list[str] = []
        self._files: dict[str, io.TextIOBase] = {}
        self._file_permission = file_permission
        self._dir_permission = dir_permission
        self._use_locking = use_locking
        self._lock = threading.Lock()

        specs = streams if isinstance(streams, (list, tuple, set, frozenset)) else [streams]
        for spec in specs:
            self._add_sink(spec)

        if not self._streams and not self._dirs:
            self._record_error(NO_USABLE_SINK)
            self._status = HandlerStatus.ERROR
        else:
            self._status = HandlerStatus.READY

    def _add_sink(self, spec) -> None:
        if isinstance(spec, (str, os.PathLike)):
            path = _dir_from_url(os.fspath(spec))
            if not path:
                self._record_error(f"Unsupported stream specification: {spec!r}")
                return
            self._create_dir(path)
            self._dirs.append(path.rstrip(os.sep) or os.sep)
        elif hasattr(spec, "write"):
            if getattr(spec, "closed", False):
                self._record_error(f"Stream {spec!r} is closed")
                return
            self._streams.append(spec)
        else:
            self._record_error(f"Unsupported stream specification: {spec!r}")

    def _create_dir(self, path: str) -> None:
        if not os.path.isdir(path):
            umask = os.umask(0)
            try:
                os.makedirs(path, mode=self._dir_permission, exist_ok=True)
            except OSError as e:
                raise LogDirectoryError(f'Failed to create the log directory "{path}". {e}') from e
            finally:
                os.umask(umask)
        if not os.access(path, os.R_OK):
            raise LogDirectoryError(f'Log directory "{path}" is not readable')

    @property
    def streams(self) -> list:
        return list(self._streams)

    @property
    def dirs(self) -> list[str]:
        return list(self._dirs)

    @property
    def use_locking(self) -> bool:
        return self._use_locking

    def handle(self, tag: str, record: LogRecord) -> None:
        if not self.accepting:
            return
        raw = record.as_dict()
        try:
            line = self.render(tag, raw)
        except Exception as e:
            self._record_error(f"Formatting failed for tag {tag!r}: {e}")
            return
        if self._dirs:
            self._write_to_dirs(tag, line)
        if self._streams:
            self._write_to_streams(tag, line)

    def _write_to_dirs(self, tag: str, line: str) -> None:
        name = str(tag)
        if not name or name in (".", "..") or "/" in name or os.sep in name:
            self._record_error(f"Tag {name!r} cannot be used as a log file name")
            return
        for directory in self._dirs:
            filename = os.path.join(directory, f"{name}.log")
            try:
                handle = self._files.get(filename)
                if handle is None:
                    handle = self._open_tag_file(filename)
                handle.write(line)
                handle.flush()
            except (OSError, ValueError, TypeError) as e:
                self._record_error(f"Write to {filename} failed: {e}")

    def _open_tag_file(self, filename: str):
        handle = open(filename, "a", encoding="utf-8")
        self._files[filename] = handle
        if self._file_permission is not None:
            try:
                os.chmod(filename, self._file_permission)
            except OSError as e:
                self._record_error(f"chmod {oct(self._file_permission)} on {filename} failed: {e}")
        return handle

    def _write_to_streams(self, tag: str, line: str) -> None:
        prefixed = f"{tag} - {line}" if tag else line
        for stream in self._streams:
            try:
                if self._use_locking:
                    self._locked_write(stream, prefixed)
                else:
                    stream.write(prefixed)
                    stream.flush()
            except (OSError, ValueError, TypeError) as e:
                self._record_error(f"Write to stream {stream!r} failed: {e}")

    def _locked_write(self, stream, text: str) -> None:
        try:
            fd = stream.fileno()
        except (AttributeError, OSError, io.UnsupportedOperation):
            fd = None
        with self._lock:
            if fd is not None:
                fcntl.flock(fd, fcntl.LOCK_EX)
            try:
                stream.write(text)
                stream.flush()
            finally:
                if fd is not None:
                    fcntl.flock(fd, fcntl.LOCK_UN)

    def end(self) -> None:
        if self._status == HandlerStatus.CLOSED:
            return
        for handle in self._files.values():
            try:
                handle.close()
            except OSError as e:
                self._record_error(f"Closing {handle.name} failed: {e}")
        for stream in self._streams:
            if _is_standard_stream(stream):
                continue
            try:
                stream.close()
            except (OSError, ValueError) as e:
                self._record_error(f"Closing stream {stream!r} failed: {e}")
        self._files = {}
        self._streams = []
        self._status = HandlerStatus.CLOSED
