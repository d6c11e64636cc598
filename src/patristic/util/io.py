from __future__ import annotations

import contextlib
import shutil
import uuid
from bz2 import open as bzip_open
from gzip import open as gzip_open
from io import TextIOWrapper
from lzma import open as lzma_open
from os import PathLike
from pathlib import Path, PurePath
from tempfile import mkdtemp
from typing import IO, Callable, Union
from zipfile import ZipFile

from chardet import detect

from patristic.util.misc import _wout_period

PathType = Union[str, PathLike, PurePath]


def open_zip(filename: PathType, mode: str = "r", **kwargs) -> IO:
    """opens the single member of a zip-compressed file for reading

    Notes
    -----
    Raises ValueError if the archive has more than one member. Text mode
    wraps the member in a TextIOWrapper with latin-1 encoding unless an
    encoding is provided.
    """
    mode = mode or "r"
    binary_mode = "b" in mode
    if mode.startswith("w"):
        msg = "writing zip archives is not supported"
        raise NotImplementedError(msg)

    encoding = kwargs.pop("encoding", None) or "latin-1"
    with ZipFile(filename) as zf:
        members = zf.namelist()
        if len(members) != 1:
            msg = f"Archive is supposed to have only one record, found {len(members)}"
            raise ValueError(msg)

        opened = zf.open(members[0], mode="r")

    return opened if binary_mode else TextIOWrapper(opened, encoding=encoding)


_compression_handlers: dict[str, Callable[..., IO]] = {
    "gz": gzip_open,
    "bz2": bzip_open,
    "zip": open_zip,
    "xz": lzma_open,
    "lzma": lzma_open,
}


def _get_compression_open(path: PathType) -> Callable[..., IO] | None:
    """returns function for opening the compression format of path, or None"""
    _, compression = get_format_suffixes(path)
    return _compression_handlers.get(compression, None)


def open_(filename: PathType, mode: str = "rt", **kwargs) -> IO:
    """open that handles different compression

    Parameters
    ----------
    filename
        path to a plain or compressed (gz, bz2, xz, lzma, zip) file
    mode
        standard file opening mode
    kwargs
        passed to open functions

    Returns
    -------
    an object compatible with the file protocol

    Notes
    -----
    When reading in text mode without an explicit encoding, the encoding is
    detected from the first 100 bytes using chardet.
    """
    if not filename:
        msg = f"{filename!r} not a valid file name"
        raise ValueError(msg)

    mode = mode or "rt"
    filename = Path(filename).expanduser()
    op = _get_compression_open(filename) or open

    encoding = kwargs.pop("encoding", None)
    need_encoding = mode.startswith("r") and "b" not in mode
    if need_encoding and encoding is None:
        with op(filename, mode="rb") as infile:
            data = infile.read(100)

        encoding = detect(data)["encoding"]

    if "b" in mode:
        return op(filename, mode, **kwargs)

    if op is gzip_open or op is bzip_open or op is lzma_open:
        mode = mode if "t" in mode else f"{mode}t"
    return op(filename, mode, encoding=encoding, **kwargs)


class atomic_write:
    """performs atomic write operations, cleans up if fails"""

    def __init__(self, path: PathType, tmpdir=None, mode="w", encoding=None):
        """
        Parameters
        ----------
        path
            path to file
        tmpdir
            directory where temporary file will be created, defaults to
            a new directory beside path
        mode
            file writing mode
        encoding
            text encoding
        """
        self._path = Path(path).expanduser()
        self._mode = mode
        self._encoding = encoding
        self._file = None
        self._own_tmpdir = tmpdir is None
        self._tmppath = self._make_tmppath(tmpdir)
        self.succeeded = None

    def _make_tmppath(self, tmpdir) -> Path:
        """returns path of a uniquely named temporary file, keeping path's suffixes"""
        suffixes = "".join(self._path.suffixes)
        name = f"{uuid.uuid4()}{suffixes}"
        tmpdir = Path(mkdtemp(dir=self._path.parent)) if tmpdir is None else Path(tmpdir)

        if not tmpdir.exists():
            msg = f"{tmpdir} directory does not exist"
            raise FileNotFoundError(msg)

        return tmpdir / name

    def _get_fileobj(self) -> IO:
        if self._file is None:
            kwargs = {} if "b" in self._mode else {"encoding": self._encoding}
            op = _get_compression_open(self._tmppath) or open
            mode = self._mode
            if op is not open and "b" not in mode and "t" not in mode:
                mode = f"{mode}t"
            self._file = op(self._tmppath, mode, **kwargs)

        return self._file

    def __enter__(self) -> IO:
        return self._get_fileobj()

    def _cleanup(self) -> None:
        if self._own_tmpdir:
            shutil.rmtree(self._tmppath.parent)
        else:
            with contextlib.suppress(FileNotFoundError):
                self._tmppath.unlink()

    def _close_rename(self, src: Path) -> None:
        dest = self._path
        with contextlib.suppress(FileNotFoundError):
            dest.unlink()
        src.rename(dest)
        self._cleanup()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._get_fileobj().close()
        if exc_type is None:
            self._close_rename(self._tmppath)
            self.succeeded = True
        else:
            self.succeeded = False
            self._cleanup()

    def write(self, text) -> None:
        """writes text to file"""
        self._get_fileobj().write(text)

    def close(self) -> None:
        """closes file"""
        self.__exit__(None, None, None)


def get_format_suffixes(filename: PathType) -> tuple[str | None, str | None]:
    """returns file, compression suffixes"""
    filename = Path(filename)
    if not filename.suffix:
        return None, None

    suffixes = [_wout_period.sub("", sfx).lower() for sfx in filename.suffixes[-2:]]
    cmp_suffix = suffixes[-1] if suffixes[-1] in _compression_handlers else None

    if len(suffixes) == 2 and cmp_suffix is not None:
        suffix = suffixes[0]
    elif cmp_suffix is None:
        suffix = suffixes[-1]
    else:
        suffix = None
    return suffix, cmp_suffix


def path_exists(path: PathType) -> bool:
    """whether path is a valid path and it exists"""
    with contextlib.suppress(OSError, TypeError, ValueError):
        return Path(path).exists()
    return False
