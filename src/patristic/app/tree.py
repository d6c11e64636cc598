"""Batch construction of neighbour joining trees from distance matrix files."""

from __future__ import annotations

import hashlib
import re
import time
from pathlib import Path
from uuid import uuid4

from scitrack import CachingLogger

from patristic.core.tree import TreeNode
from patristic.parse.phylip import load_distances
from patristic.phylo.nj import nj
from patristic.util.io import get_format_suffixes
from patristic.util.misc import get_setting_from_environ

NJ_ENV = "PATRISTIC_NJ"


def _make_logfile_name(process) -> str:
    name = re.sub(r"\(.*", "", str(process))
    uid = str(uuid4())
    return f"{name}-{uid[:8]}.log"


def _md5(path: Path) -> str:
    return hashlib.md5(path.read_bytes()).hexdigest()


class quick_tree:
    """Neighbour joining trees from PHYLIP formatted distance matrices.

    Defaults for zero_negative and show_progress can be set with the
    PATRISTIC_NJ environment variable, e.g. 'zero_negative=true'.
    """

    def __init__(
        self,
        zero_negative: bool | None = None,
        show_progress: bool | None = None,
        format_name: str = "tre",
    ) -> None:
        """
        Parameters
        ----------
        zero_negative
            set negative branch lengths to 0
        show_progress
            display a progress bar for each tree
        format_name
            suffix of written trees, 'json' writes the json form, any other
            value writes newick
        """
        env = get_setting_from_environ(
            NJ_ENV, {"zero_negative": bool, "show_progress": bool}
        )
        if zero_negative is None:
            zero_negative = env.get("zero_negative", False)
        if show_progress is None:
            show_progress = env.get("show_progress", False)

        self._zero_negative = zero_negative
        self._show_progress = show_progress
        self._format_name = format_name
        self.logger = None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(zero_negative={self._zero_negative}, "
            f"show_progress={self._show_progress}, "
            f"format_name={self._format_name!r})"
        )

    def main(self, dists: tuple[list[str], object]) -> TreeNode:
        """returns the tree for (names, distance matrix)"""
        names, matrix = dists
        return nj(
            matrix,
            labels=names,
            zero_negative=self._zero_negative,
            show_progress=self._show_progress,
        )

    def __call__(self, path: str | Path) -> TreeNode:
        """returns the tree for a PHYLIP distance matrix file"""
        tree = self.main(load_distances(path))
        tree.source = path
        return tree

    def set_logger(self, out_dir: Path, logger: CachingLogger | None = None) -> None:
        if logger is None:
            logger = CachingLogger(create_dir=True)
        if not isinstance(logger, CachingLogger):
            msg = f"logger must be of type CachingLogger not {type(logger)}"
            raise TypeError(msg)
        if not logger.log_file_path:
            logger.log_file_path = str(out_dir / _make_logfile_name(self))
        self.logger = logger

    def apply_to(
        self,
        paths: str | Path | list[str | Path],
        out_dir: str | Path,
        logger: CachingLogger | None = None,
    ) -> list[Path]:
        """writes the tree for each distance matrix file to out_dir

        Parameters
        ----------
        paths
            a path, or list of paths, to PHYLIP distance matrix files
        out_dir
            directory for the trees and the log file, created if missing
        logger
            a scitrack logger. If not provided, one is created with a name
            from this app and a unique id.

        Returns
        -------
        paths of the written trees, named after each input file with its
        format and compression suffixes replaced
        """
        if isinstance(paths, (str, Path)):
            paths = [paths]
        if not paths:
            msg = "no input paths"
            raise ValueError(msg)

        out_dir = Path(out_dir).expanduser()
        out_dir.mkdir(parents=True, exist_ok=True)

        start = time.time()
        self.set_logger(out_dir, logger)
        logger = self.logger
        logger.log_message(str(self), label="app")
        logger.log_versions(["patristic"])

        written = []
        for path in paths:
            path = Path(path)
            logger.log_message(str(path), label="input")
            tree = self(path)
            name = path.name
            for suffix in reversed(get_format_suffixes(path)):
                if suffix and name.lower().endswith(f".{suffix}"):
                    name = name[: -len(suffix) - 1]
            outpath = out_dir / f"{name}.{self._format_name}"
            tree.write(outpath)
            logger.log_message(str(outpath), label="output")
            logger.log_message(_md5(outpath), label="output md5sum")
            written.append(outpath)

        taken = time.time() - start
        logger.log_message(f"{taken}", label="TIME TAKEN")
        logger.shutdown()
        return written
