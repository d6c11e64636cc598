"""patristic: rooted, weighted trees with Newick input and output, patristic
distances and neighbour joining tree estimation from distance matrices."""

import logging
import os
import typing
import warnings
from importlib import import_module

from patristic._version import __version__

__license__ = "BSD-3"


def __getattr__(name: str) -> typing.Any:  # noqa: ANN401
    if (attr := globals().get(name)) is not None:
        return attr

    if name not in _import_mapping:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    module_name = _import_mapping[name]
    module = import_module(f".{module_name}", package=__name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


_import_mapping = {
    "TreeNode": "core.tree",
    "TreeError": "core.tree",
    "make_tree": "core.tree",
    "load_tree": "core.tree",
    "parse_newick": "parse.newick",
    "TreeParseError": "parse.newick",
    "parse_json": "parse.tree_json",
    "load_distances": "parse.phylip",
    "nj": "phylo.nj",
    "parse_matrix": "phylo.nj",
    "quick_tree": "app.tree",
    "open_": "util.io",
}


def __dir__() -> list[str]:
    return list(_import_mapping.keys()) + list(globals().keys())


__all__ = list(_import_mapping.keys())

version = __version__
version_info = tuple(int(v) for v in version.split(".") if v.isdigit())


warn_env = "PATRISTIC_WARNINGS"

if warn := os.environ.get(warn_env):
    warnings.simplefilter(warn)


# suppress numba warnings
__numba_logger = logging.getLogger("numba")
__numba_logger.setLevel(logging.WARNING)
