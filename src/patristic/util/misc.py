"""Generally useful utility functions."""

import os
import re
import warnings

_wout_period = re.compile(r"^\.")


def get_object_provenance(obj) -> str:
    """returns string of complete object provenance"""
    if isinstance(obj, type):
        mod = obj.__module__
        name = obj.__name__
    else:
        mod = obj.__class__.__module__
        name = obj.__class__.__name__

    if mod is None or mod == "builtins":
        return name
    return f"{mod}.{name}"


def _cast_bool(value: str) -> bool:
    value = value.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    msg = f"cannot interpret {value!r} as a boolean"
    raise ValueError(msg)


def get_setting_from_environ(environ_var: str, params_types: dict) -> dict:
    """extract settings from environment variable

    Parameters
    ----------
    environ_var
        name of an environment variable
    params_types
        {param name: type}, values will be cast to type

    Returns
    -------
    dict

    Notes
    -----
    settings must of form 'param_name1=param_val,param_name2=param_val2'.
    A bool type accepts true/false, yes/no, on/off or 1/0. Entries with
    unknown names are ignored, entries that cannot be cast are skipped with
    a warning.
    """
    var = os.environ.get(environ_var, None)
    if var is None:
        return {}

    result = {}
    for item in var.split(","):
        item = item.split("=")
        if len(item) != 2 or item[0].strip() not in params_types:
            continue

        name, val = item[0].strip(), item[1]
        cast = params_types[name]
        cast = _cast_bool if cast is bool else cast
        try:
            result[name] = cast(val)
        except (TypeError, ValueError):
            warnings.warn(
                f"could not cast {name}={val} to type {params_types[name]}, skipping",
                stacklevel=2,
            )

    return result
