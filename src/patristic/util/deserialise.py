import json

from patristic.util.io import open_, path_exists

_deserialise_func_map = {}


class register_deserialiser:
    """
    registration decorator for functions to inflate objects that were
    serialised using json.

    Functions are added to a dict which is used by the deserialise_object()
    function. The type string(s) must uniquely identify the appropriate
    value for the dict 'type' entry, e.g. 'patristic.core.tree.TreeNode'.

    Parameters
    ----------
    args: str or sequence of str
        must be unique
    """

    def __init__(self, *args) -> None:
        for type_str in args:
            if not isinstance(type_str, str):
                msg = f"{type_str!r} is not a string"
                raise TypeError(msg)
            if type_str in _deserialise_func_map:
                msg = f"{type_str!r} already in {list(_deserialise_func_map)}"
                raise ValueError(msg)
        self._type_str = args

    def __call__(self, func):
        for type_str in self._type_str:
            _deserialise_func_map[type_str] = func
        return func


def deserialise_object(data):
    """
    deserialises from json

    Parameters
    ----------
    data
        path to json file, json string or a dict

    Returns
    -------
    If the dict from json.loads does not contain a "type" key, the object will
    be returned as is. Otherwise, it will be deserialised to a patristic object.
    """
    is_json_text = isinstance(data, str) and data.lstrip().startswith("{")
    if not isinstance(data, dict) and not is_json_text and path_exists(data):
        with open_(data) as infile:
            data = json.load(infile)

    if isinstance(data, str):
        data = json.loads(data)

    type_ = data.get("type", None) if hasattr(data, "get") else None
    if type_ is None:
        return data

    if type_.startswith("patristic.core"):
        # registration happens on import of the defining module
        import patristic.core.tree  # noqa: F401

    for type_str, func in _deserialise_func_map.items():
        if type_str in type_:
            break
    else:
        msg = f"deserialising '{type_}' from json"
        raise NotImplementedError(msg)

    return func(data)
