"""
Shape checks for snapshot dictionaries

Snapshots use the browser app's JSON export format, so keys are camelCase.
"""

from tipper.exceptions import InvalidSnapshotError


def _type_names(types):
    if isinstance(types, tuple):
        return " or ".join(t.__name__ for t in types)
    return types.__name__


def _is_instance(value, types):
    # bool is an int subclass; never accept it where a number is expected
    if isinstance(value, bool) and bool not in (
        types if isinstance(types, tuple) else (types,)
    ):
        return False
    return isinstance(value, types)


def require_mapping(data, owner):
    if not isinstance(data, dict):
        raise InvalidSnapshotError(f"{owner} must be an object")
    return data


def require_field(data, key, types, owner):
    """Return data[key], raising InvalidSnapshotError if missing or mistyped"""
    require_mapping(data, owner)
    if key not in data:
        raise InvalidSnapshotError(f"{owner} is missing '{key}'")
    value = data[key]
    if not _is_instance(value, types):
        raise InvalidSnapshotError(
            f"{owner}.{key} must be {_type_names(types)}, got {type(value).__name__}"
        )
    return value


def optional_field(data, key, types, owner, default=None):
    require_mapping(data, owner)
    value = data.get(key)
    if value is None:
        return default
    if not _is_instance(value, types):
        raise InvalidSnapshotError(
            f"{owner}.{key} must be {_type_names(types)}, got {type(value).__name__}"
        )
    return value


def require_list(data, key, owner):
    return require_field(data, key, list, owner)


def require_integer(data, key, owner):
    """Like require_field for whole numbers; 3.0 is accepted, 2.5 and NaN are not"""
    value = require_field(data, key, (int, float), owner)
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidSnapshotError(
                f"{owner}.{key} must be a whole number, got {value!r}"
            )
        value = int(value)
    return value
