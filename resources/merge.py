from __future__ import annotations

from typing import Any, Mapping, MutableMapping, TypeAlias, TypeGuard

# str | int | float | bool | None | list[JsonValue] | dict[str, JsonValue]
JsonValue: TypeAlias = Any
Resource: TypeAlias = dict[str, JsonValue]


def is_resource(value: JsonValue) -> TypeGuard[Mapping[str, JsonValue]]:
    """
    True for the mapping variant of a JSON value (a nested document).
    """
    return isinstance(value, Mapping)


def merge_resources(base: MutableMapping[str, JsonValue], incoming: Mapping[str, JsonValue]) -> MutableMapping[str, JsonValue]:
    """
    Recursively merge `incoming` into `base` in place and return `base`.

    - keys missing from `base` are inserted as-is
    - when both sides hold a mapping the two are merged key by key
    - any other collision is won by `incoming`: scalars and lists are replaced
      wholesale (lists are never concatenated), and a mapping on one side with a
      non-mapping on the other is an overwrite, not an error
    """
    for key, value in incoming.items():
        current = base.get(key)
        if is_resource(current) and is_resource(value):
            if not isinstance(current, MutableMapping):
                current = dict(current)
                base[key] = current
            merge_resources(current, value)
        else:
            base[key] = value
    return base
