"""Follow internal JSON pointers in an API document.

Only non-schema objects (parameters, request bodies, responses) are
dereferenced.  Schema ``$ref``\\ s stay references all the way into the
model, which is how cyclic schemas stay finite.

Only internal references (``#/...``) are supported.
"""

from __future__ import annotations

from typing import Any

from clientsynth.exceptions import MalformedDocumentError

# Guards against ``$ref`` chains that loop back on themselves.
_MAX_CHAIN = 32


def resolve_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Return the value *ref* points at inside *root*.

    Handles RFC 6901 escaping (``~1`` for ``/``, ``~0`` for ``~``).

    Raises:
        MalformedDocumentError: For external references and pointers that do
            not lead anywhere.
    """
    if not ref.startswith("#/"):
        raise MalformedDocumentError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict):
            if segment not in current:
                raise MalformedDocumentError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise MalformedDocumentError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise MalformedDocumentError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )
    return current


def dereference(obj: Any, root: dict[str, Any]) -> Any:
    """Follow ``$ref`` chains on *obj* until a non-reference is reached.

    Only the outer object is dereferenced; nested values are left alone.
    """
    seen: list[str] = []
    while isinstance(obj, dict) and isinstance(obj.get("$ref"), str):
        ref = obj["$ref"]
        if ref in seen or len(seen) >= _MAX_CHAIN:
            raise MalformedDocumentError(
                f"Circular $ref chain: {' -> '.join([*seen, ref])}"
            )
        seen.append(ref)
        obj = resolve_pointer(ref, root)
    return obj
