"""Identifier normalization for schema names, property keys, and operation ids.

An API document names things however its authors like: ``user_profile``,
``2fa-code``, ``created-at``, ``api/v1/getResources``. This module turns
those raw names into identifiers a renderer can emit without further
escaping. All transforms are pure and memoized per
:class:`IdentifierNormalizer` instance, so one generation run always maps
the same raw input to the same (identical) result object.

**Rules:**

* **Type identifiers** -- separators (``-``, ``_``) are removed and the
  letter after each one is upper-cased; digits after a separator pass through
  unchanged.  The first letter is upper-cased and a leading digit gets an
  underscore prefix (``2fa_code`` becomes ``_2faCode``).
* **Property identifiers** -- bare identifiers pass through; anything else is
  returned as a single-quoted literal (``created-at`` becomes
  ``'created-at'``).
* **Method identifiers** -- every non-alphanumeric character becomes a
  separator, then the result is camel-cased (``get_/users/{id}`` becomes
  ``getUsersId``).
* **Namespace paths** -- leading clean segments of a ``/``- or
  ``.``-separated operation id become namespace segments, the rest is the
  method name (``api/v1/getResources`` becomes ``["api", "v1"]`` +
  ``getResources``).
"""

from __future__ import annotations

import re
from typing import NamedTuple


# Matches a separator followed by the character it precedes.
_TYPE_SEPARATOR_RE = re.compile(r"[-_]([a-zA-Z0-9])")
_SEPARATOR_RE = re.compile(r"[-_]")

_BARE_IDENT_RE = re.compile(r"^[a-zA-Z_$][a-zA-Z0-9_$]*$")
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")
_UNDERSCORE_RUN_RE = re.compile(r"_+")
_UNDERSCORE_LOWER_RE = re.compile(r"_([a-z])")

# A namespace segment must look like a plain word.
_CLEAN_SEGMENT_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")


class NamespacePath(NamedTuple):
    """Result of :meth:`IdentifierNormalizer.to_namespace_path`."""

    segments: tuple[str, ...]
    method_name: str


class IdentifierNormalizer:
    """Converts raw document names into target identifiers.

    Each instance owns its caches; create one per generation run (the
    :class:`~clientsynth.generator.assembler.ModelAssembler` does this for
    you) so that separate runs never share state.

    Example::

        naming = IdentifierNormalizer()
        naming.to_type_identifier("user_profile")      # 'UserProfile'
        naming.to_property_identifier("created-at")    # "'created-at'"
        naming.to_namespace_path("pets/listPets")      # (('pets',), 'listPets')
    """

    def __init__(self) -> None:
        self._type_cache: dict[str, str] = {}
        self._property_cache: dict[str, str] = {}
        self._method_cache: dict[str, str] = {}
        self._namespace_cache: dict[str, NamespacePath] = {}

    def to_type_identifier(self, raw: str) -> str:
        """Convert a schema name to a PascalCase type identifier.

        Args:
            raw: The schema key or reference target (e.g. ``"user_profile"``).

        Returns:
            The type identifier (e.g. ``"UserProfile"``).
        """
        cached = self._type_cache.get(raw)
        if cached is not None:
            return cached

        result = _TYPE_SEPARATOR_RE.sub(lambda m: _upper_letter(m.group(1)), raw)
        result = _SEPARATOR_RE.sub("", result)
        if result and "a" <= result[0] <= "z":
            result = result[0].upper() + result[1:]
        if result[:1].isdigit():
            result = f"_{result}"

        self._type_cache[raw] = result
        return result

    def to_property_identifier(self, raw: str) -> str:
        """Return *raw* unchanged when it is a bare identifier, else quote it.

        Surrounding quotes on the input are removed before testing, so an
        already-quoted name is not quoted twice.

        Args:
            raw: The property key as written in the document.

        Returns:
            ``raw`` itself, or ``'raw'`` when it needs quoting.
        """
        cached = self._property_cache.get(raw)
        if cached is not None:
            return cached

        unquoted = raw.strip()
        if len(unquoted) >= 2 and unquoted[0] == unquoted[-1] and unquoted[0] in "'\"":
            unquoted = unquoted[1:-1]

        result = unquoted if _BARE_IDENT_RE.match(unquoted) else f"'{unquoted}'"

        self._property_cache[raw] = result
        return result

    def to_method_identifier(self, operation_id: str) -> str:
        """Convert an arbitrary string into a camelCase method identifier.

        Args:
            operation_id: Method-name input (e.g. ``"get_/users/{id}"``).

        Returns:
            The method identifier (e.g. ``"getUsersId"``).
        """
        cached = self._method_cache.get(operation_id)
        if cached is not None:
            return cached

        result = _NON_ALNUM_RE.sub("_", operation_id)
        result = _UNDERSCORE_RUN_RE.sub("_", result).strip("_")
        result = _UNDERSCORE_LOWER_RE.sub(lambda m: m.group(1).upper(), result)
        result = result[:1].lower() + result[1:]

        self._method_cache[operation_id] = result
        return result

    def to_namespace_path(self, operation_id: str) -> NamespacePath:
        """Split an operation id into namespace segments and a method name.

        The separator is ``/`` when present, otherwise ``.``.  Only the first
        separator-delimited segment is tested: if it is a clean word it
        becomes a namespace segment and the remainder is split again by the
        same rule; otherwise the whole remainder is the method-name input.

        Args:
            operation_id: The operation id (or ``<verb>_<path>`` fallback).

        Returns:
            A :class:`NamespacePath`.

        Example::

            >>> IdentifierNormalizer().to_namespace_path("api/v1/getResources")
            NamespacePath(segments=('api', 'v1'), method_name='getResources')
            >>> IdentifierNormalizer().to_namespace_path("get_/health")
            NamespacePath(segments=(), method_name='getHealth')
        """
        cached = self._namespace_cache.get(operation_id)
        if cached is not None:
            return cached

        segments: list[str] = []
        remainder = operation_id
        while True:
            separator = "/" if "/" in remainder else "." if "." in remainder else None
            if separator is None:
                break
            head, rest = remainder.split(separator, 1)
            if not _CLEAN_SEGMENT_RE.match(head):
                break
            segments.append(head)
            remainder = rest

        result = NamespacePath(tuple(segments), self.to_method_identifier(remainder))
        self._namespace_cache[operation_id] = result
        return result

    def clear(self) -> None:
        """Drop every cached transform."""
        self._type_cache.clear()
        self._property_cache.clear()
        self._method_cache.clear()
        self._namespace_cache.clear()


def _upper_letter(char: str) -> str:
    return char.upper() if "a" <= char <= "z" else char
