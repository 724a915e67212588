"""Documentation records for schemas, fields and operations.

:func:`describe` derives a :class:`~clientsynth.models.DescriptionRecord`
from a schema node's annotations.  The constraint labels and their order are
part of the model contract; renderers print them as-is:

``Type``, ``Default``, ``Example``, ``Allowed values``, ``Constant value``,
``Format``, ``Minimum``, ``Maximum``, ``Min length``, ``Max length``,
``Pattern``, ``Min items``, ``Max items``, ``Nullable``, ``Read-only``,
``Write-only``.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from clientsynth.models import DescriptionRecord, RawOperation, SchemaNode

_SUCCESS_STATUSES = ("200", "201", "204")


def describe(
    node: Optional[SchemaNode], context_name: Optional[str] = None
) -> Optional[DescriptionRecord]:
    """Build the description record for a schema node.

    Args:
        node: The schema node to document.
        context_name: Property name, used for the ``"<name> property"``
            summary when the schema has no description of its own.

    Returns:
        The record, or ``None`` when there is nothing to say.
    """
    if node is None:
        return None

    ann = node.annotations
    summary = ann.description or None
    if summary is None and context_name:
        summary = f"{context_name} property"

    constraints: list[str] = []
    if not ann.description and ann.type_tag:
        constraints.append(f"Type: {ann.type_tag}")
    if ann.has_default:
        constraints.append(f"Default: {_json(ann.default)}")
    if ann.has_example:
        constraints.append(f"Example: {_json(ann.example)}")

    if ann.enum_values:
        constraints.append(
            "Allowed values: " + ", ".join(_json(v) for v in ann.enum_values)
        )
    if ann.has_const:
        constraints.append(f"Constant value: {_json(ann.const)}")

    if ann.format:
        constraints.append(f"Format: {ann.format}")
    if ann.minimum is not None:
        constraints.append(f"Minimum: {_number(ann.minimum)}")
    if ann.maximum is not None:
        constraints.append(f"Maximum: {_number(ann.maximum)}")
    if ann.min_length is not None:
        constraints.append(f"Min length: {ann.min_length}")
    if ann.max_length is not None:
        constraints.append(f"Max length: {ann.max_length}")
    if ann.pattern:
        constraints.append(f"Pattern: {ann.pattern}")
    if ann.min_items is not None:
        constraints.append(f"Min items: {ann.min_items}")
    if ann.max_items is not None:
        constraints.append(f"Max items: {ann.max_items}")
    if ann.nullable:
        constraints.append("Nullable: true")
    if ann.read_only:
        constraints.append("Read-only: true")
    if ann.write_only:
        constraints.append("Write-only: true")

    if summary is None and not constraints:
        return None
    return DescriptionRecord(summary=summary, constraints=constraints)


def describe_operation(operation: RawOperation) -> Optional[DescriptionRecord]:
    """Build the description record for an operation.

    The summary comes first; a description that differs from it follows on
    its own line.  Constraints name the operation id and, when documented,
    what the success response returns.
    """
    if not operation.summary and not operation.description:
        return None

    lines = [text for text in (operation.summary, operation.description) if text]
    if len(lines) == 2 and lines[0] == lines[1]:
        lines.pop()

    constraints: list[str] = []
    if operation.operation_id:
        constraints.append(f"Operation ID: {operation.operation_id}")
    for status in _SUCCESS_STATUSES:
        response = operation.responses.get(status)
        if response is not None:
            if response.description:
                constraints.append(f"Returns: {response.description}")
            break

    return DescriptionRecord(summary="\n".join(lines), constraints=constraints)


def _json(value: Any) -> str:
    # Compact form, the way JSON.stringify writes it.
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
