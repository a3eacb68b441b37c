"""SQL fragment builders.

Helpers for the few statement shapes that are assembled at runtime. Column
names always come from application code (a static field list plus a
translation table); only values travel as positional parameters.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, NamedTuple, Optional, Sequence

from core.exceptions import InvalidRequest


@dataclass(frozen=True)
class Assignment:
    """One resolved ``SET`` target: logical field, physical column, new value."""

    field: str
    column: str
    value: Any


class SetClause(NamedTuple):
    """Rendered ``SET`` fragment and the values bound to its placeholders."""

    clause: str
    values: list[Any]


def resolve_assignments(
    data: Mapping[str, Any],
    column_translation: Optional[Mapping[str, str]] = None,
    allowed: Optional[Iterable[str]] = None,
) -> list[Assignment]:
    """Resolve a sparse update payload into ordered assignments.

    Args:
        data: Logical field name to new value, in the order to render.
        column_translation: Logical name to physical column name, for fields
            whose names differ. Fields not listed are used verbatim.
        allowed: Optional static list of updatable logical fields. Any other
            key is rejected.

    Returns:
        Assignments in the iteration order of ``data``.

    Raises:
        InvalidRequest: If ``data`` is empty or names a field not in ``allowed``.
    """
    if not data:
        raise InvalidRequest("No data")

    translation = column_translation or {}
    permitted = set(allowed) if allowed is not None else None

    assignments = []
    for field, value in data.items():
        if permitted is not None and field not in permitted:
            raise InvalidRequest(f"Field cannot be updated: {field}")
        assignments.append(Assignment(field, translation.get(field, field), value))
    return assignments


def build_set_clause(assignments: Sequence[Assignment], start: int = 1) -> SetClause:
    """Render ``"col"=$n`` fragments for resolved assignments.

    Placeholder numbering begins at ``start``; ``values[i]`` is bound to
    ``$(start + i)``.

    Examples:
        >>> build_set_clause([Assignment("firstName", "first_name", "Zach")])
        SetClause(clause='"first_name"=$1', values=['Zach'])
    """
    if not assignments:
        raise InvalidRequest("No data")

    fragments = [
        f'"{assignment.column}"=${index}'
        for index, assignment in enumerate(assignments, start=start)
    ]
    return SetClause(", ".join(fragments), [a.value for a in assignments])


def sql_for_partial_update(
    data: Mapping[str, Any],
    column_translation: Optional[Mapping[str, str]] = None,
    *,
    allowed: Optional[Iterable[str]] = None,
    start: int = 1,
) -> SetClause:
    """Build the ``SET`` clause for a partial update.

    Examples:
        >>> sql_for_partial_update(
        ...     {"firstName": "Zach", "lastName": "Boudreaux"},
        ...     {"firstName": "first_name", "lastName": "last_name"},
        ... )
        SetClause(clause='"first_name"=$1, "last_name"=$2', values=['Zach', 'Boudreaux'])
    """
    assignments = resolve_assignments(data, column_translation, allowed)
    return build_set_clause(assignments, start=start)


def contains_pattern(text: str) -> str:
    """Wrap ``text`` as a LIKE pattern matching it anywhere, wildcards escaped."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
