"""Drive search query builder for nova-pydrive."""

from dataclasses import dataclass, field
from typing import List, Union

Value = Union[str, bool]


def quote(value: Value) -> str:
    """
    Render a value as a Drive query literal.

    Strings are single-quoted with backslashes and quotes escaped, so caller
    input always stays a single literal. Booleans become ``true``/``false``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    escaped = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


@dataclass(frozen=True)
class Predicate:
    """A single ``<left> <operator> <right>`` clause."""

    left: str
    operator: str
    right: str

    def __str__(self) -> str:
        return f"{self.left} {self.operator} {self.right}"


@dataclass
class DriveQuery:
    """
    Ordered conjunction of query predicates.

    Example:
        ```python
        str(DriveQuery().not_trashed().in_parent("abc"))
        # "trashed = false and 'abc' in parents"
        ```
    """

    predicates: List[Predicate] = field(default_factory=list)

    def _add(self, predicate: Predicate) -> "DriveQuery":
        self.predicates.append(predicate)
        return self

    def not_trashed(self) -> "DriveQuery":
        return self._add(Predicate("trashed", "=", quote(False)))

    def in_parent(self, parent_id: str) -> "DriveQuery":
        return self._add(Predicate(quote(parent_id), "in", "parents"))

    def starred(self) -> "DriveQuery":
        return self._add(Predicate("starred", "=", quote(True)))

    def name_equals(self, name: str) -> "DriveQuery":
        return self._add(Predicate("name", "=", quote(name)))

    def __bool__(self) -> bool:
        return bool(self.predicates)

    def __str__(self) -> str:
        return " and ".join(str(p) for p in self.predicates)
