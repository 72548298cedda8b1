"""Data models for identity repository attribute change-sets.

This module defines the operation kinds a repository write can perform and a
read-only, case-insensitive view over a proposed attribute change-set.
"""

from collections.abc import Collection, Iterator, Mapping
from enum import Enum
from typing import Optional

# Attribute change-set as received from the repository write path
AttributeChangeSet = Mapping[str, Collection[str]]


class OperationKind(Enum):
    """Kind of repository operation a change-set belongs to.

    Attributes:
        CREATE: New identity; the change-set carries the full attribute set
        EDIT: Existing identity; the change-set carries only changed attributes
        DELETE: Identity removal
        READ: Attribute read
        SERVICE: Service configuration change
    """

    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    READ = "read"
    SERVICE = "service"


class CaseInsensitiveAttributes(Mapping[str, Collection[str]]):
    """Read-through view that matches attribute names case-insensitively.

    The wrapped change-set is neither copied nor modified. Iteration yields
    the caller's original key casing. When two keys differ only in case the
    last one in iteration order wins.

    Example:
        >>> view = CaseInsensitiveAttributes({"UserPassword": {"secret"}})
        >>> view["userpassword"]
        {'secret'}
        >>> "USERPASSWORD" in view
        True
    """

    def __init__(self, attributes: AttributeChangeSet) -> None:
        self._attributes = attributes
        self._index = {key.lower(): key for key in attributes}

    def __getitem__(self, name: str) -> Collection[str]:
        return self._attributes[self._index[name.lower()]]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index.values())

    def __len__(self) -> int:
        return len(self._index)

    def original_key(self, name: str) -> Optional[str]:
        """Return the caller's spelling of an attribute name, if present."""
        return self._index.get(name.lower())

    def first_value(self, name: str) -> Optional[str]:
        """Return the first value of an attribute, or None if absent or empty.

        Args:
            name: Attribute name, matched case-insensitively

        Returns:
            First value in iteration order, or None
        """
        values = self.get(name)
        if not values:
            return None
        return next(iter(values))
