"""Application layer - Explicit parameter overrides."""

from typing import Dict, Iterable, Iterator, Optional, Tuple

from blueprint_di.domain import ConstructionNode, OverriddenParameter, ParameterDescriptor, PlaceholderNode


class OverrideTable:
    """Maps formal parameters to their placeholder and replacement nodes.

    The placeholder is what a constructor plan receives while it is offered
    to interception handlers; the replacement is swapped in afterwards, so
    override nodes are never processed twice by interception.

    Attributes:
        _entries: Dictionary keyed by formal-parameter identity.
    """

    def __init__(self, entries: Optional[Dict[Tuple, OverriddenParameter]] = None) -> None:
        self._entries: Dict[Tuple, OverriddenParameter] = dict(entries or {})

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[ParameterDescriptor, ConstructionNode]]) -> "OverrideTable":
        """Build a table, creating one fresh placeholder per overridden parameter.

        Args:
            pairs: Tuples of (parameter, replacement node).

        Returns:
            The populated override table.

        Raises:
            ValueError: If a replacement is not a construction node.
        """
        entries: Dict[Tuple, OverriddenParameter] = {}
        for parameter, node in pairs:
            if not isinstance(node, ConstructionNode):
                raise ValueError(f"Override for parameter '{parameter.name}' must be a ConstructionNode, got {node!r}")
            entries[parameter.key] = OverriddenParameter(
                placeholder=PlaceholderNode(parameter=parameter),
                node=node,
            )
        return cls(entries)

    def get(self, parameter: ParameterDescriptor) -> Optional[OverriddenParameter]:
        """Return the override entry for a parameter, or None."""
        return self._entries.get(parameter.key)

    def entries(self) -> Iterator[OverriddenParameter]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, parameter: object) -> bool:
        return isinstance(parameter, ParameterDescriptor) and parameter.key in self._entries
