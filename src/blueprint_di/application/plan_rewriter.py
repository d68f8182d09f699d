"""Application layer - Construction plan rewriting."""

from typing import Tuple

from blueprint_di.domain import ConstructionNode, PlaceholderNode


class NodeTransformer:
    """Walks a construction node tree and rebuilds it bottom-up.

    Subclasses override ``visit_<NodeClassName>`` for the node kinds they
    rewrite. By default children are visited, and a parent is copied only
    when one of its children changed, so untouched sub-trees keep their
    identity.
    """

    def visit(self, node: ConstructionNode) -> ConstructionNode:
        method = getattr(self, f"visit_{type(node).__name__}", self.generic_visit)
        return method(node)

    def generic_visit(self, node: ConstructionNode) -> ConstructionNode:
        if "arguments" not in type(node).model_fields:
            return node

        arguments: Tuple[ConstructionNode, ...] = node.arguments
        visited = tuple(self.visit(argument) for argument in arguments)
        if all(new is old for new, old in zip(visited, arguments)):
            return node
        return node.model_copy(update={"arguments": visited})


class PlaceholderReplacer(NodeTransformer):
    """Replaces one placeholder, matched by token, with its real node.

    Attributes:
        _placeholder: The placeholder to find.
        _replacement: The node emitted in its place.
    """

    def __init__(self, placeholder: PlaceholderNode, replacement: ConstructionNode) -> None:
        self._placeholder = placeholder
        self._replacement = replacement

    def visit_PlaceholderNode(self, node: PlaceholderNode) -> ConstructionNode:
        if self._placeholder.is_same_placeholder(node):
            return self._replacement
        return node


def replace_placeholder(
    node: ConstructionNode,
    placeholder: PlaceholderNode,
    replacement: ConstructionNode,
) -> ConstructionNode:
    """Return a copy of the tree with every occurrence of the placeholder replaced.

    Args:
        node: Root of the tree to rewrite.
        placeholder: The placeholder to find, matched by identity token.
        replacement: The node to substitute.

    Returns:
        The rewritten tree; the original tree is left untouched.

    Example:
        >>> placeholder = PlaceholderNode(parameter=parameter)
        >>> plan = ConstructorNode(constructor=constructor, arguments=(placeholder,))
        >>> replace_placeholder(plan, placeholder, ConstantNode(value=42)).arguments
        (ConstantNode(value=42, declared_type=None),)
    """
    return PlaceholderReplacer(placeholder, replacement).visit(node)
