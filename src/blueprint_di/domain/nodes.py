"""Immutable construction nodes.

A construction plan is a tree of nodes rooted at the node that yields the
fully built service instance. Nodes are pure data: they are never mutated
after creation, and rewriting a plan always produces new nodes.
"""

import itertools
from typing import Any, Callable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from blueprint_di.domain.models import ConstructorDescriptor, ParameterDescriptor

_placeholder_tokens = itertools.count(1)


class ConstructionNode(BaseModel):
    """Base class of every construction node."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def result_type(self) -> Optional[Any]:
        """The type this node is declared to produce, or None when unknown."""
        return None

    @property
    def children(self) -> Tuple["ConstructionNode", ...]:
        return ()


class ConstantNode(ConstructionNode):
    """Yields a stored value.

    Attributes:
        value: The value produced by the node.
        declared_type: Optional type the value is declared as.
    """

    value: Any = Field(..., description="The value produced by the node.")
    declared_type: Optional[Any] = Field(default=None, description="Declared type of the value.")

    @property
    def result_type(self) -> Optional[Any]:
        return self.declared_type


class InvokeNode(ConstructionNode):
    """Invokes a stored delegate with the values of its argument nodes.

    Attributes:
        delegate: The callable to invoke.
        arguments: Nodes whose values are passed positionally.
        declared_type: Optional type the delegate is declared to return.
    """

    delegate: Callable[..., Any] = Field(..., description="The callable to invoke.")
    arguments: Tuple[ConstructionNode, ...] = Field(default=(), description="Positional argument nodes.")
    declared_type: Optional[Any] = Field(default=None, description="Declared return type of the delegate.")

    @property
    def result_type(self) -> Optional[Any]:
        return self.declared_type

    @property
    def children(self) -> Tuple[ConstructionNode, ...]:
        return self.arguments


class ConstructorNode(ConstructionNode):
    """Calls a constructor with one argument node per formal parameter.

    Attributes:
        constructor: The constructor to call.
        arguments: Argument nodes, aligned with ``constructor.parameters``.
    """

    constructor: ConstructorDescriptor = Field(..., description="The constructor to call.")
    arguments: Tuple[ConstructionNode, ...] = Field(default=(), description="Argument nodes.")

    @property
    def result_type(self) -> Optional[Any]:
        return self.constructor.implementation_type

    @property
    def children(self) -> Tuple[ConstructionNode, ...]:
        return self.arguments


class PlaceholderNode(ConstructionNode):
    """Identity-only stand-in for an overridden parameter.

    Two placeholders never share a token, even when built for the same
    parameter. Rewriting matches on ``token`` only, never on equality.

    Attributes:
        parameter: The overridden parameter.
        token: Process-wide unique identity of the placeholder.
    """

    parameter: ParameterDescriptor = Field(..., description="The overridden parameter.")
    token: int = Field(default_factory=lambda: next(_placeholder_tokens), description="Unique identity.")

    @property
    def result_type(self) -> Optional[Any]:
        return self.parameter.annotation

    def is_same_placeholder(self, node: ConstructionNode) -> bool:
        return isinstance(node, PlaceholderNode) and node.token == self.token


class OverriddenParameter(BaseModel):
    """Pairs the placeholder injected into a plan with its real replacement.

    Attributes:
        placeholder: The node standing in for the parameter until after interception.
        node: The node substituted for the placeholder.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    placeholder: PlaceholderNode = Field(..., description="Stand-in node.")
    node: ConstructionNode = Field(..., description="Replacement node.")
