"""
Domain layer - Construction nodes, descriptors and contracts.

This layer contains the data a construction plan is made of and the
contracts of the pluggable resolution policies.
It has no dependencies on other layers.
"""

from .enums import ContainerPhase
from .events import ExpressionBuildingEventArgs, ExpressionBuildingHandler
from .exceptions import ActivationError, CircularDependencyError, DIException, RegistrationError
from .interfaces import (
    IConstructorResolutionBehavior,
    IContainer,
    ILifestyle,
    IParameterResolutionBehavior,
    IRegistration,
)
from .models import ConstructorDescriptor, KnownRelationship, ParameterDescriptor, type_name
from .nodes import (
    ConstantNode,
    ConstructionNode,
    ConstructorNode,
    InvokeNode,
    OverriddenParameter,
    PlaceholderNode,
)

# Rebuild Pydantic models to resolve forward references
KnownRelationship.model_rebuild()
ExpressionBuildingEventArgs.model_rebuild()

__all__ = [
    # Enums
    "ContainerPhase",
    # Exceptions
    "DIException",
    "ActivationError",
    "CircularDependencyError",
    "RegistrationError",
    # Interfaces
    "IContainer",
    "IRegistration",
    "ILifestyle",
    "IConstructorResolutionBehavior",
    "IParameterResolutionBehavior",
    # Models
    "ParameterDescriptor",
    "ConstructorDescriptor",
    "KnownRelationship",
    "type_name",
    # Nodes
    "ConstructionNode",
    "ConstantNode",
    "InvokeNode",
    "ConstructorNode",
    "PlaceholderNode",
    "OverriddenParameter",
    # Events
    "ExpressionBuildingEventArgs",
    "ExpressionBuildingHandler",
]
