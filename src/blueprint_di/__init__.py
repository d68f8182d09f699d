"""
blueprint-di: Construction-plan compiler for dependency injection.

Public API exports for the blueprint-di package.
"""

# Application exports
from blueprint_di.application import (
    SINGLETON,
    TRANSIENT,
    Container,
    ContainerOptions,
    DefaultConstructorResolutionBehavior,
    DefaultParameterResolutionBehavior,
    FactoryCompiler,
    Lifestyle,
    MostResolvableParametersConstructorResolutionBehavior,
    Registration,
    describe_primary_constructor,
    injection_constructor,
)

# Domain exports
from blueprint_di.domain import (
    ActivationError,
    CircularDependencyError,
    ConstantNode,
    ConstructionNode,
    ConstructorNode,
    ContainerPhase,
    DIException,
    ExpressionBuildingEventArgs,
    InvokeNode,
    KnownRelationship,
    PlaceholderNode,
    RegistrationError,
)

__version__ = "0.1.0"

__all__ = [
    # Container
    "Container",
    "ContainerOptions",
    "ContainerPhase",
    # Lifestyles
    "Lifestyle",
    "TRANSIENT",
    "SINGLETON",
    "Registration",
    # Resolution behaviors
    "DefaultConstructorResolutionBehavior",
    "MostResolvableParametersConstructorResolutionBehavior",
    "DefaultParameterResolutionBehavior",
    "describe_primary_constructor",
    "injection_constructor",
    "FactoryCompiler",
    # Nodes
    "ConstructionNode",
    "ConstantNode",
    "InvokeNode",
    "ConstructorNode",
    "PlaceholderNode",
    "ExpressionBuildingEventArgs",
    "KnownRelationship",
    # Exceptions
    "DIException",
    "ActivationError",
    "CircularDependencyError",
    "RegistrationError",
]
