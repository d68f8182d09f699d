"""
Application layer - Construction-plan building and the composition root.

This layer turns registrations into construction plans and factories.
It depends only on the Domain layer.
"""

from .circular_detector import CircularDependencyDetector
from .constructor_resolution import (
    DefaultConstructorResolutionBehavior,
    MostResolvableParametersConstructorResolutionBehavior,
    describe_primary_constructor,
    get_public_constructors,
    injection_constructor,
)
from .container import Container
from .factory_compiler import FactoryCompiler, PlanInterpreter
from .lifestyles import SINGLETON, TRANSIENT, Lifestyle, SingletonLifestyle, TransientLifestyle
from .options import ContainerOptions
from .overrides import OverrideTable
from .parameter_resolution import DefaultParameterResolutionBehavior
from .plan_rewriter import NodeTransformer, PlaceholderReplacer, replace_placeholder
from .registration import Registration
from .relationships import RelationshipSet

__all__ = [
    "Container",
    "ContainerOptions",
    "Registration",
    "Lifestyle",
    "TransientLifestyle",
    "SingletonLifestyle",
    "TRANSIENT",
    "SINGLETON",
    "OverrideTable",
    "RelationshipSet",
    "DefaultConstructorResolutionBehavior",
    "MostResolvableParametersConstructorResolutionBehavior",
    "DefaultParameterResolutionBehavior",
    "describe_primary_constructor",
    "get_public_constructors",
    "injection_constructor",
    "NodeTransformer",
    "PlaceholderReplacer",
    "replace_placeholder",
    "FactoryCompiler",
    "PlanInterpreter",
    "CircularDependencyDetector",
]
