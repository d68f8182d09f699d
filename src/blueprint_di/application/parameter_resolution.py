"""Application layer - Parameter resolution behavior."""

import inspect

from blueprint_di.application.constructor_resolution import get_public_constructors
from blueprint_di.application.lifestyles import TRANSIENT
from blueprint_di.domain import (
    ActivationError,
    ConstantNode,
    ConstructionNode,
    IContainer,
    IParameterResolutionBehavior,
    ParameterDescriptor,
    type_name,
)


class DefaultParameterResolutionBehavior(IParameterResolutionBehavior):
    """Resolves constructor parameters using their type hints.

    Resolution order:
    1. The expression of the registration for the parameter's type.
    2. The parameter's default value.
    3. An implicit transient registration, when the type is a concrete user
       class and auto-wiring is enabled.

    Nothing is stored in the container, so the behavior can be used as a
    capability probe.

    Attributes:
        _container: The container providing registrations and options.
    """

    def __init__(self, container: IContainer) -> None:
        self._container = container

    def build_parameter_node(self, parameter: ParameterDescriptor) -> ConstructionNode:
        if not parameter.has_annotation:
            if parameter.has_default:
                return ConstantNode(value=parameter.default)
            raise ActivationError(
                f"Cannot resolve parameter '{parameter.name}' of {parameter.declaring_type.__name__}: "
                "it lacks type hint and has no default value."
            )

        registration = self._container.get_registration(parameter.annotation)
        if registration is not None:
            return self._container.build_registration_expression(registration)

        if parameter.has_default:
            return ConstantNode(value=parameter.default, declared_type=parameter.annotation)

        if self._container.options.allow_auto_wiring and self._can_auto_wire(parameter.annotation):
            implicit = TRANSIENT.create_registration(parameter.annotation, parameter.annotation, self._container)
            return self._container.build_registration_expression(implicit)

        raise ActivationError(
            f"Cannot resolve parameter '{parameter.name}' of {parameter.declaring_type.__name__}: "
            f"no registration for type {type_name(parameter.annotation)} exists."
        )

    @staticmethod
    def _can_auto_wire(annotation: object) -> bool:
        if not inspect.isclass(annotation):
            return False
        if annotation.__module__ == "builtins":
            return False
        return bool(get_public_constructors(annotation))