"""Application layer - Construction-plan building for a single registration."""

import logging
from abc import abstractmethod
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple, Type

from blueprint_di.application.factory_compiler import FactoryCompiler
from blueprint_di.application.overrides import OverrideTable
from blueprint_di.application.plan_rewriter import replace_placeholder
from blueprint_di.application.relationships import RelationshipSet
from blueprint_di.domain import (
    ActivationError,
    ConstructionNode,
    ConstructorDescriptor,
    ConstructorNode,
    IContainer,
    ILifestyle,
    InvokeNode,
    IRegistration,
    KnownRelationship,
    ParameterDescriptor,
    type_name,
)

logger = logging.getLogger(__name__)


class Registration(IRegistration):
    """Builds the construction plan of one service, for one lifestyle.

    Lifestyles create a registration per registered service. Plans returned
    by :meth:`build_expression` have been offered to the container's
    interception handlers, have the applicable initializers applied, and
    carry the caching of the lifestyle.

    While a constructor plan is offered to interception, overridden
    parameters are represented by placeholders. They are swapped for the
    real override nodes afterwards, so those nodes are not intercepted twice.

    Attributes:
        _lifestyle: The lifestyle that created this registration.
        _container: The container this registration belongs to.
        _relationships: Dependency edges captured by the latest build.
        _overridden_parameters: Optional explicit parameter overrides.
    """

    def __init__(self, lifestyle: ILifestyle, container: IContainer) -> None:
        """Initialize the registration.

        Args:
            lifestyle: The lifestyle that created this registration.
            container: The container this registration belongs to.

        Raises:
            ValueError: If lifestyle or container is None.
        """
        if lifestyle is None:
            raise ValueError("lifestyle cannot be None")
        if container is None:
            raise ValueError("container cannot be None")

        self._lifestyle = lifestyle
        self._container = container
        self._relationships = RelationshipSet()
        self._overridden_parameters: Optional[OverrideTable] = None

    @property
    def lifestyle(self) -> ILifestyle:
        return self._lifestyle

    @property
    def container(self) -> IContainer:
        return self._container

    @property
    @abstractmethod
    def implementation_type(self) -> Type:
        """The type that this registration creates."""

    @abstractmethod
    def build_expression(self) -> ConstructionNode:
        """Build a construction node with the lifestyle's caching applied."""

    def get_relationships(self) -> Tuple[KnownRelationship, ...]:
        return self._relationships.snapshot()

    def replace_relationships(self, relationships: Iterable[KnownRelationship]) -> None:
        self._relationships.replace(relationships)

    def add_relationship(self, relationship: KnownRelationship) -> None:
        self._relationships.add(relationship)

    def set_parameter_overrides(self, overrides: Sequence[Tuple[ParameterDescriptor, ConstructionNode]]) -> None:
        """Install explicit parameter overrides.

        Only lifestyles call this, before the first build.

        Args:
            overrides: Tuples of (parameter, replacement node).
        """
        self._overridden_parameters = OverrideTable.from_pairs(overrides)

    def intercept_instance_creation(
        self,
        service_type: Type,
        implementation_type: Type,
        node: ConstructionNode,
    ) -> ConstructionNode:
        return self._container.on_expression_building(self, service_type, implementation_type, node)

    def build_transient_delegate_from_creator(
        self, service_type: Type, creator: Callable[[], Any]
    ) -> Callable[[], Any]:
        """Build a factory for a service created by a user supplied delegate.

        The factory might still return None when an interception handler
        replaced the null-guarded plan.

        Args:
            service_type: The service type the creator produces.
            creator: Delegate taking no arguments and returning an instance.

        Returns:
            A callable taking no arguments.

        Raises:
            ActivationError: If the plan cannot be built or compiled.
        """
        node = self.build_transient_expression_from_creator(service_type, creator)
        return self._compile(node, service_type)

    def build_transient_delegate(self, service_type: Type, implementation_type: Type) -> Callable[[], Any]:
        """Build a factory creating the implementation through its constructor.

        Args:
            service_type: The service type being registered.
            implementation_type: The concrete type to construct.

        Returns:
            A callable taking no arguments.

        Raises:
            ActivationError: If the plan cannot be built or compiled.
        """
        node = self.build_transient_expression(service_type, implementation_type)
        return self._compile(node, implementation_type)

    def build_transient_expression_from_creator(
        self, service_type: Type, creator: Callable[[], Any]
    ) -> ConstructionNode:
        """Build the plan of a service created by a user supplied delegate.

        The delegate call is offered to interception first. The null check is
        wrapped around the intercepted plan, so handlers see the bare
        delegate call, and before the initializer, so initializers never
        receive None.

        Args:
            service_type: The service type the creator produces.
            creator: Delegate taking no arguments and returning an instance.

        Returns:
            The construction node.

        Raises:
            ValueError: If creator is None.
            ActivationError: If interception or initializer wrapping fails.
        """
        if creator is None:
            raise ValueError("creator cannot be None")

        node: ConstructionNode = InvokeNode(delegate=creator)

        node = self.intercept_instance_creation(service_type, service_type, node)

        node = _wrap_with_null_checker(service_type, node)

        node = self._wrap_with_initializer(service_type, node)

        logger.debug("Built delegate plan for %s", type_name(service_type))
        return node

    def build_transient_expression(self, service_type: Type, implementation_type: Type) -> ConstructionNode:
        """Build the plan creating the implementation through its constructor.

        Args:
            service_type: The service type being registered.
            implementation_type: The concrete type to construct.

        Returns:
            The construction node.

        Raises:
            ActivationError: If no constructor qualifies, a parameter cannot be
                resolved, or interception or initializer wrapping fails.
        """
        node: ConstructionNode = self._build_constructor_node(service_type, implementation_type)

        node = self.intercept_instance_creation(service_type, implementation_type, node)

        node = self._wrap_with_initializer(implementation_type, node)

        node = self._replace_placeholders_with_overridden_parameters(node)

        logger.debug("Built constructor plan for %s as %s", type_name(service_type), type_name(implementation_type))
        return node

    def _build_constructor_node(self, service_type: Type, implementation_type: Type) -> ConstructorNode:
        resolution_behavior = self._container.options.constructor_resolution_behavior

        constructor = resolution_behavior.get_constructor(service_type, implementation_type)

        self._replace_constructor_parameters_as_known_relationships(constructor)

        arguments = tuple(self._build_argument_node(parameter) for parameter in constructor.parameters)

        return ConstructorNode(constructor=constructor, arguments=arguments)

    def _replace_constructor_parameters_as_known_relationships(self, constructor: ConstructorDescriptor) -> None:
        relationships = []
        for parameter in constructor.parameters:
            if not parameter.has_annotation:
                continue
            producer = self._container.get_registration_even_if_invalid(parameter.annotation)
            if producer is not None:
                relationships.append(
                    KnownRelationship(
                        implementation_type=parameter.declaring_type,
                        lifestyle=self._lifestyle,
                        dependency=producer,
                    )
                )

        self.replace_relationships(relationships)

    def _build_argument_node(self, parameter: ParameterDescriptor) -> ConstructionNode:
        if self._overridden_parameters is not None:
            overridden = self._overridden_parameters.get(parameter)
            if overridden is not None:
                return overridden.placeholder

        return self._build_parameter_node(parameter)

    def _build_parameter_node(self, parameter: ParameterDescriptor) -> ConstructionNode:
        injection_behavior = self._container.options.parameter_resolution_behavior

        node = injection_behavior.build_parameter_node(parameter)

        if node is None:
            raise ActivationError(
                f"The {type(injection_behavior).__name__} that was registered through "
                f"options.parameter_resolution_behavior returned None after building parameter {parameter}. "
                "It should either return a construction node or raise an ActivationError."
            )

        return node

    def _replace_placeholders_with_overridden_parameters(self, node: ConstructionNode) -> ConstructionNode:
        if self._overridden_parameters is not None:
            for overridden in self._overridden_parameters.entries():
                node = replace_placeholder(node, overridden.placeholder, overridden.node)

        return node

    def _wrap_with_initializer(self, implementation_type: Type, node: ConstructionNode) -> ConstructionNode:
        instance_initializer = self._container.get_initializer(implementation_type)

        if instance_initializer is None:
            return node

        def create_with_initializer(instance: Any) -> Any:
            try:
                instance_initializer(instance)
            except Exception as e:
                raise ActivationError(_initializers_could_not_be_applied(implementation_type, e), cause=e) from e
            return instance

        try:
            return InvokeNode(delegate=create_with_initializer, arguments=(node,), declared_type=node.result_type)
        except Exception as e:
            raise ActivationError(_initializers_could_not_be_applied(implementation_type, e), cause=e) from e

    def _compile(self, node: ConstructionNode, target_type: Type) -> Callable[[], Any]:
        compiler = FactoryCompiler(compile_factories=self._container.options.compile_factories)
        return compiler.compile(node, target_type)


def _wrap_with_null_checker(service_type: Type, node: ConstructionNode) -> ConstructionNode:
    def throw_when_none(instance: Any) -> Any:
        if instance is None:
            raise ActivationError(f"The delegate registered for type {type_name(service_type)} returned None.")
        return instance

    return InvokeNode(delegate=throw_when_none, arguments=(node,), declared_type=node.result_type)


def _initializers_could_not_be_applied(implementation_type: Type, error: Exception) -> str:
    return f"The initializer(s) for type {type_name(implementation_type)} could not be applied. {error}"