"""Unit tests for DefaultParameterResolutionBehavior."""

from abc import ABC, abstractmethod
from typing import List

import pytest

from blueprint_di.application import SINGLETON, Container, ContainerOptions
from blueprint_di.application.parameter_resolution import DefaultParameterResolutionBehavior
from blueprint_di.domain import (
    ActivationError,
    ConstantNode,
    ConstructorNode,
    IParameterResolutionBehavior,
    ParameterDescriptor,
)


class Notifier(ABC):
    @abstractmethod
    def notify(self, message: str) -> None: ...


class EmailNotifier(Notifier):
    def notify(self, message: str) -> None:
        pass


class Settings:
    pass


class Consumer:
    pass


def parameter(annotation=None, **overrides) -> ParameterDescriptor:
    values = dict(declaring_type=Consumer, name="dependency", annotation=annotation)
    values.update(overrides)
    return ParameterDescriptor(**values)


@pytest.fixture
def container():
    return Container()


@pytest.fixture
def behavior(container):
    return DefaultParameterResolutionBehavior(container)


class TestDefaultParameterResolutionBehavior:
    """Test cases for DefaultParameterResolutionBehavior."""

    def test_implements_interface(self, behavior):
        """Test that the behavior implements the policy contract."""
        assert isinstance(behavior, IParameterResolutionBehavior)

    def test_is_the_container_default(self, container):
        """Test that containers install this behavior when none is configured."""
        assert isinstance(container.options.parameter_resolution_behavior, DefaultParameterResolutionBehavior)

    def test_uses_registration_expression(self, container, behavior):
        """Test that a registered type resolves to its registration's plan."""
        container.register(Notifier, EmailNotifier)

        node = behavior.build_parameter_node(parameter(Notifier))

        assert isinstance(node, ConstructorNode)
        assert node.result_type is EmailNotifier

    def test_uses_singleton_instance_node(self, container, behavior):
        """Test that singleton registrations contribute their cached instance."""
        settings = Settings()
        container.register_delegate(Settings, lambda: settings, SINGLETON)

        node = behavior.build_parameter_node(parameter(Settings))

        assert isinstance(node, ConstantNode)
        assert node.value is settings

    def test_uses_default_value_when_unregistered(self, behavior):
        """Test that defaults are used for unregistered types."""
        node = behavior.build_parameter_node(parameter(int, default=5))

        assert isinstance(node, ConstantNode)
        assert node.value == 5

    def test_registration_wins_over_default(self, container, behavior):
        """Test that a registration is preferred to a default value."""
        container.register(Notifier, EmailNotifier)

        node = behavior.build_parameter_node(parameter(Notifier, default=None))

        assert isinstance(node, ConstructorNode)

    def test_default_wins_over_auto_wiring(self, behavior):
        """Test that an unregistered concrete class with a default keeps the default."""
        node = behavior.build_parameter_node(parameter(Settings, default=None))

        assert isinstance(node, ConstantNode)
        assert node.value is None

    def test_auto_wires_concrete_class(self, container, behavior):
        """Test that unregistered concrete classes are built on demand."""
        node = behavior.build_parameter_node(parameter(Settings))

        assert isinstance(node, ConstructorNode)
        assert node.result_type is Settings
        assert container.get_registration(Settings) is None

    def test_auto_wiring_can_be_disabled(self):
        """Test that auto-wiring respects the container options."""
        container = Container(ContainerOptions(allow_auto_wiring=False))
        behavior = DefaultParameterResolutionBehavior(container)

        with pytest.raises(ActivationError, match="no registration for type Settings"):
            behavior.build_parameter_node(parameter(Settings))

    def test_abstract_type_is_unresolvable(self, behavior):
        """Test that abstract types without registration fail."""
        with pytest.raises(ActivationError, match="'dependency' of Consumer"):
            behavior.build_parameter_node(parameter(Notifier))

    def test_builtin_type_is_not_auto_wired(self, behavior):
        """Test that builtins such as int are never built implicitly."""
        with pytest.raises(ActivationError, match="no registration for type int"):
            behavior.build_parameter_node(parameter(int))

    def test_generic_alias_is_unresolvable(self, behavior):
        """Test that non-class hints without registration fail."""
        with pytest.raises(ActivationError):
            behavior.build_parameter_node(parameter(List[int]))

    def test_missing_type_hint_without_default(self, behavior):
        """Test that unannotated parameters without default fail distinctly."""
        with pytest.raises(ActivationError, match="lacks type hint and has no default value"):
            behavior.build_parameter_node(parameter(None))

    def test_missing_type_hint_with_default(self, behavior):
        """Test that unannotated parameters fall back to their default."""
        node = behavior.build_parameter_node(parameter(None, default="fallback"))

        assert node.value == "fallback"

    def test_generic_alias_can_be_registered(self, container, behavior):
        """Test that hashable type hints can be registered with a delegate."""
        container.register_delegate(List[int], lambda: [1, 2])

        node = behavior.build_parameter_node(parameter(List[int]))

        assert node is not None
