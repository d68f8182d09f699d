"""Unit tests for lifestyles and their registrations."""

import threading
from typing import get_type_hints

import pytest

from blueprint_di.application import SINGLETON, TRANSIENT, Container, SingletonLifestyle, TransientLifestyle
from blueprint_di.application.lifestyles import SingletonRegistration, TransientRegistration
from blueprint_di.domain import ConstantNode, ConstructorNode, ILifestyle, IRegistration


class Counter:
    created = 0

    def __init__(self):
        Counter.created += 1


@pytest.fixture(autouse=True)
def reset_counter():
    Counter.created = 0
    yield


@pytest.fixture
def container():
    return Container()


class TestLifestyle:
    """Test cases for the lifestyle singletons."""

    def test_names(self):
        """Test that lifestyles carry readable names."""
        assert TRANSIENT.name == "Transient"
        assert SINGLETON.name == "Singleton"

    def test_implement_interface(self):
        """Test that lifestyles implement ILifestyle."""
        assert isinstance(TransientLifestyle(), ILifestyle)
        assert isinstance(SingletonLifestyle(), ILifestyle)

    def test_repr(self):
        """Test the lifestyle representation."""
        assert repr(TRANSIENT) == "TransientLifestyle(name='Transient')"

    @pytest.mark.parametrize("lifestyle_type", [TransientLifestyle, SingletonLifestyle])
    def test_registration_factory_is_annotated(self, lifestyle_type):
        """Test that lifestyle registration factories annotate every parameter."""
        hints = get_type_hints(lifestyle_type._create_registration)

        assert set(hints) == {"service_type", "implementation_type", "creator", "container", "return"}

    def test_creates_matching_registration(self, container):
        """Test that each lifestyle creates its registration type."""
        transient = TRANSIENT.create_registration(Counter, Counter, container)
        singleton = SINGLETON.create_registration(Counter, Counter, container)

        assert isinstance(transient, TransientRegistration)
        assert isinstance(singleton, SingletonRegistration)
        assert isinstance(transient, IRegistration)
        assert transient.lifestyle is TRANSIENT
        assert singleton.lifestyle is SINGLETON

    def test_delegate_registration_uses_service_type_as_implementation(self, container):
        """Test that delegate registrations report the service type."""
        registration = TRANSIENT.create_delegate_registration(Counter, Counter, container)

        assert registration.implementation_type is Counter


class TestTransientRegistration:
    """Test cases for TransientRegistration."""

    def test_build_expression_is_constructor_plan(self, container):
        """Test that transient plans construct on every run."""
        registration = TRANSIENT.create_registration(Counter, Counter, container)

        assert isinstance(registration.build_expression(), ConstructorNode)
        assert Counter.created == 0

    def test_repr(self, container):
        """Test the registration representation."""
        registration = TRANSIENT.create_registration(Counter, Counter, container)

        assert repr(registration) == (
            "TransientRegistration(service_type=Counter, implementation_type=Counter, lifestyle=Transient)"
        )


class TestSingletonRegistration:
    """Test cases for SingletonRegistration."""

    def test_build_expression_is_constant(self, container):
        """Test that singleton plans hold the created instance."""
        registration = SINGLETON.create_registration(Counter, Counter, container)

        node = registration.build_expression()

        assert isinstance(node, ConstantNode)
        assert isinstance(node.value, Counter)
        assert node.result_type is Counter

    def test_instance_is_created_once(self, container):
        """Test that repeated builds reuse the instance."""
        registration = SINGLETON.create_registration(Counter, Counter, container)

        first = registration.build_expression()
        second = registration.build_expression()

        assert first is second
        assert Counter.created == 1

    def test_concurrent_builds_create_one_instance(self, container):
        """Test that concurrent builds do not race on creation."""
        registration = SINGLETON.create_registration(Counter, Counter, container)
        results = []

        def build():
            results.append(registration.build_expression().value)

        threads = [threading.Thread(target=build) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert Counter.created == 1
        assert all(instance is results[0] for instance in results)

    def test_delegate_singleton(self, container):
        """Test that delegate singletons call the creator once."""
        calls = []

        def creator():
            calls.append(1)
            return Counter()

        registration = SINGLETON.create_delegate_registration(Counter, creator, container)

        registration.build_expression()
        registration.build_expression()

        assert calls == [1]
