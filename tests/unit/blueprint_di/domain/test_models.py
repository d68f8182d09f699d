"""Unit tests for domain models."""

import inspect

import pytest
from pydantic import ValidationError

from blueprint_di.application import TRANSIENT, Container
from blueprint_di.domain.models import (
    ConstructorDescriptor,
    KnownRelationship,
    ParameterDescriptor,
    type_name,
)


class Database:
    pass


class UserService:
    def __init__(self, db: Database, retries: int = 3):
        self.db = db
        self.retries = retries


def make_parameter(**overrides) -> ParameterDescriptor:
    values = dict(declaring_type=UserService, name="db", annotation=Database)
    values.update(overrides)
    return ParameterDescriptor(**values)


class TestParameterDescriptor:
    """Test cases for the ParameterDescriptor model."""

    def test_parameter_defaults(self):
        """Test default field values."""
        parameter = ParameterDescriptor(declaring_type=UserService, name="db")

        assert parameter.constructor_name == "__init__"
        assert parameter.position == 0
        assert parameter.kind == inspect.Parameter.POSITIONAL_OR_KEYWORD
        assert parameter.annotation is None
        assert parameter.default is inspect.Parameter.empty

    def test_parameter_is_frozen(self):
        """Test that parameters are immutable."""
        parameter = make_parameter()

        with pytest.raises(ValidationError):
            parameter.name = "other"

    def test_parameter_key_ignores_annotation_and_default(self):
        """Test that the key only captures formal-parameter identity."""
        first = make_parameter(annotation=Database)
        second = make_parameter(annotation=None, default=None)

        assert first.key == second.key == (UserService, "__init__", "db")

    def test_parameter_key_differs_per_constructor(self):
        """Test that same-named parameters of different constructors differ."""
        primary = make_parameter()
        alternate = make_parameter(constructor_name="create")

        assert primary.key != alternate.key

    def test_has_annotation(self):
        """Test has_annotation reflects the presence of a type hint."""
        assert make_parameter().has_annotation is True
        assert make_parameter(annotation=None).has_annotation is False

    def test_has_default(self):
        """Test has_default, including a None default."""
        assert make_parameter().has_default is False
        assert make_parameter(default=None).has_default is True

    def test_is_positional_only(self):
        """Test the positional-only flag."""
        assert make_parameter().is_positional_only is False
        assert make_parameter(kind=inspect.Parameter.POSITIONAL_ONLY).is_positional_only is True

    def test_string_representation(self):
        """Test that str() names parameter, type and constructor."""
        assert str(make_parameter()) == "db: Database of UserService.__init__"

    def test_declaring_type_must_be_a_class(self):
        """Test that a non-class declaring type is rejected."""
        with pytest.raises(ValidationError):
            ParameterDescriptor(declaring_type="UserService", name="db")


class TestConstructorDescriptor:
    """Test cases for the ConstructorDescriptor model."""

    def test_parameter_count(self):
        """Test parameter_count counts the descriptors."""
        constructor = ConstructorDescriptor(
            implementation_type=UserService,
            factory=UserService,
            parameters=(make_parameter(), make_parameter(name="retries", position=1, annotation=int)),
        )

        assert constructor.parameter_count == 2

    def test_default_constructor_has_no_parameters(self):
        """Test defaults for a parameterless constructor."""
        constructor = ConstructorDescriptor(implementation_type=Database, factory=Database)

        assert constructor.name == "__init__"
        assert constructor.parameters == ()
        assert constructor.parameter_count == 0

    def test_string_representation_of_primary_constructor(self):
        """Test str() of the primary constructor."""
        constructor = ConstructorDescriptor(
            implementation_type=UserService,
            factory=UserService,
            parameters=(make_parameter(),),
        )

        assert str(constructor) == "UserService(db)"

    def test_string_representation_of_alternate_constructor(self):
        """Test str() of a classmethod constructor."""
        constructor = ConstructorDescriptor(implementation_type=UserService, name="create", factory=lambda: None)

        assert str(constructor) == "UserService.create()"

    def test_factory_must_be_callable(self):
        """Test that a non-callable factory is rejected."""
        with pytest.raises(ValidationError):
            ConstructorDescriptor(implementation_type=UserService, factory="not callable")


class TestKnownRelationship:
    """Test cases for the KnownRelationship model."""

    def test_relationship_fields(self):
        """Test that a relationship stores its fields."""
        container = Container()
        producer = container.register(Database)

        relationship = KnownRelationship(implementation_type=UserService, lifestyle=TRANSIENT, dependency=producer)

        assert relationship.implementation_type is UserService
        assert relationship.lifestyle is TRANSIENT
        assert relationship.dependency is producer

    def test_identical_relationships_are_equal_and_hash_alike(self):
        """Test that identical edges collapse in a set."""
        container = Container()
        producer = container.register(Database)

        first = KnownRelationship(implementation_type=UserService, lifestyle=TRANSIENT, dependency=producer)
        second = KnownRelationship(implementation_type=UserService, lifestyle=TRANSIENT, dependency=producer)

        assert first == second
        assert len({first, second}) == 1

    def test_relationship_rejects_non_registration_dependency(self):
        """Test that the dependency must be a registration."""
        with pytest.raises(ValidationError):
            KnownRelationship(implementation_type=UserService, lifestyle=TRANSIENT, dependency=object())


class TestTypeName:
    """Test cases for the type_name helper."""

    def test_type_name_of_class(self):
        """Test that classes are named by __name__."""
        assert type_name(Database) == "Database"

    def test_type_name_of_type_hint(self):
        """Test that hints without __name__ fall back to repr()."""
        hint = object()
        assert type_name(hint) == repr(hint)
