from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, Sequence, Tuple, Type, TypeVar

from blueprint_di.domain.enums import ContainerPhase
from blueprint_di.domain.models import ConstructorDescriptor, KnownRelationship, ParameterDescriptor
from blueprint_di.domain.nodes import ConstructionNode

if TYPE_CHECKING:
    from blueprint_di.application.options import ContainerOptions

T = TypeVar("T")


class IConstructorResolutionBehavior(ABC):
    """Abstract policy selecting the constructor used to build an implementation."""

    @abstractmethod
    def get_constructor(self, service_type: Type, implementation_type: Type) -> ConstructorDescriptor:
        """Select exactly one constructor of the implementation.

        Args:
            service_type: The service type being registered.
            implementation_type: The concrete type to construct.

        Returns:
            The selected constructor.

        Raises:
            ActivationError: If no constructor qualifies.
        """


class IParameterResolutionBehavior(ABC):
    """Abstract policy producing the construction node for a constructor parameter."""

    @abstractmethod
    def build_parameter_node(self, parameter: ParameterDescriptor) -> ConstructionNode:
        """Build the node supplying a value for the parameter.

        Must be safe to call speculatively, as a capability probe.

        Args:
            parameter: The formal parameter to resolve.

        Returns:
            The construction node for the parameter.

        Raises:
            ActivationError: If the parameter cannot be resolved.
        """


class IRegistration(ABC):
    """Abstract interface of a lifestyle-bound registration."""

    @property
    @abstractmethod
    def lifestyle(self) -> "ILifestyle":
        """The lifestyle that created this registration."""

    @property
    @abstractmethod
    def implementation_type(self) -> Type:
        """The type that this registration creates."""

    @abstractmethod
    def build_expression(self) -> ConstructionNode:
        """Build the construction node with the lifestyle's caching applied."""

    @abstractmethod
    def get_relationships(self) -> Tuple[KnownRelationship, ...]:
        """Return a snapshot of the relationships captured by the latest build."""

    @abstractmethod
    def replace_relationships(self, relationships: Iterable[KnownRelationship]) -> None:
        """Replace the captured relationships wholesale."""

    @abstractmethod
    def set_parameter_overrides(self, overrides: Sequence[Tuple[ParameterDescriptor, ConstructionNode]]) -> None:
        """Install explicit parameter overrides, before the first build."""


class ILifestyle(ABC):
    """Abstract interface of a lifestyle, deciding how built instances are cached."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human readable name of the lifestyle."""

    @abstractmethod
    def create_registration(
        self,
        service_type: Type,
        implementation_type: Type,
        container: "IContainer",
        parameter_overrides: Optional[Sequence[Tuple[ParameterDescriptor, ConstructionNode]]] = None,
    ) -> IRegistration:
        """Create a constructor-based registration bound to this lifestyle."""

    @abstractmethod
    def create_delegate_registration(
        self,
        service_type: Type,
        creator: Callable[[], Any],
        container: "IContainer",
    ) -> IRegistration:
        """Create a delegate-based registration bound to this lifestyle."""


class IContainer(ABC):
    """Abstract interface of the composition root consumed by registrations."""

    @property
    @abstractmethod
    def options(self) -> "ContainerOptions":
        """The container's configuration, including the resolution behaviors."""

    @property
    @abstractmethod
    def phase(self) -> ContainerPhase:
        """The current lifecycle phase of the container."""

    def is_locked(self) -> bool:
        """Whether the container left the registration phase."""
        return self.phase == ContainerPhase.LOCKED

    @abstractmethod
    def get_registration(self, service_type: Type) -> Optional[IRegistration]:
        """Return the registration for a service type, or None."""

    @abstractmethod
    def get_registration_even_if_invalid(self, service_type: Type) -> Optional[IRegistration]:
        """Return the explicit registration for a service type without validating it."""

    @abstractmethod
    def get_initializer(self, implementation_type: Type) -> Optional[Callable[[Any], None]]:
        """Return the initializer applicable to the implementation type, or None."""

    @abstractmethod
    def on_expression_building(
        self,
        registration: IRegistration,
        service_type: Type,
        implementation_type: Type,
        node: ConstructionNode,
    ) -> ConstructionNode:
        """Offer a construction node to every interception handler, in order."""

    @abstractmethod
    def build_registration_expression(self, registration: IRegistration) -> ConstructionNode:
        """Build a registration's expression on behalf of a dependent plan."""

    @abstractmethod
    def get_instance(self, service_type: Type[T]) -> T:
        """Resolve and return an instance of the requested service type."""
