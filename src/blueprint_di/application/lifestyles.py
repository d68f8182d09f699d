"""Application layer - Lifestyles wrapping construction plans with caching."""

import threading
from abc import abstractmethod
from typing import Any, Callable, Optional, Sequence, Tuple, Type

from blueprint_di.application.registration import Registration
from blueprint_di.domain import ConstantNode, ConstructionNode, IContainer, ILifestyle, ParameterDescriptor, type_name


class Lifestyle(ILifestyle):
    """Base class of lifestyles.

    A lifestyle creates one registration per registered service and decides
    how the plans of that registration are cached.

    Attributes:
        _name: Human readable name of the lifestyle.
    """

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def create_registration(
        self,
        service_type: Type,
        implementation_type: Type,
        container: IContainer,
        parameter_overrides: Optional[Sequence[Tuple[ParameterDescriptor, ConstructionNode]]] = None,
    ) -> Registration:
        """Create a constructor-based registration.

        Args:
            service_type: The service type being registered.
            implementation_type: The concrete type to construct.
            container: The owning container.
            parameter_overrides: Optional (parameter, node) pairs, installed before the first build.

        Returns:
            The new registration.
        """
        registration = self._create_registration(service_type, implementation_type, None, container)
        if parameter_overrides:
            registration.set_parameter_overrides(parameter_overrides)
        return registration

    def create_delegate_registration(
        self,
        service_type: Type,
        creator: Callable[[], Any],
        container: IContainer,
    ) -> Registration:
        """Create a registration whose instances are produced by a delegate."""
        if creator is None:
            raise ValueError("creator cannot be None")
        return self._create_registration(service_type, None, creator, container)

    @abstractmethod
    def _create_registration(
        self,
        service_type: Type,
        implementation_type: Optional[Type],
        creator: Optional[Callable[[], Any]],
        container: IContainer,
    ) -> Registration:
        """Create the lifestyle specific registration."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"


class _LifestyleRegistration(Registration):
    """Registration for either an implementation type or a creator delegate."""

    def __init__(
        self,
        lifestyle: ILifestyle,
        container: IContainer,
        service_type: Type,
        implementation_type: Optional[Type] = None,
        creator: Optional[Callable[[], Any]] = None,
    ) -> None:
        super().__init__(lifestyle, container)
        self.service_type = service_type
        self._implementation_type = implementation_type or service_type
        self._creator = creator

    @property
    def implementation_type(self) -> Type:
        return self._implementation_type

    def build_transient_node(self) -> ConstructionNode:
        if self._creator is not None:
            return self.build_transient_expression_from_creator(self.service_type, self._creator)
        return self.build_transient_expression(self.service_type, self._implementation_type)

    def build_factory(self) -> Callable[[], Any]:
        if self._creator is not None:
            return self.build_transient_delegate_from_creator(self.service_type, self._creator)
        return self.build_transient_delegate(self.service_type, self._implementation_type)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(service_type={type_name(self.service_type)}, "
            f"implementation_type={type_name(self._implementation_type)}, lifestyle={self.lifestyle.name})"
        )


class TransientRegistration(_LifestyleRegistration):
    """Registration creating a new instance every time its plan runs."""

    def build_expression(self) -> ConstructionNode:
        return self.build_transient_node()


class SingletonRegistration(_LifestyleRegistration):
    """Registration creating its instance once and reusing it afterwards.

    Attributes:
        _lock: Guards the creation of the instance.
        _instance_node: Constant node holding the instance, once created.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._lock = threading.RLock()
        self._instance_node: Optional[ConstantNode] = None

    def build_expression(self) -> ConstructionNode:
        with self._lock:
            if self._instance_node is None:
                instance = self.build_factory()()
                self._instance_node = ConstantNode(value=instance, declared_type=self.implementation_type)
            return self._instance_node


class TransientLifestyle(Lifestyle):
    """A new instance is created each time the service is requested."""

    def __init__(self) -> None:
        super().__init__("Transient")

    def _create_registration(
        self,
        service_type: Type,
        implementation_type: Optional[Type],
        creator: Optional[Callable[[], Any]],
        container: IContainer,
    ) -> Registration:
        return TransientRegistration(self, container, service_type, implementation_type, creator)


class SingletonLifestyle(Lifestyle):
    """A single instance is created and shared for the lifetime of the container."""

    def __init__(self) -> None:
        super().__init__("Singleton")

    def _create_registration(
        self,
        service_type: Type,
        implementation_type: Optional[Type],
        creator: Optional[Callable[[], Any]],
        container: IContainer,
    ) -> Registration:
        return SingletonRegistration(self, container, service_type, implementation_type, creator)


TRANSIENT = TransientLifestyle()
SINGLETON = SingletonLifestyle()