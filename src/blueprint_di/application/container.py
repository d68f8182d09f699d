import functools
import inspect
import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

from blueprint_di.application.circular_detector import CircularDependencyDetector
from blueprint_di.application.constructor_resolution import (
    DefaultConstructorResolutionBehavior,
    get_public_constructors,
)
from blueprint_di.application.factory_compiler import FactoryCompiler
from blueprint_di.application.lifestyles import SINGLETON, TRANSIENT
from blueprint_di.application.options import ContainerOptions
from blueprint_di.application.parameter_resolution import DefaultParameterResolutionBehavior
from blueprint_di.domain import (
    ActivationError,
    ConstructionNode,
    ContainerPhase,
    ExpressionBuildingEventArgs,
    ExpressionBuildingHandler,
    IContainer,
    ILifestyle,
    IRegistration,
    KnownRelationship,
    ParameterDescriptor,
    RegistrationError,
    type_name,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Container(IContainer):
    """Composition root mapping service types to lifestyle-bound registrations.

    The container starts in the registration phase. The first call to
    :meth:`get_instance` or :meth:`verify` locks it; afterwards no
    registrations can be added, and resolution behaviors that depend on
    the phase switch to strict mode.

    Attributes:
        _options: Configuration, including the resolution behaviors.
        _registrations: Explicit registrations keyed by service type.
        _implicit_registrations: Registrations created by auto-wiring in get_instance.
        _initializers: (service type, callback) pairs in registration order.
        _expression_building_handlers: Interception handlers in registration order.
        _factories: Compiled factories keyed by registration.
        _circular_detector: Detects cycles between plans under construction.
    """

    def __init__(self, options: Optional[ContainerOptions] = None) -> None:
        """Initialize the container.

        Args:
            options: Optional configuration. Missing resolution behaviors are
                     filled with the default implementations bound to this container.
                     The container works on a copy; the caller's object is left unchanged.
        """
        self._options = options.model_copy() if options is not None else ContainerOptions()
        if self._options.constructor_resolution_behavior is None:
            self._options.constructor_resolution_behavior = DefaultConstructorResolutionBehavior()
        if self._options.parameter_resolution_behavior is None:
            self._options.parameter_resolution_behavior = DefaultParameterResolutionBehavior(self)

        self._registrations: Dict[Any, IRegistration] = {}
        self._implicit_registrations: Dict[Type, IRegistration] = {}
        self._initializers: List[Tuple[Type, Callable[[Any], None]]] = []
        self._expression_building_handlers: List[ExpressionBuildingHandler] = []
        self._factories: Dict[IRegistration, Callable[[], Any]] = {}
        self._circular_detector = CircularDependencyDetector()
        self._locked = False
        self._lock = threading.RLock()

    @property
    def options(self) -> ContainerOptions:
        return self._options

    @property
    def phase(self) -> ContainerPhase:
        return ContainerPhase.LOCKED if self._locked else ContainerPhase.REGISTRATION

    def register(
        self,
        service_type: Type,
        implementation_type: Optional[Type] = None,
        lifestyle: ILifestyle = TRANSIENT,
        parameter_overrides: Optional[Sequence[Tuple[ParameterDescriptor, ConstructionNode]]] = None,
    ) -> IRegistration:
        """Register an implementation built through its constructor.

        Args:
            service_type: The type requested from the container.
            implementation_type: The concrete type to construct. Defaults to service_type.
            lifestyle: How created instances are cached.
            parameter_overrides: Optional (parameter, node) pairs replacing the
                                 resolution of those constructor parameters.

        Returns:
            The created registration.

        Raises:
            RegistrationError: If the container is locked, the service is
                               already registered, or the types are incompatible.

        Example:
            >>> container.register(UserRepository, SqlUserRepository, SINGLETON)
        """
        implementation_type = implementation_type or service_type
        if not inspect.isclass(implementation_type):
            raise RegistrationError(f"Implementation {implementation_type!r} must be a class.")
        if inspect.isclass(service_type) and not _inherits_from(implementation_type, service_type):
            raise RegistrationError(
                f"The supplied type {type_name(implementation_type)} does not inherit from {type_name(service_type)}."
            )

        registration = lifestyle.create_registration(service_type, implementation_type, self, parameter_overrides)
        self._add_registration(service_type, registration)
        return registration

    def register_delegate(
        self,
        service_type: Type,
        creator: Callable[[], Any],
        lifestyle: ILifestyle = TRANSIENT,
    ) -> IRegistration:
        """Register a delegate taking no arguments that creates the service.

        Raises:
            RegistrationError: If the container is locked or the service is already registered.
        """
        if not callable(creator):
            raise RegistrationError(f"The creator for {type_name(service_type)} must be callable.")

        registration = lifestyle.create_delegate_registration(service_type, creator, self)
        self._add_registration(service_type, registration)
        return registration

    def register_singletons(self, dependencies: Dict[Type, Any]) -> None:
        """Register multiple singleton dependencies at once.

        Args:
            dependencies: Dictionary mapping service types to either an
                          implementation type or a builder receiving the container.

        Example:
            >>> container.register_singletons({
            ...     DatabaseConfig: lambda c: DatabaseConfig.from_env(),
            ...     DatabaseConnection: PostgresConnection,
            ... })
        """
        for service_type, target in dependencies.items():
            self._register_target(service_type, target, SINGLETON)

    def register_transients(self, dependencies: Dict[Type, Any]) -> None:
        """Register multiple transient dependencies at once.

        Args:
            dependencies: Dictionary mapping service types to either an
                          implementation type or a builder receiving the container.
        """
        for service_type, target in dependencies.items():
            self._register_target(service_type, target, TRANSIENT)

    def register_initializer(self, service_type: Type, initializer: Callable[[Any], None]) -> None:
        """Register a callback run on every new instance of a subclass of service_type.

        Initializers run in registration order.

        Example:
            >>> container.register_initializer(Plugin, lambda plugin: plugin.activate())
        """
        self._ensure_not_locked()
        if not callable(initializer):
            raise RegistrationError(f"The initializer for {type_name(service_type)} must be callable.")
        self._initializers.append((service_type, initializer))

    def add_expression_building(self, handler: ExpressionBuildingHandler) -> None:
        """Register an interception handler.

        Each handler receives :class:`ExpressionBuildingEventArgs` and returns
        the construction node to use downstream (possibly the same one).
        """
        self._ensure_not_locked()
        self._expression_building_handlers.append(handler)

    def get_registration(self, service_type: Any) -> Optional[IRegistration]:
        try:
            return self._registrations.get(service_type)
        except TypeError:
            # Unhashable annotations can never be registered.
            return None

    def get_registration_even_if_invalid(self, service_type: Any) -> Optional[IRegistration]:
        """Return the explicit registration for the type, without building or validating it."""
        return self.get_registration(service_type)

    def get_current_registrations(self) -> Tuple[IRegistration, ...]:
        return tuple(self._registrations.values())

    def get_relationships(self, service_type: Type) -> Tuple[KnownRelationship, ...]:
        """Return the relationships captured by the latest build of a registration."""
        registration = self.get_registration(service_type)
        if registration is None:
            return ()
        return registration.get_relationships()

    def get_initializer(self, implementation_type: Type) -> Optional[Callable[[Any], None]]:
        if not inspect.isclass(implementation_type):
            return None

        initializers = [
            initializer
            for service_type, initializer in self._initializers
            if inspect.isclass(service_type) and _inherits_from(implementation_type, service_type)
        ]
        if not initializers:
            return None
        if len(initializers) == 1:
            return initializers[0]

        def run_initializers(instance: Any) -> None:
            for initializer in initializers:
                initializer(instance)

        return run_initializers

    def on_expression_building(
        self,
        registration: IRegistration,
        service_type: Type,
        implementation_type: Type,
        node: ConstructionNode,
    ) -> ConstructionNode:
        for handler in list(self._expression_building_handlers):
            args = ExpressionBuildingEventArgs(
                registration=registration,
                service_type=service_type,
                implementation_type=implementation_type,
                node=node,
            )
            try:
                result = handler(args)
            except ActivationError:
                raise
            except Exception as e:
                raise ActivationError(
                    f"An expression building handler failed while building {type_name(implementation_type)}. {e}",
                    cause=e,
                ) from e

            if not isinstance(result, ConstructionNode):
                raise ActivationError(
                    f"An expression building handler returned {result!r} while building "
                    f"{type_name(implementation_type)}. Handlers must return a ConstructionNode."
                )
            node = result

        return node

    def build_registration_expression(self, registration: IRegistration) -> ConstructionNode:
        with self._circular_detector.building(registration.implementation_type):
            return registration.build_expression()

    def get_instance(self, service_type: Type[T]) -> T:
        """Resolve and return an instance of the specified type.

        Locks the container. Unregistered concrete classes are auto-wired
        when the options allow it.

        Raises:
            ActivationError: If no registration exists or the instance cannot be built.

        Example:
            >>> user_service = container.get_instance(UserService)
        """
        with self._lock:
            self._locked = True
            registration = self._get_registration_for_instance(service_type)
            factory = self._get_factory(registration)
        return factory()

    def verify(self) -> None:
        """Lock the container and build every registration once.

        Raises:
            ActivationError: For the first registration that cannot be built.
        """
        with self._lock:
            self._locked = True
            registrations = list(self._registrations.values())

        for registration in registrations:
            with self._lock:
                factory = self._get_factory(registration)
            factory()
        logger.debug("Verified %d registrations", len(registrations))

    def _get_registration_for_instance(self, service_type: Type) -> IRegistration:
        registration = self.get_registration(service_type)
        if registration is not None:
            return registration

        registration = self._implicit_registrations.get(service_type)
        if registration is not None:
            return registration

        if self._options.allow_auto_wiring and inspect.isclass(service_type) and get_public_constructors(service_type):
            registration = TRANSIENT.create_registration(service_type, service_type, self)
            self._implicit_registrations[service_type] = registration
            return registration

        raise ActivationError(f"No registration for type {type_name(service_type)} could be found.")

    def _get_factory(self, registration: IRegistration) -> Callable[[], Any]:
        factory = self._factories.get(registration)
        if factory is None:
            node = self.build_registration_expression(registration)
            compiler = FactoryCompiler(compile_factories=self._options.compile_factories)
            factory = compiler.compile(node, registration.implementation_type)
            self._factories[registration] = factory
        return factory

    def _register_target(self, service_type: Type, target: Any, lifestyle: ILifestyle) -> None:
        if inspect.isclass(target):
            self.register(service_type, target, lifestyle)
        else:
            self.register_delegate(service_type, functools.partial(target, self), lifestyle)

    def _add_registration(self, service_type: Any, registration: IRegistration) -> None:
        with self._lock:
            self._ensure_not_locked()
            if service_type in self._registrations and not self._options.allow_overriding_registrations:
                raise RegistrationError(
                    f"Type {type_name(service_type)} has already been registered. "
                    "Set options.allow_overriding_registrations to replace it."
                )
            self._registrations[service_type] = registration
        logger.debug("Registered %s with lifestyle %s", type_name(service_type), registration.lifestyle.name)

    def _ensure_not_locked(self) -> None:
        if self._locked:
            raise RegistrationError(
                "The container can't be changed after the first call to get_instance or verify."
            )

def _inherits_from(implementation_type: Type, service_type: Type) -> bool:
    if service_type in getattr(implementation_type, "__mro__", ()):
        return True
    try:
        return issubclass(implementation_type, service_type)
    except TypeError:
        # Protocols that are not runtime checkable reject issubclass.
        return False
