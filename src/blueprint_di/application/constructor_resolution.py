"""Application layer - Constructor resolution behaviors."""

import inspect
import logging
from typing import Any, Callable, List, Optional, Tuple, Type, TypeVar, get_type_hints

from blueprint_di.domain import (
    ActivationError,
    ConstructorDescriptor,
    IConstructorResolutionBehavior,
    IContainer,
    ParameterDescriptor,
    type_name,
)

logger = logging.getLogger(__name__)

F = TypeVar("F")

INJECTION_CONSTRUCTOR_ATTRIBUTE = "__blueprint_injection_constructor__"

_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def injection_constructor(func: F) -> F:
    """Mark a classmethod or staticmethod as an alternate public constructor.

    Example:
        >>> class Repository:
        ...     def __init__(self, connection: Connection, cache: Cache):
        ...         ...
        ...
        ...     @classmethod
        ...     @injection_constructor
        ...     def without_cache(cls, connection: Connection) -> "Repository":
        ...         return cls(connection, NullCache())
    """
    target = func.__func__ if isinstance(func, (classmethod, staticmethod)) else func
    setattr(target, INJECTION_CONSTRUCTOR_ATTRIBUTE, True)
    return func


def _is_marked(member: Any) -> bool:
    if not isinstance(member, (classmethod, staticmethod)):
        return False
    return getattr(member.__func__, INJECTION_CONSTRUCTOR_ATTRIBUTE, False)


def _is_constructible(implementation_type: Type) -> bool:
    if not inspect.isclass(implementation_type):
        return False
    if inspect.isabstract(implementation_type):
        return False
    return not getattr(implementation_type, "_is_protocol", False)


def _describe_parameters(
    implementation_type: Type,
    constructor_name: str,
    function: Callable[..., Any],
    skip_first: bool,
) -> Tuple[ParameterDescriptor, ...]:
    signature = inspect.signature(function)
    try:
        type_hints = get_type_hints(function)
    except Exception as e:
        logger.debug("Could not resolve type hints of %s, using raw annotations: %s", function, e)
        type_hints = {}

    parameters: List[ParameterDescriptor] = []
    signature_parameters = list(signature.parameters.values())
    if skip_first and signature_parameters:
        signature_parameters = signature_parameters[1:]

    for param in signature_parameters:
        if param.kind in _SKIPPED_KINDS:
            continue

        annotation = type_hints.get(param.name, param.annotation)
        if annotation is inspect.Parameter.empty:
            annotation = None

        parameters.append(
            ParameterDescriptor(
                declaring_type=implementation_type,
                constructor_name=constructor_name,
                name=param.name,
                position=len(parameters),
                kind=param.kind,
                annotation=annotation,
                default=param.default,
            )
        )
    return tuple(parameters)


def describe_primary_constructor(implementation_type: Type) -> ConstructorDescriptor:
    """Describe the class call itself, as declared by ``__init__``."""
    init = implementation_type.__init__
    if init is object.__init__:
        parameters: Tuple[ParameterDescriptor, ...] = ()
    else:
        parameters = _describe_parameters(implementation_type, "__init__", init, skip_first=True)

    return ConstructorDescriptor(
        implementation_type=implementation_type,
        name="__init__",
        factory=implementation_type,
        parameters=parameters,
    )


def get_public_constructors(implementation_type: Type) -> Tuple[ConstructorDescriptor, ...]:
    """Enumerate the public constructors of an implementation type.

    The primary constructor comes first, followed by the public members
    marked with :func:`injection_constructor`, in class-body order.
    Abstract classes and protocols have no public constructors.

    Args:
        implementation_type: The type to inspect.

    Returns:
        The public constructors, in enumeration order.
    """
    if not _is_constructible(implementation_type):
        return ()

    constructors = [describe_primary_constructor(implementation_type)]
    for name, member in vars(implementation_type).items():
        if name.startswith("_") or not _is_marked(member):
            continue
        factory = getattr(implementation_type, name)
        constructors.append(
            ConstructorDescriptor(
                implementation_type=implementation_type,
                name=name,
                factory=factory,
                parameters=_describe_parameters(implementation_type, name, factory, skip_first=False),
            )
        )
    return tuple(constructors)


class DefaultConstructorResolutionBehavior(IConstructorResolutionBehavior):
    """Selects the single public constructor of an implementation.

    Fails when the implementation exposes no public constructor, or more than one.
    """

    def get_constructor(self, service_type: Type, implementation_type: Type) -> ConstructorDescriptor:
        constructors = get_public_constructors(implementation_type)

        if not constructors:
            raise ActivationError(_no_public_constructor_message(implementation_type))

        if len(constructors) > 1:
            raise ActivationError(
                f"For the container to be able to create {type_name(implementation_type)}, it should contain "
                f"exactly one public constructor, but it has {len(constructors)}."
            )

        return constructors[0]


class MostResolvableParametersConstructorResolutionBehavior(IConstructorResolutionBehavior):
    """Selects the constructor with the most parameters that can be resolved.

    During the registration phase the longest constructor is returned
    unconditionally, because dependencies might not be registered yet.
    Once the container is locked, constructors are tried longest first and
    the first whose parameters are all resolvable wins. Ties keep the
    enumeration order.

    Attributes:
        _container: The container queried for registrations and its phase.

    Example:
        >>> container = Container()
        >>> container.options.constructor_resolution_behavior = (
        ...     MostResolvableParametersConstructorResolutionBehavior(container)
        ... )
    """

    def __init__(self, container: IContainer) -> None:
        self._container = container

    @property
    def _is_called_during_registration_phase(self) -> bool:
        return not self._container.is_locked()

    def get_constructor(self, service_type: Type, implementation_type: Type) -> ConstructorDescriptor:
        constructor = self._get_constructor_or_none(implementation_type)

        if constructor is not None:
            return constructor

        raise ActivationError(self._build_exception_message(implementation_type))

    def _get_constructor_or_none(self, implementation_type: Type) -> Optional[ConstructorDescriptor]:
        # sorted() is stable, so equal lengths keep their enumeration order.
        constructors = sorted(
            get_public_constructors(implementation_type),
            key=lambda constructor: constructor.parameter_count,
            reverse=True,
        )

        for constructor in constructors:
            if self._is_called_during_registration_phase:
                return constructor
            if all(self._can_be_resolved(parameter) for parameter in constructor.parameters):
                return constructor

        return None

    def _can_be_resolved(self, parameter: ParameterDescriptor) -> bool:
        if self._container.get_registration(parameter.annotation) is not None:
            return True
        return self._can_build_parameter_node(parameter)

    def _can_build_parameter_node(self, parameter: ParameterDescriptor) -> bool:
        behavior = self._container.options.parameter_resolution_behavior
        try:
            behavior.build_parameter_node(parameter)
        except ActivationError as e:
            logger.debug("Parameter %s is not resolvable: %s", parameter, e)
            return False
        return True

    @staticmethod
    def _build_exception_message(implementation_type: Type) -> str:
        if not get_public_constructors(implementation_type):
            return _no_public_constructor_message(implementation_type)

        return (
            f"For the container to be able to create {type_name(implementation_type)}, it should contain a "
            "public constructor that only contains parameters that can be resolved."
        )


def _no_public_constructor_message(implementation_type: Type) -> str:
    return (
        f"For the container to be able to create {type_name(implementation_type)}, it should contain at least one "
        "public constructor."
    )
