from typing import List, Optional, Type


class DIException(Exception):
    """Base exception for DI-related errors."""


class ActivationError(DIException):
    """Raised when a construction plan cannot be built, compiled or executed.

    This occurs when:
    - No constructor of the implementation qualifies.
    - A constructor parameter cannot be resolved.
    - A creator delegate returns None.
    - An initializer or interception handler fails.
    - A construction plan cannot be compiled into a factory.

    Attributes:
        cause: The underlying exception, if any. Also chained as ``__cause__``.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class CircularDependencyError(ActivationError):
    """Raised when a circular dependency is detected while building plans.

    Attributes:
        dependency_chain: List of types involved in the circular dependency.
    """

    def __init__(self, dependency_chain: List[Type]) -> None:
        self.dependency_chain = dependency_chain
        message = f"Circular dependency detected: {' -> '.join([cls.__name__ for cls in dependency_chain])}"
        super().__init__(message)


class RegistrationError(DIException):
    """Raised for invalid registrations.

    This occurs when:
    - Registering after the container was locked.
    - Registering the same service type twice without allowing overrides.
    - Registering an implementation that is not a subclass of its service type.
    """
