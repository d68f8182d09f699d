"""Application layer - Circular dependency detection."""

import threading
from contextlib import contextmanager
from typing import Iterator, List, Tuple, Type

from blueprint_di.domain import CircularDependencyError


class CircularDependencyDetector:
    """Detects circular dependencies while construction plans are built.

    Uses thread-local storage to track the implementation types whose plans
    are being built. When a type appears twice in the stack, a circular
    dependency is detected.

    Attributes:
        _local: Thread-local storage for build stacks.
    """

    def __init__(self) -> None:
        """Initialize the circular dependency detector with thread-local storage."""
        self._local = threading.local()

    def _get_stack(self) -> List[Type]:
        if not hasattr(self._local, "stack"):
            self._local.stack = []
        return self._local.stack

    def push(self, implementation_type: Type) -> None:
        """Add a type to the build stack.

        Args:
            implementation_type: The type whose plan is being built.

        Raises:
            CircularDependencyError: If the type is already in the stack.

        Example:
            >>> detector = CircularDependencyDetector()
            >>> detector.push(ServiceA)
            >>> detector.push(ServiceB)
            >>> detector.push(ServiceA)  # Raises CircularDependencyError
        """
        stack = self._get_stack()

        if implementation_type in stack:
            cycle_start_index = stack.index(implementation_type)
            cycle = stack[cycle_start_index:] + [implementation_type]
            raise CircularDependencyError(cycle)

        stack.append(implementation_type)

    def pop(self) -> None:
        """Remove the last type from the build stack."""
        stack = self._get_stack()
        if stack:
            stack.pop()

    @contextmanager
    def building(self, implementation_type: Type) -> Iterator[None]:
        """Keep a type on the build stack for the duration of the block.

        Example:
            >>> with detector.building(UserService):
            ...     plan = registration.build_expression()
        """
        self.push(implementation_type)
        try:
            yield
        finally:
            self.pop()

    def current_chain(self) -> Tuple[Type, ...]:
        return tuple(self._get_stack())

    def clear(self) -> None:
        if hasattr(self._local, "stack"):
            self._local.stack.clear()
