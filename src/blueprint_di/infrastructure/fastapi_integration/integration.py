from typing import Any, Callable, Type, TypeVar

from fastapi import Depends

from blueprint_di.domain import IContainer, type_name

T = TypeVar("T")


def create_fastapi_dependency(container: IContainer, service_type: Type[T]) -> Callable[[], T]:
    """Create a FastAPI Depends() callable that resolves from the container.

    The instance lifetime follows the registration's lifestyle. The first
    request locks the container.

    Args:
        container: The container to resolve from.
        service_type: The type to resolve when the dependency is called.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> container = Container()
        >>> container.register(UserRepository, SqlUserRepository, SINGLETON)
        >>>
        >>> get_user_repo = create_fastapi_dependency(container, UserRepository)
        >>>
        >>> @app.get("/users")
        >>> async def list_users(repo: UserRepository = Depends(get_user_repo)):
        ...     return await repo.get_all()
    """

    def dependency() -> T:
        """Resolve the dependency from the container."""
        return container.get_instance(service_type)

    dependency.__name__ = f"get_{type_name(service_type)}"
    return dependency


def inject(container: IContainer, service_type: Type[T]) -> Any:
    """Shortcut for ``Depends(create_fastapi_dependency(container, service_type))``.

    Example:
        >>> @app.get("/users")
        >>> async def list_users(service: UserService = inject(container, UserService)):
        ...     return await service.list_users()
    """
    return Depends(create_fastapi_dependency(container, service_type))
