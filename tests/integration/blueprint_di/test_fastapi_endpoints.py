"""Integration tests for serving container-built services from FastAPI endpoints."""

import pytest

pytest.importorskip("fastapi")

from abc import ABC, abstractmethod

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from blueprint_di import SINGLETON, ActivationError, Container, ContainerOptions
from blueprint_di.infrastructure.fastapi_integration import create_fastapi_dependency, inject
from blueprint_di.infrastructure.testing import TestContainer


class UserRepository(ABC):
    @abstractmethod
    def all(self) -> list: ...


class InMemoryUserRepository(UserRepository):
    def all(self) -> list:
        return ["ada", "grace"]


class RequestCounter:
    def __init__(self):
        self.count = 0

    def hit(self) -> int:
        self.count += 1
        return self.count


class UserService:
    def __init__(self, repository: UserRepository, counter: RequestCounter):
        self.repository = repository
        self.counter = counter

    def list_users(self) -> list:
        self.counter.hit()
        return self.repository.all()


def build_app(container: Container) -> FastAPI:
    app = FastAPI()

    @app.get("/users")
    def list_users(service: UserService = inject(container, UserService)):
        return {"users": service.list_users()}

    @app.get("/hits")
    def hits(counter: RequestCounter = Depends(create_fastapi_dependency(container, RequestCounter))):
        return {"hits": counter.count}

    return app


class TestFastAPIEndpoints:
    """Test complete FastAPI request handling against a container."""

    def test_endpoint_uses_container_graph(self):
        """Test that endpoints receive fully wired services."""
        container = Container()
        container.register(UserRepository, InMemoryUserRepository)
        container.register(RequestCounter, lifestyle=SINGLETON)
        container.register(UserService)
        client = TestClient(build_app(container))

        response = client.get("/users")

        assert response.status_code == 200
        assert response.json() == {"users": ["ada", "grace"]}

    def test_singleton_shared_across_endpoints_and_requests(self):
        """Test that a singleton dependency keeps state across requests."""
        container = Container()
        container.register(UserRepository, InMemoryUserRepository)
        container.register(RequestCounter, lifestyle=SINGLETON)
        client = TestClient(build_app(container))

        client.get("/users")
        client.get("/users")

        assert client.get("/hits").json() == {"hits": 2}

    def test_transient_counter_is_new_per_request(self):
        """Test that a transient dependency starts fresh on each request."""
        container = Container()
        container.register(UserRepository, InMemoryUserRepository)
        client = TestClient(build_app(container))

        client.get("/users")

        assert client.get("/hits").json() == {"hits": 0}

    def test_override_dependencies_in_tests(self):
        """Test that a TestContainer can swap implementations behind an endpoint."""

        class StubRepository(UserRepository):
            def all(self) -> list:
                return ["stub"]

        container = TestContainer()
        container.register(UserRepository, InMemoryUserRepository)
        container.mock_singleton(UserRepository, StubRepository())
        client = TestClient(build_app(container))

        assert client.get("/users").json() == {"users": ["stub"]}

    def test_unresolvable_dependency_raises(self):
        """Test that resolution failures surface from the request."""
        container = Container(ContainerOptions(allow_auto_wiring=False))
        client = TestClient(build_app(container))

        with pytest.raises(ActivationError):
            client.get("/users")
