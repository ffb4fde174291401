"""Unit tests for the repository and registry HTTP resources.

Usage
-----
Run with pytest::

    pytest tests/unit/test_api_resources.py

"""

from __future__ import annotations

import falcon
import falcon.testing
import pytest

from appstore.api.app import AppDependencies, create_app
from appstore.config import RegistryConfig
from appstore.registry import RegistryDependencies, RepositoryRegistry
from appstore.repositories.static import StaticSourceFactory
from appstore.store import MemoryKeyValueStore
from tests.helpers.sources import (
    DEFAULT_REPOSITORY,
    FakeSourceFactory,
    FetchError,
    ManualScheduler,
    RepositoryBehaviour,
)

KEY = "app_repositories"
OTHER = "https://apps.example/community"
MANIFEST = {"id": "nextcloud", "name": "Nextcloud"}


def _client(
    store: MemoryKeyValueStore,
    source_factory: object,
) -> falcon.testing.TestClient:
    registry = RepositoryRegistry(
        RegistryDependencies(
            store=store,
            source_factory=source_factory,  # type: ignore[arg-type]
            scheduler=ManualScheduler(),
        ),
        RegistryConfig(default_repository=DEFAULT_REPOSITORY),
    )
    return falcon.testing.TestClient(
        create_app(AppDependencies(registry=registry, manage_lifecycle=False))
    )


@pytest.fixture
def store() -> MemoryKeyValueStore:
    """Return a store holding only the default repository."""
    return MemoryKeyValueStore({KEY: [DEFAULT_REPOSITORY]})


@pytest.fixture
def sources() -> StaticSourceFactory:
    """Return a static backend serving one manifest for the default repo."""
    return StaticSourceFactory({DEFAULT_REPOSITORY: [MANIFEST]})


@pytest.fixture
def client(
    store: MemoryKeyValueStore, sources: StaticSourceFactory
) -> falcon.testing.TestClient:
    """Return a client for an app backed by the static sources."""
    return _client(store, sources)


class TestRepositoriesResource:
    """GET, POST and DELETE on /repositories."""

    def test_get_lists_repositories(self, client: falcon.testing.TestClient) -> None:
        """GET returns the persisted list."""
        result = client.simulate_get("/repositories")

        assert result.status == falcon.HTTP_200, "expected HTTP 200"
        assert result.json == {"repositories": [DEFAULT_REPOSITORY]}

    def test_post_adds_and_refreshes(
        self,
        client: falcon.testing.TestClient,
        store: MemoryKeyValueStore,
        sources: StaticSourceFactory,
    ) -> None:
        """POST appends the URL and refreshes it once."""
        result = client.simulate_post("/repositories", json={"url": OTHER})

        assert result.status == falcon.HTTP_201, "expected HTTP 201"
        assert result.json == {"url": OTHER}, "expected the added URL echoed"
        listed = client.simulate_get("/repositories").json
        assert listed == {"repositories": [DEFAULT_REPOSITORY, OTHER]}
        assert sources.refresh_counts[OTHER] == 1, "expected one refresh"

    def test_post_duplicate_conflicts(self, client: falcon.testing.TestClient) -> None:
        """A listed URL yields 409."""
        result = client.simulate_post(
            "/repositories", json={"url": DEFAULT_REPOSITORY}
        )

        assert result.status == falcon.HTTP_409, "expected HTTP 409"
        assert DEFAULT_REPOSITORY in result.json["description"]

    @pytest.mark.parametrize(
        "body",
        [
            b"",
            b"not json",
            b'{"href": "https://a"}',
            b'{"url": 42}',
            b'{"url": "https://a", "extra": true}',
        ],
    )
    def test_post_rejects_malformed_body(
        self, client: falcon.testing.TestClient, body: bytes
    ) -> None:
        """Bodies that are not a single-URL object yield 400."""
        result = client.simulate_post(
            "/repositories",
            body=body,
            headers={"Content-Type": "application/json"},
        )

        assert result.status == falcon.HTTP_400, f"expected 400 for {body!r}"
        assert result.json["title"] == "Invalid input"

    def test_post_blank_url_is_rejected(
        self, client: falcon.testing.TestClient
    ) -> None:
        """An empty URL is a validation error."""
        result = client.simulate_post("/repositories", json={"url": " "})

        assert result.status == falcon.HTTP_400, "expected HTTP 400"

    def test_post_refresh_failure_is_bad_gateway(
        self, store: MemoryKeyValueStore
    ) -> None:
        """A failing initial refresh yields 502 and keeps the URL."""
        failing = FakeSourceFactory(
            {OTHER: RepositoryBehaviour(refresh_error=FetchError("timed out"))}
        )
        client = _client(store, failing)

        result = client.simulate_post("/repositories", json={"url": OTHER})

        assert result.status == falcon.HTTP_502, "expected HTTP 502"
        assert "timed out" in result.json["description"]
        listed = client.simulate_get("/repositories").json
        assert listed == {"repositories": [DEFAULT_REPOSITORY, OTHER]}

    def test_delete_removes(self, client: falcon.testing.TestClient) -> None:
        """DELETE drops the URL and returns no content."""
        result = client.simulate_delete(
            "/repositories", json={"url": DEFAULT_REPOSITORY}
        )

        assert result.status == falcon.HTTP_204, "expected HTTP 204"
        assert client.simulate_get("/repositories").json == {"repositories": []}

    def test_delete_missing_is_not_found(
        self, client: falcon.testing.TestClient
    ) -> None:
        """Removing an unlisted URL yields 404."""
        result = client.simulate_delete("/repositories", json={"url": OTHER})

        assert result.status == falcon.HTTP_404, "expected HTTP 404"


class TestRegistryResource:
    """GET /registry."""

    def test_aggregates_manifests(self, client: falcon.testing.TestClient) -> None:
        """Manifests are grouped per repository in list order."""
        result = client.simulate_get("/registry")

        assert result.status == falcon.HTTP_200, "expected HTTP 200"
        assert result.json == {"registry": [[MANIFEST]]}

    def test_failed_read_is_omitted(self, store: MemoryKeyValueStore) -> None:
        """Unreadable repositories are left out of the response."""
        sources = FakeSourceFactory(
            {DEFAULT_REPOSITORY: RepositoryBehaviour(read_error=FetchError("gone"))}
        )

        result = _client(store, sources).simulate_get("/registry")

        assert result.json == {"registry": []}, "expected failing repo omitted"


@pytest.mark.parametrize(
    ("method", "path"),
    [("GET", "/repositories"), ("GET", "/registry"), ("DELETE", "/repositories")],
)
def test_uninitialised_list_is_unavailable(method: str, path: str) -> None:
    """Every registry route answers 503 before the list exists."""
    client = _client(MemoryKeyValueStore(), StaticSourceFactory())

    result = client.simulate_request(method, path, json={"url": OTHER})

    assert result.status == falcon.HTTP_503, f"expected 503 for {method} {path}"
    assert result.json["title"] == "Registry not initialised"
