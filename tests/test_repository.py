"""Test cluster config repository implementations."""

import pytest

from mystack_controller.core.errors import ConfigAlreadyExistsError, ConfigNotFoundError
from mystack_controller.infrastructure.memory.repository import InMemoryClusterConfigRepository
from conftest import YAML_DEFAULT_TIMES


@pytest.fixture(params=["memory", "sql"])
def repository(request):
    """Run every test against both implementations."""
    if request.param == "memory":
        return InMemoryClusterConfigRepository()
    return request.getfixturevalue("sql_repo")


class TestClusterConfigRepository:
    """Test repository operations."""

    # -------------------------
    # CREATE TESTS
    # -------------------------

    def test_create_and_get(self, repository):
        repository.create("MyCustomApps", YAML_DEFAULT_TIMES)

        assert repository.get_yaml("MyCustomApps") == YAML_DEFAULT_TIMES

    def test_create_duplicate_fails(self, repository):
        repository.create("MyCustomApps", YAML_DEFAULT_TIMES)

        with pytest.raises(ConfigAlreadyExistsError):
            repository.create("MyCustomApps", "apps: {}")

        assert repository.get_yaml("MyCustomApps") == YAML_DEFAULT_TIMES

    # -------------------------
    # READ TESTS
    # -------------------------

    @pytest.mark.parametrize("name", ["NotExists", ""])
    def test_get_missing(self, repository, name):
        with pytest.raises(ConfigNotFoundError) as exc_info:
            repository.get_yaml(name)

        assert str(exc_info.value) == "no rows in result set"

    def test_list_names_sorted(self, repository):
        repository.create("zeta", "apps: {}")
        repository.create("alpha", "apps: {}")

        assert repository.list_names() == ["alpha", "zeta"]

    def test_list_empty(self, repository):
        assert repository.list_names() == []

    # -------------------------
    # REMOVE TESTS
    # -------------------------

    def test_remove(self, repository):
        repository.create("MyCustomApps", YAML_DEFAULT_TIMES)

        repository.remove("MyCustomApps")

        with pytest.raises(ConfigNotFoundError):
            repository.get_yaml("MyCustomApps")

    def test_remove_missing(self, repository):
        with pytest.raises(ConfigNotFoundError):
            repository.remove("NotExists")

    def test_name_reusable_after_remove(self, repository):
        repository.create("MyCustomApps", "apps: {}")
        repository.remove("MyCustomApps")

        repository.create("MyCustomApps", YAML_DEFAULT_TIMES)

        assert repository.get_yaml("MyCustomApps") == YAML_DEFAULT_TIMES
