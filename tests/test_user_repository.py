"""Unit tests for the SQLite user repository."""

# Disabling pylint warning as it is a false positive due to pytest fixtures.
# pylint: disable=redefined-outer-name
import pytest
from pydantic import ValidationError

from src.core.user_models import CreateUserRequest, UpdateUserRequest
from src.services.user_repository import DuplicateEmailError, UserNotFoundError, UserRepository


@pytest.fixture
def repository(tmp_path):
    """
    Creates a temporary file-based DB.
    tmp_path is a built-in pytest fixture that provides a temporary directory
    """
    db_file = tmp_path / "test_users.db"
    return UserRepository(str(db_file))


def _create(repository, name="Alice", email="alice@example.com"):
    return repository.create(CreateUserRequest(name=name, email=email))


def test_create_and_get(repository):
    user = _create(repository)

    assert user.id == 1
    assert user.name == "Alice"
    assert user.email == "alice@example.com"
    assert user.created_at == user.updated_at

    assert repository.get_by_id(user.id) == user
    assert repository.get_by_email("ALICE@example.com ") == user


def test_create_request_validates_and_normalizes():
    req = CreateUserRequest(name="  Bob ", email=" BOB@Example.com")
    assert req.name == "Bob"
    assert req.email == "bob@example.com"

    with pytest.raises(ValidationError):
        CreateUserRequest(name="B", email="bob@example.com")
    with pytest.raises(ValidationError):
        CreateUserRequest(name="Bob", email="not-an-email")


def test_duplicate_email(repository):
    _create(repository)

    with pytest.raises(DuplicateEmailError):
        _create(repository, name="Other Alice")


def test_get_missing(repository):
    with pytest.raises(UserNotFoundError):
        repository.get_by_id(42)
    with pytest.raises(UserNotFoundError):
        repository.get_by_email("ghost@example.com")


def test_get_all_in_creation_order(repository):
    _create(repository, "Alice", "alice@example.com")
    _create(repository, "Bob", "bob@example.com")
    _create(repository, "Carol", "carol@example.com")

    users = repository.get_all()

    assert [u.name for u in users] == ["Alice", "Bob", "Carol"]
    assert repository.count() == 3


def test_update_fields(repository):
    user = _create(repository)

    updated = repository.update(user.id, UpdateUserRequest(name="Alicia"))

    assert updated.name == "Alicia"
    assert updated.email == "alice@example.com"
    assert updated.created_at == user.created_at
    assert updated.updated_at >= user.updated_at

    updated = repository.update(user.id, UpdateUserRequest(email="alicia@example.com"))
    assert updated.email == "alicia@example.com"


def test_update_without_fields_returns_current(repository):
    user = _create(repository)

    assert repository.update(user.id, UpdateUserRequest()) == user


def test_update_missing(repository):
    with pytest.raises(UserNotFoundError):
        repository.update(7, UpdateUserRequest(name="Nobody"))


def test_update_to_taken_email(repository):
    _create(repository, "Alice", "alice@example.com")
    bob = _create(repository, "Bob", "bob@example.com")

    with pytest.raises(DuplicateEmailError):
        repository.update(bob.id, UpdateUserRequest(email="alice@example.com"))


def test_soft_delete_hides_user(repository):
    user = _create(repository)
    _create(repository, "Bob", "bob@example.com")

    repository.delete(user.id)

    assert repository.count() == 1
    assert [u.name for u in repository.get_all()] == ["Bob"]
    with pytest.raises(UserNotFoundError):
        repository.get_by_id(user.id)
    with pytest.raises(UserNotFoundError):
        repository.update(user.id, UpdateUserRequest(name="Back"))
    with pytest.raises(UserNotFoundError):
        repository.delete(user.id)


def test_email_reusable_after_delete(repository):
    """Soft-deleted rows do not hold on to their email."""
    user = _create(repository)
    repository.delete(user.id)

    again = _create(repository)

    assert again.id != user.id
    assert repository.get_by_email("alice@example.com").id == again.id
