import pytest

from storelib.utils import exceptions


def create_test_user(store, name='Charlie', email='charlie@example.com'):
    return store.create_user({'name': name, 'email': email})


def test_create_user(store):
    user = create_test_user(store)

    assert user == {'id': 3, 'name': 'Charlie', 'email': 'charlie@example.com'}
    assert store.get_users()[-1] == user


def test_create_user_ignores_given_id(store):
    user = store.create_user({'id': 1, 'name': 'Charlie', 'email': 'charlie@example.com'})
    assert user['id'] == 3


def test_create_user_without_name_is_rejected(store):
    with pytest.raises(exceptions.ValidationException):
        store.create_user({'email': 'nameless@example.com'})

    assert len(store.get_users()) == 2


def test_ids_are_sequential(empty_store):
    ids = [create_test_user(empty_store, name=f'user {i}')['id'] for i in range(5)]
    assert ids == [1, 2, 3, 4, 5]


def test_deleted_id_is_never_reused(empty_store):
    for i in range(3):
        create_test_user(empty_store, name=f'user {i}')

    assert empty_store.delete_user(3) is True
    user = create_test_user(empty_store, name='after delete')

    assert user['id'] == 4
    assert [user['id'] for user in empty_store.get_users()] == [1, 2, 4]


def test_get_user_by_id(store):
    assert store.get_user_by_id(2)['name'] == 'Bob Smith'
    assert store.get_user_by_id('2')['name'] == 'Bob Smith'
    assert store.get_user_by_id(42) is None
    assert store.get_user_by_id(None) is None


def test_update_user(store):
    updated = store.update_user(1, {'name': 'Alice J.'})

    assert updated == {'id': 1, 'name': 'Alice J.', 'email': 'alice@example.com'}
    assert store.get_user_by_id(1) == updated


def test_update_user_id_is_immutable(store):
    updated = store.update_user(1, {'id': 99, 'email': 'alice@new.example.com'})

    assert updated['id'] == 1
    assert updated['email'] == 'alice@new.example.com'
    assert store.get_user_by_id(99) is None


def test_update_user_drops_invalid_fields(store):
    updated = store.update_user(2, {'name': 12, 'email': 'bob@new.example.com', 'unexpected_field': 'value'})

    assert updated == {'id': 2, 'name': 'Bob Smith', 'email': 'bob@new.example.com'}


def test_update_missing_user(store):
    before = store.get_users()

    assert store.update_user(42, {'name': 'Nobody'}) is None
    assert store.get_users() == before


def test_delete_user(store):
    assert store.delete_user(2) is True
    assert store.delete_user(2) is False
    assert [user['id'] for user in store.get_users()] == [1]
