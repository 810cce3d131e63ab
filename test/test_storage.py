import os
import uuid

import boto3
import pytest
from botocore.stub import Stubber

from storelib.constants.constants import STORAGE_KEY
from storelib.store import EntityStore
from storelib.utils import exceptions
from storelib.utils.storage import DynamoDBStorage, FileStorage, MemoryStorage, get_storage

test_table_name = 'test-table'

document_key = {
    'partkey': {'S': STORAGE_KEY},
    'sortkey': {'S': 'document'}
}


def get_test_dynamodb_client():
    return boto3.client('dynamodb', region_name='eu-central-1',
                        aws_access_key_id='testing', aws_secret_access_key='testing')


def test_memory_storage():
    storage = MemoryStorage()

    assert storage.get('key') is None
    storage.set('key', 'value')
    assert storage.get('key') == 'value'
    storage.delete('key')
    storage.delete('key')
    assert storage.get('key') is None


def test_file_storage_persists_between_instances(tmp_path):
    file_path = str(tmp_path / 'store.json')

    FileStorage(file_path).set('key', 'value')
    FileStorage(file_path).set('other', 'other value')

    storage = FileStorage(file_path)
    assert storage.get('key') == 'value'
    assert storage.get('other') == 'other value'
    storage.delete('key')
    assert FileStorage(file_path).get('key') is None
    assert not os.path.exists(f'{file_path}.tmp')


def test_file_storage_missing_file(tmp_path):
    assert FileStorage(str(tmp_path / 'missing.json')).get('key') is None


def test_file_storage_corrupt_file(tmp_path):
    file_path = tmp_path / 'store.json'
    file_path.write_text('{corrupt')
    storage = FileStorage(str(file_path))

    with pytest.raises(exceptions.StorageReadError):
        storage.get('key')
    with pytest.raises(exceptions.StorageWriteError):
        storage.set('key', 'value')


def test_file_storage_unwritable_location(tmp_path):
    storage = FileStorage(str(tmp_path / 'missing_dir' / 'store.json'))

    with pytest.raises(exceptions.StorageWriteError):
        storage.set('key', 'value')


def test_store_on_file_storage(tmp_path):
    file_path = str(tmp_path / 'store.json')
    created = EntityStore(FileStorage(file_path)).create_user({'name': 'Charlie', 'email': 'charlie@example.com'})

    assert EntityStore(FileStorage(file_path)).get_user_by_id(created['id']) == created


def test_store_recovers_from_corrupt_file(tmp_path):
    file_path = tmp_path / 'store.json'
    file_path.write_text('{corrupt')

    store = EntityStore(FileStorage(str(file_path)))

    assert [restaurant['name'] for restaurant in store.get_restaurants()] == ['Pasta Palace', 'Sushi Central']


def test_get_storage(monkeypatch, tmp_path):
    monkeypatch.delenv('STORE_BACKEND', raising=False)
    assert isinstance(get_storage(), MemoryStorage)

    monkeypatch.setenv('STORE_BACKEND', 'file')
    monkeypatch.setenv('STORE_FILE_PATH', str(tmp_path / 'env_store.json'))
    storage = get_storage()
    assert isinstance(storage, FileStorage)
    assert storage.file_path == str(tmp_path / 'env_store.json')

    assert isinstance(get_storage('MEMORY'), MemoryStorage)


def test_get_storage_misconfigured(monkeypatch):
    with pytest.raises(exceptions.StorageConfigurationError):
        get_storage('redis')

    monkeypatch.delenv('GEN_TABLE_NAME', raising=False)
    with pytest.raises(exceptions.StorageConfigurationError):
        get_storage('dynamodb')


def test_dynamodb_storage_get():
    client = get_test_dynamodb_client()
    storage = DynamoDBStorage(test_table_name, client=client)
    expected_params = {
        'TableName': test_table_name,
        'Key': document_key,
        'ConsistentRead': True,
        'ReturnConsumedCapacity': 'TOTAL'
    }

    with Stubber(client) as stubber:
        stubber.add_response('get_item', {'Item': {**document_key, 'document': {'S': '{"users": []}'}}},
                             expected_params)
        stubber.add_response('get_item', {}, expected_params)

        assert storage.get(STORAGE_KEY) == '{"users": []}'
        assert storage.get(STORAGE_KEY) is None
        stubber.assert_no_pending_responses()


def test_dynamodb_storage_set_and_delete():
    client = get_test_dynamodb_client()
    storage = DynamoDBStorage(test_table_name, client=client)

    with Stubber(client) as stubber:
        stubber.add_response('put_item', {}, {
            'TableName': test_table_name,
            'Item': {**document_key, 'document': {'S': 'value'}},
            'ReturnConsumedCapacity': 'TOTAL'
        })
        stubber.add_response('delete_item', {}, {
            'TableName': test_table_name,
            'Key': document_key,
            'ReturnConsumedCapacity': 'TOTAL'
        })

        storage.set(STORAGE_KEY, 'value')
        storage.delete(STORAGE_KEY)
        stubber.assert_no_pending_responses()


def test_dynamodb_storage_errors():
    client = get_test_dynamodb_client()
    storage = DynamoDBStorage(test_table_name, client=client)

    with Stubber(client) as stubber:
        stubber.add_client_error('get_item', service_error_code='ResourceNotFoundException')
        stubber.add_client_error('put_item', service_error_code='ProvisionedThroughputExceededException')
        stubber.add_client_error('delete_item', service_error_code='AccessDeniedException')

        with pytest.raises(exceptions.StorageReadError):
            storage.get(STORAGE_KEY)
        with pytest.raises(exceptions.StorageWriteError):
            storage.set(STORAGE_KEY, 'value')
        with pytest.raises(exceptions.StorageWriteError):
            storage.delete(STORAGE_KEY)


@pytest.mark.local_db_test
@pytest.mark.skipif(not (os.environ.get('ENDPOINT_URL') and os.environ.get('GEN_TABLE_NAME')),
                    reason='local DynamoDB is not configured')
def test_store_on_local_dynamodb(request):
    storage = get_storage('dynamodb')
    storage_key = f'test_{uuid.uuid4()}'

    def resource_teardown():
        storage.delete(storage_key)
    request.addfinalizer(resource_teardown)

    store = EntityStore(storage, storage_key=storage_key)
    created = store.create_restaurant({'name': 'Dynamo Diner', 'cuisine': 'Fusion', 'rating': 4.0})

    assert EntityStore(storage, storage_key=storage_key).get_restaurant_by_id(created['id']) == created
