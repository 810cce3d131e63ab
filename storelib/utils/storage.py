"""
Key-value storage media the entity store persists its document into.

Every backend keeps serialized strings under string keys and reports failures of the
underlying medium as StorageReadError / StorageWriteError.
"""
import json
import os
from typing import Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from storelib.constants import constants, keys_structure
from storelib.utils import db as utils_db, exceptions
from storelib.utils.boto_clients import get_dynamodb_client
from storelib.utils.logger import logger


class StorageBase:

    def get(self, key: str) -> Optional[str]:
        """
        Should be re-implemented in each child class
        :return:
        stored value or None if the key is absent
        """
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(StorageBase):

    def __init__(self, values: Dict[str, str] = None):
        self.values: Dict[str, str] = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def delete(self, key: str) -> None:
        self.values.pop(key, None)


class FileStorage(StorageBase):
    """
    JSON file with a key -> value map, rewritten as a whole on every change
    """

    def __init__(self, file_path: str):
        self.file_path = file_path

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.file_path):
            return {}
        try:
            with open(self.file_path, encoding='utf-8') as f:
                values = json.load(f)
        except (OSError, ValueError) as e:
            raise exceptions.StorageReadError(f'Failed to read storage file={self.file_path}: {e}') from e
        if not isinstance(values, dict):
            raise exceptions.StorageReadError(f'Storage file={self.file_path} does not hold a key-value map')
        return values

    def _write_all(self, values: Dict[str, str]) -> None:
        tmp_path = f'{self.file_path}.tmp'
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(values, f)
            os.replace(tmp_path, self.file_path)
        except OSError as e:
            raise exceptions.StorageWriteError(f'Failed to write storage file={self.file_path}: {e}') from e

    def _read_for_update(self) -> Dict[str, str]:
        try:
            return self._read_all()
        except exceptions.StorageReadError as e:
            raise exceptions.StorageWriteError(str(e)) from e

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        values = self._read_for_update()
        values[key] = value
        self._write_all(values)

    def delete(self, key: str) -> None:
        values = self._read_for_update()
        if values.pop(key, None) is not None:
            self._write_all(values)


class DynamoDBStorage(StorageBase):
    """
    One DynamoDB item per key: partkey=<key>, sortkey='document', value in the 'document' attribute
    """
    sk = keys_structure.documents_sk

    def __init__(self, table_name: str, client=None):
        if not table_name:
            raise exceptions.StorageConfigurationError('DynamoDB storage requires a table name')
        self.table_name = table_name
        self.client = client or get_dynamodb_client()

    def _get_pk_sk(self, key: str):
        return keys_structure.documents_pk.format(storage_key=key), self.sk

    def get(self, key: str) -> Optional[str]:
        try:
            item = utils_db.get_db_item(self.client, self.table_name, *self._get_pk_sk(key))
        except (BotoCoreError, ClientError) as e:
            raise exceptions.StorageReadError(f'Failed to read key={key} from table={self.table_name}: {e}') from e
        if item is None:
            return None
        return item.get(keys_structure.document_attribute, {}).get('S')

    def set(self, key: str, value: str) -> None:
        pk, sk = self._get_pk_sk(key)
        item = {
            'partkey': {'S': pk},
            'sortkey': {'S': sk},
            keys_structure.document_attribute: {'S': value}
        }
        try:
            utils_db.put_db_record(self.client, self.table_name, item)
        except (BotoCoreError, ClientError) as e:
            raise exceptions.StorageWriteError(f'Failed to write key={key} to table={self.table_name}: {e}') from e

    def delete(self, key: str) -> None:
        try:
            utils_db.delete_db_record(self.client, self.table_name, *self._get_pk_sk(key))
        except (BotoCoreError, ClientError) as e:
            raise exceptions.StorageWriteError(f'Failed to delete key={key} from table={self.table_name}: {e}') from e


def get_storage(backend: str = None) -> StorageBase:
    backend = (backend or os.environ.get('STORE_BACKEND', constants.STORE_BACKEND_MEMORY)).lower()
    logger.info(f"get_storage ::: {backend=}")
    if backend == constants.STORE_BACKEND_MEMORY:
        return MemoryStorage()
    if backend == constants.STORE_BACKEND_FILE:
        return FileStorage(os.environ.get('STORE_FILE_PATH', constants.DEFAULT_STORE_FILE_PATH))
    if backend == constants.STORE_BACKEND_DYNAMODB:
        return DynamoDBStorage(os.environ.get('GEN_TABLE_NAME'))
    raise exceptions.StorageConfigurationError(f'Unknown storage backend={backend}')
