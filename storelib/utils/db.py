import functools
from typing import Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from storelib.utils.logger import logger, log_exception

need_return_capacity = ('put_item', 'get_item', 'delete_item')


def db_call(func):
    """
        should be used for any atomic
        get/put/delete item in the code
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger.debug(f'{func.__name__}:: args={args}, kwargs={kwargs}')
        if func.__name__ in need_return_capacity:
            kwargs.update({'ReturnConsumedCapacity': 'TOTAL'})
        else:
            raise RuntimeError("This decorator only for DynamoDB methods")
        try:
            result = func(*args, **kwargs)
        except (BotoCoreError, ClientError) as e:
            log_exception(e, msg=f'Got exception while trying to {func.__name__}: ')
            raise
        logger.info(f'{func.__name__}:: SUCCESS, consumed capacity={result.get("ConsumedCapacity")}')
        return result

    return wrapper


def get_key(partkey: str, sortkey: str) -> Dict:
    return {
        'partkey': {'S': partkey},
        'sortkey': {'S': sortkey}
    }


def get_db_item(client, table_name: str, partkey: str, sortkey: str) -> Optional[Dict]:
    result = db_call(client.get_item)(
        TableName=table_name,
        Key=get_key(partkey, sortkey),
        ConsistentRead=True
    )

    if 'Item' in result:
        return result['Item']
    logger.info(f"get_db_item ::: record partkey={partkey} sortkey={sortkey} not found")
    return None


def put_db_record(client, table_name: str, item: Dict):
    db_call(client.put_item)(TableName=table_name, Item=item)


def delete_db_record(client, table_name: str, partkey: str, sortkey: str):
    db_call(client.delete_item)(TableName=table_name, Key=get_key(partkey, sortkey))
