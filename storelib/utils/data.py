import json
import math
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from storelib.constants.db_structure import DOCUMENT_COLLECTIONS
from storelib.utils.logger import CustomJSONEncoder

MONEY_QUANT = Decimal('1.00')


def replace_dict_key(item, orig_key, new_key):
    if orig_key in item:
        if new_key not in item:
            item[new_key] = item[orig_key]
        del item[orig_key]


def substitute_keys(dict_to_process: dict, base_keys: dict, opt_dict=None):
    if opt_dict is None:
        opt_dict = {}
    all_keys = {**base_keys, **opt_dict}
    for key, val in all_keys.items():
        if val:
            replace_dict_key(dict_to_process, key, val)
        elif key in dict_to_process.keys():
            dict_to_process.pop(key, None)


def substitute_records(records_to_process, base_keys: dict, opt_dict: dict = None):
    for i, _ in enumerate(records_to_process):
        substitute_keys(
            dict_to_process=records_to_process[i],
            base_keys=base_keys,
            opt_dict=opt_dict
        )


def cleanup_dict(item: dict, list_of_values: list):
    """ Remove fields with values from list_of_values. Supports one nesting.  """

    def sub_clean(sub_item):
        return {
            key: value
            for key, value in sub_item.items()
            if value not in list_of_values
        }

    clean = {}
    for k, v in item.items():
        if isinstance(v, dict):
            nested = sub_clean(v)
            if len(nested.keys()) > 0:
                clean[k] = nested
        elif v not in list_of_values:
            clean[k] = v
    return clean


def is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    return math.isfinite(value)


def is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def to_number(value, default=0):
    """
    Numeric parse of a caller supplied value
    :return:
    int, float or Decimal, or default when the value is not a finite number
    """
    if is_number(value):
        return value
    if isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return default
        return number if number.is_finite() else default
    return default


def to_int(value, default: int = 0) -> int:
    return int(to_number(value, default))


def to_float(value, default: float = 0.0) -> float:
    return float(to_number(value, default))


def same_id(left, right) -> bool:
    left_number, right_number = to_number(left, None), to_number(right, None)
    return left_number is not None and left_number == right_number


def next_id(items: List[Dict], issued: int = 0) -> int:
    return max([to_int(item.get('id')) for item in items] + [to_int(issued)]) + 1


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def is_complete_document(document: Any) -> bool:
    return isinstance(document, dict) and all(
        isinstance(document.get(collection), list) for collection in DOCUMENT_COLLECTIONS
    )


def dump_document(document: Dict) -> str:
    return json.dumps(document, cls=CustomJSONEncoder)


def load_document(raw: Optional[str]) -> Optional[Dict]:
    """
    Parses a serialized document
    :return:
    document dict or None when the value is empty, unparseable or incomplete
    """
    if not raw:
        return None
    try:
        document = json.loads(raw)
    except ValueError:
        return None
    return document if is_complete_document(document) else None


def filter_by_field(items: Iterable[Dict], field: str, value) -> List[Dict]:
    return [item for item in items if same_id(item.get(field), value)]
