import functools
from typing import Callable
from uuid import uuid4

from storelib.utils.logger import logger


def log_start_finish(func: Callable):
    @functools.wraps(func)
    def result(*args, **kwargs):
        outermost = logger.current_operation_id is None
        if outermost:
            logger.current_operation_id = str(uuid4()).split('-')[0]
        try:
            logger.info(f'{func.__name__} ::: started')
            response = func(*args, **kwargs)
            logger.info(f'{func.__name__} ::: finished')
            return response
        finally:
            if outermost:
                logger.current_operation_id = None
    return result
