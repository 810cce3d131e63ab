from typing import Dict, List, Callable, Optional

from storelib.constants.substitute_keys import from_document, to_document
from storelib.utils import exceptions
from storelib.utils.data import substitute_keys, cleanup_dict
from storelib.utils.logger import logger


class EntityBase:
    collection = None
    record_type = ''

    required_immutable_fields_validation = {}
    required_mutable_fields_validation = {}
    optional_fields_validation = {}

    # applied to validated patch values before they are merged
    fields_normalization: Dict[str, Callable] = {}

    def __init__(self, id_=None):
        self.id_: Optional[int] = id_

    @classmethod
    def init_create(cls, fields: Dict, **kwargs):
        """
        Builds a new entity from caller fields in document or python naming
        :return:
        entity without id, id is assigned by the store
        """
        logger.info(f"init_create ::: {cls.record_type=} started")
        kwargs_ = cls._to_attributes(fields or {})
        kwargs_.pop('id_', None)
        return cls(**{**kwargs_, **kwargs})

    @staticmethod
    def _to_attributes(fields: Dict) -> Dict:
        item = cleanup_dict(dict(fields), [None])
        substitute_keys(dict_to_process=item, base_keys=from_document)
        return item

    def _to_dict(self) -> Dict:
        """
        Should be re-implemented in each child class
        :return:
        dict of item's attributes
        """
        return {
            'id_': self.id_
        }

    def to_document(self) -> Dict:
        item = self._to_dict()
        substitute_keys(dict_to_process=item, base_keys=to_document)
        return item

    @classmethod
    def raise_validation_error(cls, key, value):
        message = f'Validation error occurred while validating {cls.record_type} field={key}, {value=}'
        logger.error(f"raise_validation_error ::: {message}")
        raise exceptions.ValidationException(message)

    def _validate_mandatory_fields(self):
        """
        Validates mandatory fields if all fields have correct type to put to the document
        Raise ValidationException in case if a field is not valid
        :return:
        None
        """
        item = self._to_dict()
        for key, validator_func in {
            **self.required_immutable_fields_validation,
            **self.required_mutable_fields_validation
        }.items():
            if validator_func(item.get(key)) is False:
                self.raise_validation_error(key, item.get(key))

    def _validate_optional_fields(self):
        item = self._to_dict()
        for key, validator_func in self.optional_fields_validation.items():
            if item.get(key) is not None and validator_func(item.get(key)) is False:
                self.raise_validation_error(key, item.get(key))

    def validate(self):
        self._validate_mandatory_fields()
        self._validate_optional_fields()

    @classmethod
    def _update_fields_whitelist(cls) -> List:
        return [*cls.required_mutable_fields_validation.keys(), *cls.optional_fields_validation.keys()]

    @classmethod
    def get_validated_patch(cls, patch: Dict) -> Dict:
        """
        Validates fields for update
        Delete field if it is not valid or not allowed to change
        :return:
        Clean patch in document naming
        (all invalid fields will be automatically excluded)
        """
        update_dict = cls._to_attributes(patch or {})
        if update_dict.pop('id_', None) is not None:
            logger.warning(f'get_validated_patch ::: {cls.record_type} id is immutable, ignoring it')
        validation_dict = {**cls.required_mutable_fields_validation, **cls.optional_fields_validation}
        clean_dict = {}
        for key, value in update_dict.items():
            if key in cls._update_fields_whitelist() and validation_dict[key](value) is True:
                normalize = cls.fields_normalization.get(key)
                clean_dict[key] = normalize(value) if normalize else value
            else:
                logger.warning(f'get_validated_patch ::: {key=}, {value=} is not valid, '
                               f'removing from update dict..')
        substitute_keys(dict_to_process=clean_dict, base_keys=to_document)
        return clean_dict
