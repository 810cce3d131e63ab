from storelib.base_class_entity import EntityBase
from storelib.constants.constants import RESTAURANTS
from storelib.utils import data as utils_data


class Restaurant(EntityBase):
    collection = RESTAURANTS
    record_type = 'restaurant'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, int)
    }

    required_mutable_fields_validation = {
        'name': lambda x: isinstance(x, str),
        'cuisine': lambda x: isinstance(x, str),
        'rating': lambda x: utils_data.is_number(x)
    }

    fields_normalization = {
        'rating': utils_data.to_float
    }

    def __init__(self, id_=None, **kwargs):
        EntityBase.__init__(self, id_)

        self.name: str = kwargs.get('name')
        self.cuisine: str = kwargs.get('cuisine') or ''
        self.rating: float = utils_data.to_float(kwargs.get('rating'))

    def _to_dict(self):
        return {
            'id_': self.id_,
            'name': self.name,
            'cuisine': self.cuisine,
            'rating': self.rating
        }
