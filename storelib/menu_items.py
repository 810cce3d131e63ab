from storelib.base_class_entity import EntityBase
from storelib.constants.constants import MENUS
from storelib.utils import data as utils_data


class MenuItem(EntityBase):
    collection = MENUS
    record_type = 'menu_item'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, int)
    }

    required_mutable_fields_validation = {
        'restaurant_id': lambda x: utils_data.is_int(x),
        'name': lambda x: isinstance(x, str),
        'price': lambda x: utils_data.is_number(x),
        'description': lambda x: isinstance(x, str)
    }

    fields_normalization = {
        'price': utils_data.to_float
    }

    def __init__(self, id_=None, **kwargs):
        EntityBase.__init__(self, id_)

        self.restaurant_id: int = utils_data.to_int(kwargs.get('restaurant_id'))
        self.name: str = kwargs.get('name')
        self.price: float = utils_data.to_float(kwargs.get('price'))
        self.description: str = kwargs.get('description') or ''

    def _to_dict(self):
        return {
            'id_': self.id_,
            'restaurant_id': self.restaurant_id,
            'name': self.name,
            'price': self.price,
            'description': self.description
        }
