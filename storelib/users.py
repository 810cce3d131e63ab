from storelib.base_class_entity import EntityBase
from storelib.constants.constants import USERS


class User(EntityBase):
    collection = USERS
    record_type = 'user'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, int)
    }

    required_mutable_fields_validation = {
        'name': lambda x: isinstance(x, str),
        'email': lambda x: isinstance(x, str)
    }

    def __init__(self, id_=None, **kwargs):
        EntityBase.__init__(self, id_)

        self.name: str = kwargs.get('name')
        self.email: str = kwargs.get('email')

    def _to_dict(self):
        return {
            'id_': self.id_,
            'name': self.name,
            'email': self.email
        }
