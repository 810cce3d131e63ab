from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from storelib.base_class_entity import EntityBase
from storelib.constants.constants import ORDERS, ORDER_STATUSES, ORDER_STATUS_PLACED
from storelib.constants.substitute_keys import to_document
from storelib.utils import data as utils_data
from storelib.utils.logger import logger


class Order(EntityBase):
    collection = ORDERS
    record_type = 'order'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, int),
        'user_id': lambda x: utils_data.is_int(x),
        'restaurant_id': lambda x: utils_data.is_int(x),
        'items': lambda x: isinstance(x, list),
        'total': lambda x: utils_data.is_number(x),
        'created_at': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'status': lambda x: isinstance(x, str) and x in ORDER_STATUSES
    }

    def __init__(self, id_=None, **kwargs):
        EntityBase.__init__(self, id_)

        self.user_id: int = utils_data.to_int(kwargs.get('user_id'))
        self.restaurant_id: int = utils_data.to_int(kwargs.get('restaurant_id'))
        self.items: List[Dict] = kwargs.get('items') or []
        self.status: str = kwargs.get('status') or ORDER_STATUS_PLACED
        self.total: Optional[float] = kwargs.get('total')
        self.created_at: str = kwargs.get('created_at')

    @classmethod
    def init_create(cls, fields: Dict, menus: List[Dict] = None, created_at: str = None):
        """
        New order: items priced against the menus, total calculated, status set to placed
        :param fields: {userId, restaurantId, items: [{menuItemId, quantity?, unitPrice?}]}
        :param menus: current menu items of the document
        :param created_at: creation timestamp
        :return:
        Order without id
        """
        order = super(Order, cls).init_create(fields, status=ORDER_STATUS_PLACED, created_at=created_at)
        order._price_items(menus or [])
        order._calculate_total()
        return order

    @classmethod
    def is_valid_status(cls, status) -> bool:
        return cls.required_mutable_fields_validation['status'](status)

    def _price_items(self, menus: List[Dict]):
        priced_items = []
        for raw_item in self.items:
            item = self._to_attributes(raw_item) if isinstance(raw_item, dict) else {}
            menu_item_id = utils_data.to_int(item.get('menu_item_id'))
            unit_price = item.get('unit_price')
            if not utils_data.is_number(unit_price):
                menu_item = next((menu for menu in menus if utils_data.same_id(menu.get('id'), menu_item_id)), None)
                if menu_item is None:
                    logger.warning(f"_price_items ::: menu item {menu_item_id=} not found, unit price set to 0")
                unit_price = utils_data.to_number(menu_item.get('price')) if menu_item else 0
            if unit_price < 0:
                logger.warning(f"_price_items ::: negative {unit_price=} for {menu_item_id=}, unit price set to 0")
                unit_price = 0
            priced_items.append({
                'menu_item_id': menu_item_id,
                'quantity': max(1, utils_data.to_int(item.get('quantity'), 1)),
                'unit_price': utils_data.to_float(unit_price)
            })
        self.items = priced_items

    def _calculate_total(self):
        total = sum(
            (Decimal(str(item['quantity'])) * Decimal(str(item['unit_price'])) for item in self.items),
            Decimal(0)
        )
        self.total = float(total.quantize(utils_data.MONEY_QUANT, rounding=ROUND_HALF_UP))

    def _to_dict(self):
        return {
            'id_': self.id_,
            'user_id': self.user_id,
            'restaurant_id': self.restaurant_id,
            'items': self.items,
            'status': self.status,
            'total': self.total,
            'created_at': self.created_at
        }

    def to_document(self) -> Dict:
        order = super(Order, self).to_document()
        order['items'] = [dict(item) for item in self.items]
        utils_data.substitute_records(order['items'], base_keys=to_document)
        return order
