"""
Entity store: users, restaurants, menus and orders kept in one JSON document behind one storage key.

Every operation is a full read-modify-write of the document. Nothing is cached between calls, so
records handed out are freshly deserialized and callers may mutate them freely.
"""
import os
from datetime import datetime
from typing import Callable, Dict, List, Optional, Type

from storelib.base_class_entity import EntityBase
from storelib.constants import constants, seed_data
from storelib.constants.db_structure import DOCUMENT_COLLECTIONS
from storelib.menu_items import MenuItem
from storelib.orders import Order
from storelib.restaurants import Restaurant
from storelib.users import User
from storelib.utils import data as utils_data, exceptions
from storelib.utils.logger import logger, log_exception
from storelib.utils.operations import log_start_finish
from storelib.utils.storage import StorageBase, get_storage


class EntityStore:

    def __init__(self, storage: StorageBase = None, storage_key: str = None, strict_order_status: bool = None,
                 clock: Callable[[], datetime] = None, initialize: bool = True):
        self.storage: StorageBase = storage if storage is not None else get_storage()
        self.storage_key: str = storage_key or os.environ.get('STORAGE_KEY', constants.STORAGE_KEY)
        if strict_order_status is None:
            strict_order_status = os.environ.get('STRICT_ORDER_STATUS', 'true').lower() != 'false'
        self.strict_order_status: bool = strict_order_status
        self.clock: Callable[[], datetime] = clock or utils_data.utc_now
        if initialize:
            self.ensure_initialized()

    # -------- Document --------

    def _load_state(self) -> Optional[Dict]:
        try:
            raw = self.storage.get(self.storage_key)
        except exceptions.StorageError as e:
            log_exception(e, msg='_load_state ::: failed to read the document, treating it as absent')
            return None
        if raw is None:
            logger.info(f"_load_state ::: no document under key={self.storage_key}")
            return None
        state = utils_data.load_document(raw)
        if state is None:
            logger.warning(f"_load_state ::: document under key={self.storage_key} is malformed, resetting")
        return state

    def _save_state(self, state: Dict) -> None:
        try:
            self.storage.set(self.storage_key, utils_data.dump_document(state))
        except exceptions.StorageError as e:
            log_exception(e, msg='_save_state ::: failed to save the document')

    def _seed_state(self) -> Dict:
        state = seed_data.get_seed_document(created_at=utils_data.to_timestamp(self.clock()))
        self._save_state(state)
        logger.info(f"_seed_state ::: document under key={self.storage_key} seeded")
        return state

    def _get_state(self) -> Dict:
        state = self._load_state()
        if state is None:
            state = self._seed_state()
        return state

    def _set_state(self, mutator: Callable[[Dict], bool]) -> None:
        """
        Read-modify-write of the whole document
        :param mutator: changes the state in place, returns False when nothing changed
        :return:
        None
        """
        state = self._get_state()
        if mutator(state) is not False:
            self._save_state(state)

    @staticmethod
    def _to_app_state(state: Dict) -> Dict:
        """
        Document as handed to callers: the four collections, without the id sequences
        """
        return {collection: state[collection] for collection in DOCUMENT_COLLECTIONS}

    @log_start_finish
    def ensure_initialized(self) -> Dict:
        return self._to_app_state(self._get_state())

    @log_start_finish
    def is_initialized(self) -> bool:
        return self._load_state() is not None

    @log_start_finish
    def reset_to_seed(self) -> Dict:
        try:
            self.storage.delete(self.storage_key)
        except exceptions.StorageError as e:
            log_exception(e, msg='reset_to_seed ::: failed to remove the document')
        return self._to_app_state(self._seed_state())

    @log_start_finish
    def get_app_state(self) -> Dict:
        return self._to_app_state(self._get_state())

    @log_start_finish
    def set_app_state(self, document: Dict) -> Dict:
        if not utils_data.is_complete_document(document):
            message = f'Document must contain the collections {constants.USERS}, {constants.RESTAURANTS}, ' \
                      f'{constants.MENUS} and {constants.ORDERS}'
            logger.error(f"set_app_state ::: {message}")
            raise exceptions.MalformedDocument(message)
        raw = utils_data.dump_document(document)
        try:
            self.storage.set(self.storage_key, raw)
        except exceptions.StorageError as e:
            log_exception(e, msg='set_app_state ::: failed to save the document')
        return self._to_app_state(utils_data.load_document(raw))

    # -------- Generic entity helpers --------

    @staticmethod
    def _get_sequences(state: Dict) -> Dict:
        if not isinstance(state.get(constants.ID_SEQUENCES), dict):
            state[constants.ID_SEQUENCES] = {}
        return state[constants.ID_SEQUENCES]

    def _remember_issued_ids(self, state: Dict) -> None:
        sequences = self._get_sequences(state)
        for collection in DOCUMENT_COLLECTIONS:
            sequences[collection] = utils_data.next_id(state[collection], sequences.get(collection, 0)) - 1

    def _get_all(self, entity_cls: Type[EntityBase]) -> List[Dict]:
        return self._get_state()[entity_cls.collection]

    def _get_by_id(self, entity_cls: Type[EntityBase], id_) -> Optional[Dict]:
        return next((record for record in self._get_all(entity_cls) if utils_data.same_id(record.get('id'), id_)),
                    None)

    def _create(self, entity_cls: Type[EntityBase], fields: Dict, **kwargs) -> Dict:
        created = {}

        def mutator(state):
            records = state[entity_cls.collection]
            sequences = self._get_sequences(state)
            entity = entity_cls.init_create(fields, **{key: value(state) for key, value in kwargs.items()})
            entity.id_ = utils_data.next_id(records, sequences.get(entity_cls.collection, 0))
            entity.validate()
            created.update(entity.to_document())
            records.append(created)
            sequences[entity_cls.collection] = entity.id_

        self._set_state(mutator)
        logger.info(f"_create ::: {entity_cls.record_type} id={created['id']} successfully created")
        return created

    def _update(self, entity_cls: Type[EntityBase], id_, patch: Dict) -> Optional[Dict]:
        clean_patch = entity_cls.get_validated_patch(patch)
        return self._merge(entity_cls, id_, clean_patch)

    def _merge(self, entity_cls: Type[EntityBase], id_, clean_patch: Dict) -> Optional[Dict]:
        updated = {}

        def mutator(state):
            records = state[entity_cls.collection]
            idx = next((i for i, record in enumerate(records) if utils_data.same_id(record.get('id'), id_)), None)
            if idx is None:
                return False
            updated.update({**records[idx], **clean_patch, 'id': records[idx]['id']})
            records[idx] = updated

        self._set_state(mutator)
        if not updated:
            logger.info(f"_merge ::: {entity_cls.record_type} {id_=} not found")
            return None
        logger.info(f"_merge ::: {entity_cls.record_type} {id_=} updated with fields={list(clean_patch)}")
        return updated

    def _delete(self, entity_cls: Type[EntityBase], id_, cascade: Callable[[Dict], bool] = None) -> bool:
        result = {'deleted': False}

        def mutator(state):
            self._remember_issued_ids(state)
            records = state[entity_cls.collection]
            remaining = [record for record in records if not utils_data.same_id(record.get('id'), id_)]
            result['deleted'] = len(remaining) < len(records)
            state[entity_cls.collection] = remaining
            cascaded = cascade(state) if cascade else False
            return result['deleted'] or cascaded

        self._set_state(mutator)
        logger.info(f"_delete ::: {entity_cls.record_type} {id_=} deleted={result['deleted']}")
        return result['deleted']

    # -------- Users --------

    @log_start_finish
    def get_users(self) -> List[Dict]:
        return self._get_all(User)

    @log_start_finish
    def get_user_by_id(self, id_) -> Optional[Dict]:
        return self._get_by_id(User, id_)

    @log_start_finish
    def create_user(self, user: Dict) -> Dict:
        """
        :param user: {name, email}
        :return:
        created user with id
        """
        return self._create(User, user)

    @log_start_finish
    def update_user(self, id_, patch: Dict) -> Optional[Dict]:
        return self._update(User, id_, patch)

    @log_start_finish
    def delete_user(self, id_) -> bool:
        return self._delete(User, id_)

    # -------- Restaurants --------

    @log_start_finish
    def get_restaurants(self) -> List[Dict]:
        return self._get_all(Restaurant)

    @log_start_finish
    def get_restaurant_by_id(self, id_) -> Optional[Dict]:
        return self._get_by_id(Restaurant, id_)

    @log_start_finish
    def create_restaurant(self, restaurant: Dict) -> Dict:
        """
        :param restaurant: {name, cuisine, rating}
        :return:
        created restaurant with id
        """
        return self._create(Restaurant, restaurant)

    @log_start_finish
    def update_restaurant(self, id_, patch: Dict) -> Optional[Dict]:
        return self._update(Restaurant, id_, patch)

    @log_start_finish
    def delete_restaurant(self, id_) -> bool:
        """
        Deletes a restaurant together with its menu items.
        Its orders which are not completed yet are cancelled, orders themselves are kept.
        :return:
        True if the restaurant was deleted
        """

        def cascade(state) -> bool:
            menus = state[constants.MENUS]
            state[constants.MENUS] = [menu for menu in menus if not utils_data.same_id(menu.get('restaurantId'), id_)]
            cancelled = 0
            for order in state[constants.ORDERS]:
                if utils_data.same_id(order.get('restaurantId'), id_) and \
                        order.get('status') not in (constants.ORDER_STATUS_COMPLETED,
                                                    constants.ORDER_STATUS_CANCELLED):
                    order['status'] = constants.ORDER_STATUS_CANCELLED
                    cancelled += 1
            removed = len(menus) - len(state[constants.MENUS])
            logger.info(f"delete_restaurant ::: restaurant {id_=} cascade removed {removed} menu items, "
                        f"cancelled {cancelled} orders")
            return removed > 0 or cancelled > 0

        return self._delete(Restaurant, id_, cascade=cascade)

    # -------- Menus --------

    @log_start_finish
    def get_menus(self) -> List[Dict]:
        return self._get_all(MenuItem)

    @log_start_finish
    def get_menus_by_restaurant(self, restaurant_id) -> List[Dict]:
        return utils_data.filter_by_field(self._get_all(MenuItem), 'restaurantId', restaurant_id)

    @log_start_finish
    def get_menu_item_by_id(self, id_) -> Optional[Dict]:
        return self._get_by_id(MenuItem, id_)

    @log_start_finish
    def create_menu_item(self, menu_item: Dict) -> Dict:
        """
        :param menu_item: {restaurantId, name, price, description}
        :return:
        created menu item with id
        """
        created = self._create(MenuItem, menu_item)
        if self.get_restaurant_by_id(created['restaurantId']) is None:
            logger.warning(f"create_menu_item ::: restaurant id={created['restaurantId']} does not exist")
        return created

    @log_start_finish
    def update_menu_item(self, id_, patch: Dict) -> Optional[Dict]:
        return self._update(MenuItem, id_, patch)

    @log_start_finish
    def delete_menu_item(self, id_) -> bool:
        return self._delete(MenuItem, id_)

    # -------- Orders --------

    @log_start_finish
    def get_orders(self) -> List[Dict]:
        return self._get_all(Order)

    @log_start_finish
    def get_orders_by_user(self, user_id) -> List[Dict]:
        return utils_data.filter_by_field(self._get_all(Order), 'userId', user_id)

    @log_start_finish
    def get_order_by_id(self, id_) -> Optional[Dict]:
        return self._get_by_id(Order, id_)

    @log_start_finish
    def create_order(self, order: Dict) -> Dict:
        """
        Creates a new order.
        Missing unit prices are looked up from the menu (0 if the menu item no longer exists),
        quantity defaults to 1.
        :param order: {userId, restaurantId, items: [{menuItemId, quantity?, unitPrice?}]}
        :return:
        created order with id, total, status 'placed' and createdAt
        """
        return self._create(
            Order,
            order,
            menus=lambda state: state[constants.MENUS],
            created_at=lambda state: utils_data.to_timestamp(self.clock())
        )

    @log_start_finish
    def update_order_status(self, id_, status: str) -> Optional[Dict]:
        if not Order.is_valid_status(status):
            logger.warning(f"update_order_status ::: invalid order {status=}, allowed={constants.ORDER_STATUSES}")
            if self.strict_order_status:
                raise exceptions.InvalidOrderStatus(f'Invalid order status={status}')
        return self._merge(Order, id_, {'status': status})

    @log_start_finish
    def delete_order(self, id_) -> bool:
        return self._delete(Order, id_)
