from storelib.constants.constants import USERS, RESTAURANTS, MENUS, ORDERS

# Collections a document must hold to be considered present
DOCUMENT_COLLECTIONS = (USERS, RESTAURANTS, MENUS, ORDERS)
