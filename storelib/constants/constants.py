STORAGE_KEY = 'fd_app_state_v1'

USERS = 'users'
RESTAURANTS = 'restaurants'
MENUS = 'menus'
ORDERS = 'orders'

# High-water mark of issued ids per collection, so deleted ids are never handed out again
ID_SEQUENCES = 'idSequences'

ORDER_STATUS_PLACED = 'placed'
ORDER_STATUS_PREPARING = 'preparing'
ORDER_STATUS_DELIVERING = 'delivering'
ORDER_STATUS_COMPLETED = 'completed'
ORDER_STATUS_CANCELLED = 'cancelled'

ORDER_STATUSES = (
    ORDER_STATUS_PLACED,
    ORDER_STATUS_PREPARING,
    ORDER_STATUS_DELIVERING,
    ORDER_STATUS_COMPLETED,
    ORDER_STATUS_CANCELLED
)

STORE_BACKEND_MEMORY = 'memory'
STORE_BACKEND_FILE = 'file'
STORE_BACKEND_DYNAMODB = 'dynamodb'

DEFAULT_STORE_FILE_PATH = 'store_data.json'
