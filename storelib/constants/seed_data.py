from typing import Dict

from storelib.constants.constants import USERS, RESTAURANTS, MENUS, ORDERS, ORDER_STATUS_PLACED

SEED_USERS = [
    {'id': 1, 'name': 'Alice Johnson', 'email': 'alice@example.com'},
    {'id': 2, 'name': 'Bob Smith', 'email': 'bob@example.com'}
]

SEED_RESTAURANTS = [
    {'id': 1, 'name': 'Pasta Palace', 'cuisine': 'Italian', 'rating': 4.6},
    {'id': 2, 'name': 'Sushi Central', 'cuisine': 'Japanese', 'rating': 4.8}
]

SEED_MENUS = [
    {'id': 1, 'restaurantId': 1, 'name': 'Spaghetti Carbonara', 'price': 12.99,
     'description': 'Creamy sauce, pancetta, pecorino.'},
    {'id': 2, 'restaurantId': 1, 'name': 'Penne Arrabbiata', 'price': 10.5,
     'description': 'Spicy tomato sauce with garlic and chili.'},
    {'id': 3, 'restaurantId': 2, 'name': 'Salmon Nigiri (2 pcs)', 'price': 6.0,
     'description': 'Fresh salmon over seasoned rice.'},
    {'id': 4, 'restaurantId': 2, 'name': 'California Roll', 'price': 7.5,
     'description': 'Crab, avocado, cucumber.'}
]


def get_seed_orders(created_at: str):
    return [
        {
            'id': 1,
            'userId': 1,
            'restaurantId': 1,
            'items': [
                {'menuItemId': 1, 'quantity': 1, 'unitPrice': 12.99}
            ],
            'status': ORDER_STATUS_PLACED,
            'total': 12.99,
            'createdAt': created_at
        }
    ]


def get_seed_document(created_at: str) -> Dict:
    """
    Builds a fresh seed document, nothing is shared with the module level lists
    :param created_at: timestamp for the seed order
    :return:
    document with all four collections
    """
    return {
        USERS: [dict(user) for user in SEED_USERS],
        RESTAURANTS: [dict(restaurant) for restaurant in SEED_RESTAURANTS],
        MENUS: [dict(menu_item) for menu_item in SEED_MENUS],
        ORDERS: get_seed_orders(created_at)
    }
