# python attribute name -> document field name
to_document = {
    'id_': 'id',
    'user_id': 'userId',
    'restaurant_id': 'restaurantId',
    'menu_item_id': 'menuItemId',
    'unit_price': 'unitPrice',
    'created_at': 'createdAt'
}

# document field name -> python attribute name
from_document = {value: key for key, value in to_document.items()}
