TEMPERATURE_OPTIONS = ["Cold", "Warm"]

MENU_CATEGORIES = [
    {"id": "fast-food", "name": "Fast Food"},
    {"id": "drinks", "name": "Drinks"},
]

DEFAULT_MENU_ITEMS = [
    {"name": "Chips (Regular)", "price": 150, "category": "fast-food", "description": "Crispy potato fries"},
    {"name": "Chips Masala", "price": 200, "category": "fast-food", "description": "Fries with special masala spices"},
    {"name": "Hotdog", "price": 180, "category": "fast-food", "description": "Classic hotdog with toppings"},
    {"name": "Burger", "price": 250, "category": "fast-food", "description": "Beef burger with lettuce, tomato and sauce"},
    {"name": "Sausage", "price": 100, "category": "fast-food", "description": "Grilled beef sausage"},
    {"name": "Chips & Sausage", "price": 220, "category": "fast-food", "description": "Combo of fries and sausage"},
    {"name": "Coca-Cola", "price": 80, "category": "drinks", "options": TEMPERATURE_OPTIONS},
    {"name": "Fanta Orange", "price": 80, "category": "drinks", "options": TEMPERATURE_OPTIONS},
    {"name": "Sprite", "price": 80, "category": "drinks", "options": TEMPERATURE_OPTIONS},
    {"name": "Fanta Blackcurrant", "price": 80, "category": "drinks", "options": TEMPERATURE_OPTIONS},
    {"name": "Fanta Pineapple", "price": 80, "category": "drinks", "options": TEMPERATURE_OPTIONS},
    {"name": "Krest", "price": 80, "category": "drinks", "options": TEMPERATURE_OPTIONS},
    {"name": "Minute Maid Orange", "price": 100, "category": "drinks", "options": TEMPERATURE_OPTIONS},
    {"name": "Minute Maid Apple", "price": 100, "category": "drinks", "options": TEMPERATURE_OPTIONS},
    {"name": "Afia Mango", "price": 100, "category": "drinks", "options": TEMPERATURE_OPTIONS},
    {"name": "Afia Mixed Fruit", "price": 100, "category": "drinks", "options": TEMPERATURE_OPTIONS},
    {"name": "Water (500ml)", "price": 50, "category": "drinks", "description": "Mineral water"},
    {"name": "Tea", "price": 70, "category": "drinks", "description": "Kenyan tea with milk"},
    {"name": "Coffee", "price": 100, "category": "drinks", "description": "Freshly brewed coffee"},
]
