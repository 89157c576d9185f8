from typing import Any, Dict, List

# Reference dataset for the course database. Foreign keys hold 1-based positions
# within the parent table's list below; the loader maps them to the ids the
# database actually assigns.

# PHP password_hash() output for "password", accepted as-is by bcrypt.checkpw
SEED_PASSWORD_HASH = "$2y$10$92IXUNpkjO0rOQ5byMi.Ye4oKoEa3Ro9llC/.og/at2.uheWG/igi"

seed_data: Dict[str, List[Dict[str, Any]]] = {
    "categories": [
        {"name": "Electronics", "description": "Electronic devices and gadgets", "parent_id": None},
        {"name": "Computers", "description": "Desktop and laptop computers", "parent_id": 1},
        {"name": "Mobile Phones", "description": "Smartphones and basic phones", "parent_id": 1},
        {"name": "Accessories", "description": "Electronic accessories", "parent_id": 1},
        {"name": "Clothing", "description": "Apparel and fashion", "parent_id": None},
        {"name": "Men Clothing", "description": "Clothing for men", "parent_id": 5},
        {"name": "Women Clothing", "description": "Clothing for women", "parent_id": 5},
        {"name": "Books", "description": "Books and literature", "parent_id": None},
        {"name": "Home & Garden", "description": "Home improvement and gardening", "parent_id": None},
        {"name": "Sports", "description": "Sports equipment and accessories", "parent_id": None},
    ],
    "brands": [
        {"name": "Apple", "description": "Premium electronics and technology"},
        {"name": "Samsung", "description": "Korean electronics manufacturer"},
        {"name": "Dell", "description": "Computer technology company"},
        {"name": "HP", "description": "Hewlett-Packard technology solutions"},
        {"name": "Nike", "description": "Athletic footwear and apparel"},
        {"name": "Adidas", "description": "German sports apparel manufacturer"},
        {"name": "Sony", "description": "Japanese electronics and entertainment"},
        {"name": "Microsoft", "description": "Software and technology corporation"},
        {"name": "Canon", "description": "Japanese imaging and optical products"},
        {"name": "LG", "description": "South Korean electronics company"},
    ],
    "users": [
        {"name": "John Doe", "email": "john@example.com", "password": SEED_PASSWORD_HASH, "age": 30, "phone": "9841234567",
         "address": "123 Main St, Kathmandu", "country": "Nepal", "status": "active", "role": "admin", "last_login": "2024-01-15 10:30:00"},
        {"name": "Jane Smith", "email": "jane@example.com", "password": SEED_PASSWORD_HASH, "age": 28, "phone": "9841234568",
         "address": "456 Oak Ave, Pokhara", "country": "Nepal", "status": "active", "role": "editor", "last_login": "2024-01-14 14:20:00"},
        {"name": "Bob Johnson", "email": "bob@example.com", "password": SEED_PASSWORD_HASH, "age": 35, "phone": "9841234569",
         "address": "789 Pine Rd, Lalitpur", "country": "Nepal", "status": "active", "role": "member", "last_login": "2024-01-13 09:15:00"},
        {"name": "Alice Brown", "email": "alice@example.com", "password": SEED_PASSWORD_HASH, "age": 26, "phone": "9841234570",
         "address": "321 Elm St, Bhaktapur", "country": "Nepal", "status": "active", "role": "subscriber", "last_login": "2024-01-12 16:45:00"},
        {"name": "Charlie Wilson", "email": "charlie@example.com", "password": SEED_PASSWORD_HASH, "age": 42, "phone": "9841234571",
         "address": "654 Maple Dr, Chitwan", "country": "Nepal", "status": "inactive", "role": "member", "last_login": "2023-12-20 11:30:00"},
        {"name": "Diana Davis", "email": "diana@example.com", "password": SEED_PASSWORD_HASH, "age": 31, "phone": "9841234572",
         "address": "987 Birch Ln, Biratnagar", "country": "Nepal", "status": "active", "role": "editor", "last_login": "2024-01-10 13:22:00"},
        {"name": "Edward Miller", "email": "edward@example.com", "password": SEED_PASSWORD_HASH, "age": 29, "phone": "9841234573",
         "address": "147 Cedar St, Butwal", "country": "Nepal", "status": "active", "role": "member", "last_login": "2024-01-11 08:17:00"},
        {"name": "Fiona Taylor", "email": "fiona@example.com", "password": SEED_PASSWORD_HASH, "age": 33, "phone": "9841234574",
         "address": "258 Spruce Ave, Dharan", "country": "Nepal", "status": "active", "role": "member", "last_login": "2024-01-09 15:55:00"},
        {"name": "George Anderson", "email": "george@example.com", "password": SEED_PASSWORD_HASH, "age": 38, "phone": None,
         "address": "369 Willow Rd, Janakpur", "country": "Nepal", "status": "active", "role": "subscriber", "last_login": "2024-01-08 12:40:00"},
        {"name": "Helen Thomas", "email": "helen@example.com", "password": SEED_PASSWORD_HASH, "age": 27, "phone": "9841234576",
         "address": "741 Poplar St, Nepalgunj", "country": "Nepal", "status": "active", "role": "member", "last_login": "2024-01-07 17:33:00"},
    ],
    "products": [
        {"name": "iPhone 14 Pro", "description": "Latest Apple smartphone with advanced camera", "price": "1299.99", "stock": 25,
         "category_id": 3, "brand_id": 1, "sku": "APPL-IP14P-128", "weight": "0.21", "featured": True, "status": "active"},
        {"name": 'MacBook Pro 16"', "description": "High-performance laptop for professionals", "price": "2499.99", "stock": 15,
         "category_id": 2, "brand_id": 1, "sku": "APPL-MBP16-512", "weight": "2.1", "featured": True, "status": "active"},
        {"name": "Samsung Galaxy S23", "description": "Android smartphone with excellent display", "price": "899.99", "stock": 30,
         "category_id": 3, "brand_id": 2, "sku": "SAMS-GS23-256", "weight": "0.19", "featured": True, "status": "active"},
        {"name": "Dell XPS 13", "description": "Ultrabook with premium build quality", "price": "1199.99", "stock": 20,
         "category_id": 2, "brand_id": 3, "sku": "DELL-XPS13-512", "weight": "1.3", "featured": False, "status": "active"},
        {"name": "Sony WH-1000XM5", "description": "Noise-canceling wireless headphones", "price": "399.99", "stock": 50,
         "category_id": 4, "brand_id": 7, "sku": "SONY-WH1000XM5", "weight": "0.25", "featured": True, "status": "active"},
        {"name": "iPad Air", "description": "Powerful tablet for work and creativity", "price": "599.99", "stock": 35,
         "category_id": 1, "brand_id": 1, "sku": "APPL-IPAD-AIR-256", "weight": "0.46", "featured": False, "status": "active"},
        {"name": "Canon EOS R6", "description": "Professional mirrorless camera", "price": "2499.99", "stock": 8,
         "category_id": 1, "brand_id": 9, "sku": "CANON-EOSR6-BODY", "weight": "0.68", "featured": True, "status": "active"},
        {"name": "Nike Air Max 270", "description": "Comfortable running shoes", "price": "149.99", "stock": 100,
         "category_id": 10, "brand_id": 5, "sku": "NIKE-AM270-BLK-10", "weight": "0.4", "featured": False, "status": "active"},
        {"name": "HP Pavilion 15", "description": "Mid-range laptop for everyday use", "price": "699.99", "stock": 40,
         "category_id": 2, "brand_id": 4, "sku": "HP-PAV15-256", "weight": "1.75", "featured": False, "status": "active"},
        {"name": 'Samsung 4K Smart TV 55"', "description": "Ultra HD Smart Television", "price": "799.99", "stock": 12,
         "category_id": 1, "brand_id": 2, "sku": "SAMS-TV55-4K", "weight": "15.8", "featured": True, "status": "active"},
        {"name": "Microsoft Surface Pro 9", "description": "2-in-1 tablet and laptop", "price": "1099.99", "stock": 18,
         "category_id": 2, "brand_id": 8, "sku": "MSFT-SP9-256", "weight": "0.88", "featured": False, "status": "active"},
        {"name": "AirPods Pro", "description": "Wireless earbuds with noise cancellation", "price": "249.99", "stock": 75,
         "category_id": 4, "brand_id": 1, "sku": "APPL-APP-PRO", "weight": "0.06", "featured": True, "status": "active"},
        {"name": "Adidas Ultraboost 22", "description": "Premium running shoes", "price": "179.99", "stock": 60,
         "category_id": 10, "brand_id": 6, "sku": "ADID-UB22-WHT-9", "weight": "0.35", "featured": False, "status": "active"},
        {"name": 'LG OLED TV 65"', "description": "Premium OLED display television", "price": "1999.99", "stock": 5,
         "category_id": 1, "brand_id": 10, "sku": "LG-OLED65-C2", "weight": "22.7", "featured": True, "status": "active"},
        {"name": "Gaming Mechanical Keyboard", "description": "RGB backlit gaming keyboard", "price": "129.99", "stock": 45,
         "category_id": 4, "brand_id": 3, "sku": "DELL-KB-MECH-RGB", "weight": "1.2", "featured": False, "status": "active"},
        {"name": "Wireless Mouse", "description": "Ergonomic wireless mouse", "price": "49.99", "stock": 80,
         "category_id": 4, "brand_id": 4, "sku": "HP-MOUSE-WL-ERG", "weight": "0.15", "featured": False, "status": "active"},
        {"name": "USB-C Hub", "description": "7-in-1 USB-C hub with multiple ports", "price": "79.99", "stock": 65,
         "category_id": 4, "brand_id": 3, "sku": "DELL-HUB-7IN1", "weight": "0.2", "featured": False, "status": "active"},
        {"name": "Bluetooth Speaker", "description": "Portable waterproof speaker", "price": "89.99", "stock": 55,
         "category_id": 4, "brand_id": 7, "sku": "SONY-SPK-BT-WP", "weight": "0.45", "featured": False, "status": "active"},
        {"name": "Fitness Tracker", "description": "Health and fitness monitoring watch", "price": "199.99", "stock": 70,
         "category_id": 10, "brand_id": 2, "sku": "SAMS-FIT-TRK-BLK", "weight": "0.08", "featured": False, "status": "active"},
        {"name": "External Hard Drive 2TB", "description": "Portable storage solution", "price": "129.99", "stock": 35,
         "category_id": 4, "brand_id": 4, "sku": "HP-HDD-2TB-USB3", "weight": "0.3", "featured": False, "status": "active"},
    ],
    "authors": [
        {"name": "J.K. Rowling", "email": "jk@example.com", "bio": "British author, best known for Harry Potter series",
         "birth_date": "1965-07-31", "nationality": "British"},
        {"name": "Stephen King", "email": "stephen@example.com", "bio": "American author of horror, supernatural fiction",
         "birth_date": "1947-09-21", "nationality": "American"},
        {"name": "Agatha Christie", "email": "agatha@example.com", "bio": "English writer known for detective novels",
         "birth_date": "1890-09-15", "nationality": "British"},
        {"name": "Dan Brown", "email": "dan@example.com", "bio": "American author of thriller fiction",
         "birth_date": "1964-06-22", "nationality": "American"},
        {"name": "Paulo Coelho", "email": "paulo@example.com", "bio": "Brazilian lyricist and novelist",
         "birth_date": "1947-08-24", "nationality": "Brazilian"},
    ],
    "books": [
        {"title": "Harry Potter and the Philosopher Stone", "author_id": 1, "isbn": "9780747532699", "price": "12.99",
         "pages": 223, "publication_date": "1997-06-26", "genre": "Fantasy"},
        {"title": "Harry Potter and the Chamber of Secrets", "author_id": 1, "isbn": "9780747538493", "price": "12.99",
         "pages": 251, "publication_date": "1998-07-02", "genre": "Fantasy"},
        {"title": "The Shining", "author_id": 2, "isbn": "9780385121675", "price": "15.99",
         "pages": 447, "publication_date": "1977-01-28", "genre": "Horror"},
        {"title": "It", "author_id": 2, "isbn": "9780670813028", "price": "18.99",
         "pages": 1138, "publication_date": "1986-09-15", "genre": "Horror"},
        {"title": "Murder on the Orient Express", "author_id": 3, "isbn": "9780062693662", "price": "14.99",
         "pages": 256, "publication_date": "1934-01-01", "genre": "Mystery"},
        {"title": "The Da Vinci Code", "author_id": 4, "isbn": "9780385504201", "price": "16.99",
         "pages": 454, "publication_date": "2003-03-18", "genre": "Thriller"},
        {"title": "The Alchemist", "author_id": 5, "isbn": "9780061122415", "price": "13.99",
         "pages": 163, "publication_date": "1988-01-01", "genre": "Fiction"},
    ],
    "customers": [
        {"name": "Premium Customer 1", "email": "premium1@example.com", "membership_level": "premium", "status": "active"},
        {"name": "VIP Customer 1", "email": "vip1@example.com", "membership_level": "vip", "status": "active"},
        {"name": "Basic Customer 1", "email": "basic1@example.com", "membership_level": "basic", "status": "active"},
        {"name": "Premium Customer 2", "email": "premium2@example.com", "membership_level": "premium", "status": "inactive"},
        {"name": "VIP Customer 2", "email": "vip2@example.com", "membership_level": "vip", "status": "active"},
    ],
    # customer_id points into "users"
    "orders": [
        {"customer_id": 1, "order_date": "2024-01-15", "total_amount": "1549.98", "shipping_address": "123 Main St, Kathmandu",
         "payment_method": "credit_card", "payment_status": "paid", "order_status": "delivered", "shipping_fee": "50.00", "discount_amount": "0.00"},
        {"customer_id": 2, "order_date": "2024-01-14", "total_amount": "2749.98", "shipping_address": "456 Oak Ave, Pokhara",
         "payment_method": "paypal", "payment_status": "paid", "order_status": "shipped", "shipping_fee": "75.00", "discount_amount": "100.00"},
        {"customer_id": 3, "order_date": "2024-01-13", "total_amount": "699.99", "shipping_address": "789 Pine Rd, Lalitpur",
         "payment_method": "cash_on_delivery", "payment_status": "pending", "order_status": "processing", "shipping_fee": "25.00", "discount_amount": "25.00"},
        {"customer_id": 1, "order_date": "2024-01-12", "total_amount": "449.98", "shipping_address": "123 Main St, Kathmandu",
         "payment_method": "debit_card", "payment_status": "paid", "order_status": "delivered", "shipping_fee": "30.00", "discount_amount": "0.00"},
        {"customer_id": 4, "order_date": "2024-01-11", "total_amount": "179.99", "shipping_address": "321 Elm St, Bhaktapur",
         "payment_method": "credit_card", "payment_status": "paid", "order_status": "delivered", "shipping_fee": "20.00", "discount_amount": "0.00"},
        {"customer_id": 5, "order_date": "2024-01-10", "total_amount": "1999.99", "shipping_address": "654 Maple Dr, Chitwan",
         "payment_method": "paypal", "payment_status": "paid", "order_status": "shipped", "shipping_fee": "100.00", "discount_amount": "200.00"},
        {"customer_id": 2, "order_date": "2024-01-09", "total_amount": "329.98", "shipping_address": "456 Oak Ave, Pokhara",
         "payment_method": "credit_card", "payment_status": "paid", "order_status": "delivered", "shipping_fee": "25.00", "discount_amount": "0.00"},
        {"customer_id": 6, "order_date": "2024-01-08", "total_amount": "899.99", "shipping_address": "987 Birch Ln, Biratnagar",
         "payment_method": "debit_card", "payment_status": "paid", "order_status": "delivered", "shipping_fee": "40.00", "discount_amount": "0.00"},
        {"customer_id": 3, "order_date": "2024-01-07", "total_amount": "249.99", "shipping_address": "789 Pine Rd, Lalitpur",
         "payment_method": "cash_on_delivery", "payment_status": "pending", "order_status": "pending", "shipping_fee": "15.00", "discount_amount": "0.00"},
        {"customer_id": 7, "order_date": "2024-01-06", "total_amount": "1299.99", "shipping_address": "147 Cedar St, Butwal",
         "payment_method": "credit_card", "payment_status": "paid", "order_status": "shipped", "shipping_fee": "60.00", "discount_amount": "0.00"},
        {"customer_id": 8, "order_date": "2024-01-05", "total_amount": "599.99", "shipping_address": "258 Spruce Ave, Dharan",
         "payment_method": "paypal", "payment_status": "paid", "order_status": "delivered", "shipping_fee": "35.00", "discount_amount": "0.00"},
        {"customer_id": 1, "order_date": "2024-01-04", "total_amount": "149.99", "shipping_address": "123 Main St, Kathmandu",
         "payment_method": "credit_card", "payment_status": "paid", "order_status": "delivered", "shipping_fee": "20.00", "discount_amount": "0.00"},
        {"customer_id": 9, "order_date": "2024-01-03", "total_amount": "2499.99", "shipping_address": "369 Willow Rd, Janakpur",
         "payment_method": "debit_card", "payment_status": "paid", "order_status": "processing", "shipping_fee": "80.00", "discount_amount": "0.00"},
        {"customer_id": 2, "order_date": "2024-01-02", "total_amount": "129.99", "shipping_address": "456 Oak Ave, Pokhara",
         "payment_method": "credit_card", "payment_status": "paid", "order_status": "delivered", "shipping_fee": "15.00", "discount_amount": "0.00"},
        {"customer_id": 10, "order_date": "2024-01-01", "total_amount": "1199.99", "shipping_address": "741 Poplar St, Nepalgunj",
         "payment_method": "paypal", "payment_status": "paid", "order_status": "shipped", "shipping_fee": "55.00", "discount_amount": "50.00"},
        # 2023 orders for the time-window examples
        {"customer_id": 1, "order_date": "2023-12-25", "total_amount": "799.99", "shipping_address": "123 Main St, Kathmandu",
         "payment_method": "credit_card", "payment_status": "paid", "order_status": "delivered", "shipping_fee": "40.00", "discount_amount": "0.00"},
        {"customer_id": 2, "order_date": "2023-12-20", "total_amount": "399.99", "shipping_address": "456 Oak Ave, Pokhara",
         "payment_method": "paypal", "payment_status": "paid", "order_status": "delivered", "shipping_fee": "25.00", "discount_amount": "0.00"},
        {"customer_id": 3, "order_date": "2023-11-15", "total_amount": "1099.99", "shipping_address": "789 Pine Rd, Lalitpur",
         "payment_method": "credit_card", "payment_status": "paid", "order_status": "delivered", "shipping_fee": "50.00", "discount_amount": "0.00"},
        {"customer_id": 4, "order_date": "2023-10-10", "total_amount": "699.99", "shipping_address": "321 Elm St, Bhaktapur",
         "payment_method": "debit_card", "payment_status": "paid", "order_status": "delivered", "shipping_fee": "35.00", "discount_amount": "0.00"},
        {"customer_id": 5, "order_date": "2023-09-05", "total_amount": "2499.99", "shipping_address": "654 Maple Dr, Chitwan",
         "payment_method": "credit_card", "payment_status": "paid", "order_status": "delivered", "shipping_fee": "100.00", "discount_amount": "0.00"},
    ],
    "order_items": [
        {"order_id": 1, "product_id": 1, "quantity": 1, "unit_price": "1299.99", "total_price": "1299.99"},
        {"order_id": 1, "product_id": 12, "quantity": 1, "unit_price": "249.99", "total_price": "249.99"},
        {"order_id": 2, "product_id": 2, "quantity": 1, "unit_price": "2499.99", "total_price": "2499.99"},
        {"order_id": 2, "product_id": 3, "quantity": 1, "unit_price": "899.99", "total_price": "899.99"},
        {"order_id": 3, "product_id": 4, "quantity": 1, "unit_price": "699.99", "total_price": "699.99"},
        {"order_id": 4, "product_id": 5, "quantity": 1, "unit_price": "399.99", "total_price": "399.99"},
        {"order_id": 4, "product_id": 12, "quantity": 1, "unit_price": "249.99", "total_price": "249.99"},
        {"order_id": 5, "product_id": 13, "quantity": 1, "unit_price": "179.99", "total_price": "179.99"},
        {"order_id": 6, "product_id": 14, "quantity": 1, "unit_price": "1999.99", "total_price": "1999.99"},
        # keyboard, mouse, hub, speaker
        {"order_id": 7, "product_id": 15, "quantity": 1, "unit_price": "129.99", "total_price": "129.99"},
        {"order_id": 7, "product_id": 16, "quantity": 1, "unit_price": "49.99", "total_price": "49.99"},
        {"order_id": 7, "product_id": 17, "quantity": 1, "unit_price": "79.99", "total_price": "79.99"},
        {"order_id": 7, "product_id": 18, "quantity": 1, "unit_price": "89.99", "total_price": "89.99"},
        {"order_id": 8, "product_id": 3, "quantity": 1, "unit_price": "899.99", "total_price": "899.99"},
        {"order_id": 9, "product_id": 12, "quantity": 1, "unit_price": "249.99", "total_price": "249.99"},
        {"order_id": 10, "product_id": 1, "quantity": 1, "unit_price": "1299.99", "total_price": "1299.99"},
        {"order_id": 11, "product_id": 6, "quantity": 1, "unit_price": "599.99", "total_price": "599.99"},
        {"order_id": 12, "product_id": 8, "quantity": 1, "unit_price": "149.99", "total_price": "149.99"},
        {"order_id": 13, "product_id": 7, "quantity": 1, "unit_price": "2499.99", "total_price": "2499.99"},
        {"order_id": 14, "product_id": 17, "quantity": 1, "unit_price": "129.99", "total_price": "129.99"},
        {"order_id": 15, "product_id": 4, "quantity": 1, "unit_price": "1199.99", "total_price": "1199.99"},
        {"order_id": 16, "product_id": 10, "quantity": 1, "unit_price": "799.99", "total_price": "799.99"},
        {"order_id": 17, "product_id": 5, "quantity": 1, "unit_price": "399.99", "total_price": "399.99"},
        {"order_id": 18, "product_id": 11, "quantity": 1, "unit_price": "1099.99", "total_price": "1099.99"},
        {"order_id": 19, "product_id": 9, "quantity": 1, "unit_price": "699.99", "total_price": "699.99"},
        {"order_id": 20, "product_id": 7, "quantity": 1, "unit_price": "2499.99", "total_price": "2499.99"},
    ],
    "featured_products": [
        {"product_id": 1, "start_date": "2024-01-01", "end_date": "2024-01-31"},
        {"product_id": 2, "start_date": "2024-01-01", "end_date": "2024-02-29"},
        {"product_id": 3, "start_date": "2024-01-15", "end_date": "2024-02-15"},
        {"product_id": 5, "start_date": "2024-01-01", "end_date": "2024-01-31"},
        {"product_id": 7, "start_date": "2023-12-01", "end_date": "2024-01-31"},
        {"product_id": 10, "start_date": "2024-01-01", "end_date": "2024-03-31"},
        {"product_id": 12, "start_date": "2024-01-01", "end_date": "2024-01-31"},
        {"product_id": 14, "start_date": "2023-12-15", "end_date": "2024-02-15"},
    ],
    "user_preferences": [
        {"user_id": 1, "preferences": {"theme": "dark", "fontSize": "large", "notifications": True, "language": "en"}},
        {"user_id": 2, "preferences": {"theme": "light", "fontSize": "medium", "notifications": False, "language": "en"}},
        {"user_id": 3, "preferences": {"theme": "dark", "fontSize": "small", "notifications": True, "language": "ne"}},
        {"user_id": 4, "preferences": {"theme": "light", "fontSize": "large", "notifications": True, "language": "en"}},
        {"user_id": 5, "preferences": {"theme": "auto", "fontSize": "medium", "notifications": False, "language": "en"}},
    ],
}
