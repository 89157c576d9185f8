from . import models
from .models import (
    MODELS,
    MODEL_BY_TABLE,
    User,
    Category,
    Brand,
    Product,
    Order,
    OrderItem,
    Author,
    Book,
    Customer,
    FeaturedProduct,
    UserPreference,
    load_seed,
    row_counts,
    is_empty,
)
from .sessions import SessionStore
from . import queries
