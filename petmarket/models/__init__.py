"""SQLAlchemy ORM models — one file per table."""

from petmarket.models.business import Business
from petmarket.models.business_category import BusinessCategory
from petmarket.models.grooming_service import GroomingService
from petmarket.models.pet import Pet
from petmarket.models.pet_category import PetCategory
from petmarket.models.photography_service import PhotographyService
from petmarket.models.product import Product
from petmarket.models.product_sale import ProductSale
from petmarket.models.transaction import Transaction
from petmarket.models.user import User

__all__ = [
    "User",
    "Product",
    "ProductSale",
    "Pet",
    "PetCategory",
    "Transaction",
    "BusinessCategory",
    "Business",
    "GroomingService",
    "PhotographyService",
]
