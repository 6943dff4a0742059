"""PetCategoryDAO — pet_categories table operations."""

from petmarket.dao.base import BaseDAO
from petmarket.models.pet_category import PetCategory


class PetCategoryDAO(BaseDAO[PetCategory]):
    model = PetCategory
