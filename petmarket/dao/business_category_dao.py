"""BusinessCategoryDAO — business_categories table operations."""

from petmarket.dao.base import BaseDAO
from petmarket.models.business_category import BusinessCategory


class BusinessCategoryDAO(BaseDAO[BusinessCategory]):
    model = BusinessCategory
