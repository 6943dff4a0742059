"""BusinessDAO — businesses table operations."""

from petmarket.dao.base import BaseDAO
from petmarket.models.business import Business


class BusinessDAO(BaseDAO[Business]):
    model = Business
