"""PhotographyServiceDAO — photography_services table operations."""

from petmarket.dao.base import BaseDAO
from petmarket.models.photography_service import PhotographyService


class PhotographyServiceDAO(BaseDAO[PhotographyService]):
    model = PhotographyService
