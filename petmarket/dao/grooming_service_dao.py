"""GroomingServiceDAO — grooming_services table operations."""

from petmarket.dao.base import BaseDAO
from petmarket.models.grooming_service import GroomingService


class GroomingServiceDAO(BaseDAO[GroomingService]):
    model = GroomingService
