"""Company domain service."""

import logging
from typing import Optional

from ledgerpost.database.base import Database
from ledgerpost.domain.entities import Company
from ledgerpost.domain.errors import ConflictError, ValidationError

logger = logging.getLogger(__name__)


class CompanyService:
    """Service for managing companies."""

    def __init__(self, db: Database):
        """Initialize company service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_company(self, name: str) -> int:
        """Create a new company.

        Args:
            name: Company name

        Returns:
            Company ID

        Raises:
            ValidationError: If the name is blank
            ConflictError: If a company with this name already exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Company name cannot be empty")
        if self.db.get_company_by_name(name) is not None:
            raise ConflictError(f"Company '{name}' already exists")
        company_id = self.db.create_company(name)
        logger.info("Created company %s '%s'", company_id, name)
        return company_id

    def get_company(self, company_id: int) -> Optional[Company]:
        return self.db.get_company(company_id)

    def get_company_by_name(self, name: str) -> Optional[Company]:
        return self.db.get_company_by_name(name)

    def list_companies(self) -> list[Company]:
        return self.db.list_companies()
