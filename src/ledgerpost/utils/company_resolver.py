"""Utility for resolving company names to IDs."""

from ledgerpost.domain.company import CompanyService
from ledgerpost.domain.errors import NotFoundError, company_not_found


def resolve_company(company_service: CompanyService, company: str | int) -> int:
    """Resolve company name or ID to company ID.

    Args:
        company_service: CompanyService instance
        company: Company name (str) or ID (int or string representation of int)

    Returns:
        Company ID

    Raises:
        NotFoundError: If the company is not found
    """
    if isinstance(company, int) or str(company).strip().isdigit():
        company_id = int(company)
        if company_service.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))
        return company_id

    found = company_service.get_company_by_name(str(company).strip())
    if found is None:
        raise NotFoundError(company_not_found(str(company)))
    return found.id
