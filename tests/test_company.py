"""Tests for companies and company resolution."""

import pytest

from ledgerpost.domain.errors import ConflictError, NotFoundError, ValidationError
from ledgerpost.utils.company_resolver import resolve_company


def test_create_and_list(company_service):
    acme = company_service.create_company("  Acme Trading ")
    beta = company_service.create_company("Beta Holdings")

    assert company_service.get_company(acme).name == "Acme Trading"
    assert [c.id for c in company_service.list_companies()] == [acme, beta]


def test_create_duplicate(company_service):
    company_service.create_company("Acme Trading")
    with pytest.raises(ConflictError):
        company_service.create_company("Acme Trading")


def test_create_blank(company_service):
    with pytest.raises(ValidationError):
        company_service.create_company("   ")


def test_resolve_company_by_name_and_id(company_service, company):
    assert resolve_company(company_service, "Acme Trading") == company.id
    assert resolve_company(company_service, str(company.id)) == company.id
    assert resolve_company(company_service, company.id) == company.id


def test_resolve_company_not_found(company_service):
    with pytest.raises(NotFoundError, match="'Nobody' not found"):
        resolve_company(company_service, "Nobody")
    with pytest.raises(NotFoundError, match="Company 42 not found"):
        resolve_company(company_service, "42")
