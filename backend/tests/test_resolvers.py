from __future__ import annotations

from datetime import date
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from simpletax.models.invoice import InvoiceItem
from simpletax.models.tax_code import Country, TaxCode
from simpletax.resolving.base import TaxResolver
from simpletax.resolving.end_date_resolver import InvoiceItemEndDateBasedResolver, convert_time_zone
from simpletax.resolving import registry
from simpletax.resolving.null_resolver import NullTaxResolver
from simpletax.resolving.registry import (
    list_tax_resolvers,
    load_tax_resolver,
    register_tax_resolver,
)
from simpletax.services.simple_tax_config import TAX_RESOLVER_PROPERTY, SimpleTaxConfig
from simpletax.services.tax_computation import TaxComputationContext
from simpletax.utils.errors import TaxResolverRegistrationError

OLD_VAT = TaxCode(name="VAT_19_6", rate=Decimal("0.196"), stopping_on=date(2014, 1, 1))
NEW_VAT = TaxCode(name="VAT_20", rate=Decimal("0.20"), starting_on=date(2014, 1, 1))
ANY_VAT = TaxCode(name="VAT_ANY", rate=Decimal("0.10"))
FRENCH_VAT = TaxCode(name="VAT_FR", rate=Decimal("0.20"), country=Country(code="FR"))
GERMAN_VAT = TaxCode(name="VAT_DE", rate=Decimal("0.19"), country=Country(code="DE"))


def item(start_date, end_date=None):
    return InvoiceItem(
        id="item-1", invoice_id="invoice-1", product_name="productA",
        amount=Decimal("100.00"), start_date=start_date, end_date=end_date,
    )


@pytest.fixture
def config(logger):
    return SimpleTaxConfig({
        TAX_RESOLVER_PROPERTY: "InvoiceItemEndDateBasedResolver",
        "simpletax.taxationTimeZone": "UTC",
    }, logger)


@pytest.fixture
def resolver(config):
    return InvoiceItemEndDateBasedResolver(TaxComputationContext(config=config))


def test_null_resolver_never_picks_a_tax_code(config):
    resolver = NullTaxResolver(TaxComputationContext(config=config))

    assert resolver.applicable_code_for_item([ANY_VAT, NEW_VAT], item(date(2015, 1, 1))) is None
    assert resolver.applicable_code_for_item([], item(date(2015, 1, 1))) is None


def test_picks_tax_code_in_effect_on_end_date(resolver):
    tax_codes = [OLD_VAT, NEW_VAT]

    assert resolver.applicable_code_for_item(tax_codes, item(date(2013, 12, 1), date(2013, 12, 31))) == OLD_VAT
    assert resolver.applicable_code_for_item(tax_codes, item(date(2013, 12, 1), date(2014, 1, 1))) == NEW_VAT


def test_uses_start_date_without_end_date(resolver):
    assert resolver.applicable_code_for_item([OLD_VAT, NEW_VAT], item(date(2013, 6, 1))) == OLD_VAT


def test_breaks_ties_by_declaration_order(resolver):
    some_item = item(date(2015, 1, 1), date(2015, 2, 1))

    assert resolver.applicable_code_for_item([NEW_VAT, ANY_VAT], some_item) == NEW_VAT
    assert resolver.applicable_code_for_item([ANY_VAT, NEW_VAT], some_item) == ANY_VAT


def test_picks_nothing_when_no_window_matches(resolver):
    assert resolver.applicable_code_for_item([NEW_VAT], item(date(2013, 1, 1), date(2013, 2, 1))) is None
    assert resolver.applicable_code_for_item([], item(date(2013, 1, 1))) is None


def test_skips_tax_codes_of_other_countries(config):
    resolver = InvoiceItemEndDateBasedResolver(
        TaxComputationContext(config=config, tax_country=Country(code="DE"))
    )

    assert resolver.applicable_code_for_item([FRENCH_VAT, GERMAN_VAT], item(date(2015, 1, 1))) == GERMAN_VAT


def test_skips_restricted_tax_codes_without_tax_country(resolver):
    tax_codes = [FRENCH_VAT, GERMAN_VAT, ANY_VAT]

    assert resolver.applicable_code_for_item(tax_codes, item(date(2015, 1, 1))) == ANY_VAT


def test_moves_end_date_to_taxation_time_zone(config):
    stopping_at_end_of_2013 = TaxCode(name="VAT_OLD", rate=Decimal("0.196"), stopping_on=date(2014, 1, 1))
    paris_account = TaxComputationContext(config=config, account_time_zone=ZoneInfo("Europe/Paris"))
    resolver = InvoiceItemEndDateBasedResolver(paris_account)

    # Midnight in Paris on January 1st is still December 31st in UTC
    chosen = resolver.applicable_code_for_item([stopping_at_end_of_2013], item(date(2013, 12, 1), date(2014, 1, 1)))

    assert chosen == stopping_at_end_of_2013


def test_convert_time_zone():
    assert convert_time_zone(date(2014, 1, 1), ZoneInfo("Europe/Paris"), ZoneInfo("UTC")) == date(2013, 12, 31)
    assert convert_time_zone(date(2014, 1, 1), ZoneInfo("UTC"), ZoneInfo("Europe/Paris")) == date(2014, 1, 1)


def test_built_in_resolvers_are_registered():
    names = list_tax_resolvers()

    assert "NullTaxResolver" in names
    assert "InvoiceItemEndDateBasedResolver" in names


def test_registers_and_loads_custom_resolver(logger, logged, monkeypatch):
    monkeypatch.setattr(registry, "_tax_resolvers", dict(registry._tax_resolvers))

    class AlwaysFirstResolver(TaxResolver):
        def applicable_code_for_item(self, tax_codes, item):
            return next(iter(tax_codes), None)

    register_tax_resolver("AlwaysFirstResolver", AlwaysFirstResolver)

    assert load_tax_resolver("AlwaysFirstResolver", TAX_RESOLVER_PROPERTY, logger) is AlwaysFirstResolver
    assert "AlwaysFirstResolver" in list_tax_resolvers()
    assert logged() == []


def test_rejects_duplicate_registration():
    with pytest.raises(TaxResolverRegistrationError, match="already registered"):
        register_tax_resolver("NullTaxResolver", NullTaxResolver)


def test_rejects_registration_of_non_resolver():
    class Plop:
        def __init__(self, context):
            self.context = context

    with pytest.raises(TaxResolverRegistrationError, match="sub-class"):
        register_tax_resolver("Plop", Plop)


def test_rejects_registration_without_context_constructor():
    class NoContextResolver(TaxResolver):
        def __init__(self):
            super().__init__(None)

        def applicable_code_for_item(self, tax_codes, item):
            return None

    with pytest.raises(TaxResolverRegistrationError, match="constructor"):
        register_tax_resolver("NoContextResolver", NoContextResolver)
    assert "NoContextResolver" not in list_tax_resolvers()
