"""Tax item computation for invoices."""
import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo
from simpletax.models.invoice import InvoiceItem, TaxItem
from simpletax.models.tax_code import Country, TaxCode
from simpletax.resolving.base import TaxResolver
from simpletax.services.simple_tax_config import SimpleTaxConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxComputationContext:
    """Everything a tax resolver needs to know about the invoice being taxed."""
    config: SimpleTaxConfig
    account_time_zone: Optional[ZoneInfo] = None
    tax_country: Optional[Country] = None


def round_tax_amount(amount: Decimal, precision: int) -> Decimal:
    with localcontext() as ctx:
        # quantize fails when the result has more digits than the context precision
        ctx.prec = max(ctx.prec, amount.adjusted() + precision + 2)
        return amount.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)


class TaxCalculator:
    """Computes the tax items of an invoice with the configured tax resolver."""

    def __init__(self, context: TaxComputationContext):
        self.context = context
        self.config = context.config

    def create_resolver(self) -> TaxResolver:
        constructor = self.config.get_tax_resolver_constructor()
        return constructor(self.context)

    def candidate_tax_codes(self, item: InvoiceItem) -> Iterable[TaxCode]:
        """Tax codes set on the item itself win over the ones configured for its product."""
        if item.tax_codes and item.tax_codes.strip():
            return self.config.find_tax_codes(item.tax_codes, f"from invoice item [{item.id}]")
        if item.product_name is None:
            return ()
        return self.config.get_configured_tax_codes(item.product_name)

    def compute_tax_items(self, items: Iterable[InvoiceItem]) -> List[TaxItem]:
        """
        Compute tax items for invoice items.

        One resolver is created per call, so a call is expected to cover the
        items of a single invoice. Items for which the resolver picks no tax
        code get no tax item.

        Args:
            items: Taxable invoice items

        Returns:
            Tax items, in the order of the invoice items they apply to
        """
        resolver = self.create_resolver()
        precision = self.config.get_tax_amount_precision()

        tax_items = []
        for item in items:
            tax_code = resolver.applicable_code_for_item(self.candidate_tax_codes(item), item)
            if tax_code is None:
                logger.debug("No tax code applies to invoice item %s", item.id)
                continue
            tax_items.append(TaxItem(
                linked_item_id=item.id,
                invoice_id=item.invoice_id,
                tax_code=tax_code.name,
                description=tax_code.tax_item_description,
                rate=tax_code.rate,
                amount=round_tax_amount(item.amount * tax_code.rate, precision),
            ))
        return tax_items
