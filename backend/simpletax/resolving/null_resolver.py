"""No-op tax resolver."""
from typing import Iterable, Optional
from simpletax.models.invoice import InvoiceItem
from simpletax.models.tax_code import TaxCode
from simpletax.resolving.base import TaxResolver


class NullTaxResolver(TaxResolver):
    """Resolver that never picks any tax code. Used as the safe fallback."""

    def applicable_code_for_item(
        self,
        tax_codes: Iterable[TaxCode],
        item: InvoiceItem
    ) -> Optional[TaxCode]:
        return None
