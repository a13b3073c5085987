"""Abstract base class for tax resolvers."""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable, Optional
from simpletax.models.invoice import InvoiceItem
from simpletax.models.tax_code import TaxCode

if TYPE_CHECKING:
    from simpletax.services.tax_computation import TaxComputationContext


class TaxResolver(ABC):
    """
    Strategy picking the one tax code that applies to an invoice item.

    A resolver is built with a single tax computation context, once per
    invoice being processed. Classes configured in the ``taxResolver``
    property must subclass this one and keep that one-argument constructor.
    """

    def __init__(self, context: "TaxComputationContext"):
        self.context = context

    @abstractmethod
    def applicable_code_for_item(
        self,
        tax_codes: Iterable[TaxCode],
        item: InvoiceItem
    ) -> Optional[TaxCode]:
        """
        Pick the applicable tax code for an invoice item.

        Args:
            tax_codes: Candidate tax codes, in declaration order
            item: Invoice item being taxed

        Returns:
            The applicable tax code, or None when no tax applies
        """
        pass
