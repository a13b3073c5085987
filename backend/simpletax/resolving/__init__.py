"""Built-in tax resolvers."""
from simpletax.resolving.end_date_resolver import InvoiceItemEndDateBasedResolver
from simpletax.resolving.null_resolver import NullTaxResolver
from simpletax.resolving.registry import register_tax_resolver

# Register built-in tax resolvers
register_tax_resolver("NullTaxResolver", NullTaxResolver)
register_tax_resolver("InvoiceItemEndDateBasedResolver", InvoiceItemEndDateBasedResolver)
