"""Tax resolver based on the end date of invoice items."""
from datetime import date, datetime, time
from typing import Iterable, Optional
from zoneinfo import ZoneInfo
from simpletax.models.invoice import InvoiceItem
from simpletax.models.tax_code import TaxCode
from simpletax.resolving.base import TaxResolver


def convert_time_zone(day: date, from_zone: ZoneInfo, to_zone: ZoneInfo) -> date:
    """Return the day, in ``to_zone``, of the instant starting ``day`` in ``from_zone``."""
    start_of_day = datetime.combine(day, time.min, tzinfo=from_zone)
    return start_of_day.astimezone(to_zone).date()


class InvoiceItemEndDateBasedResolver(TaxResolver):
    """
    Resolver picking the tax code in effect on the end date of the invoice item.

    Rules:
    - The taxation day is the item end date, or its start date when the item has no end date
    - That day is moved from the account time zone to the taxation time zone
    - Codes restricted to another country than the customer's tax country are skipped
    - The first remaining code, in declaration order, whose window contains the day wins
    """

    def applicable_code_for_item(
        self,
        tax_codes: Iterable[TaxCode],
        item: InvoiceItem
    ) -> Optional[TaxCode]:
        taxation_day = self.taxation_day(item)
        tax_country = self.context.tax_country
        for tax_code in tax_codes:
            if not tax_code.applies_to_country(tax_country):
                continue
            if tax_code.validity.contains(taxation_day):
                return tax_code
        return None

    def taxation_day(self, item: InvoiceItem) -> date:
        day = item.end_date or item.start_date
        account_zone = self.context.account_time_zone
        if account_zone is None:
            return day
        taxation_zone = self.context.config.get_taxation_time_zone()
        return convert_time_zone(day, account_zone, taxation_zone)
