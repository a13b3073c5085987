"""Tax code models."""
import re
from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

DEFAULT_TAX_ITEM_DESC = "tax"

_COUNTRY_CODE = re.compile(r"^[A-Z]{2}$")


class Country(BaseModel):
    """ISO 3166-1 alpha-2 country code."""
    code: str = Field(..., pattern=r"^[A-Z]{2}$", description="Upper-case country code")

    class Config:
        frozen = True

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["Country"]:
        """Return a country for ``text``, or None when it is not a two-letter code."""
        if text is None:
            return None
        code = text.strip().upper()
        if not _COUNTRY_CODE.match(code):
            return None
        return cls(code=code)

    def __str__(self) -> str:
        return self.code


class DateRange(BaseModel):
    """Calendar-date window, inclusive on the start and exclusive on the end."""
    starting_on: Optional[date] = Field(None, description="First day of the window")
    stopping_on: Optional[date] = Field(None, description="First day after the window")

    class Config:
        frozen = True

    def contains(self, day: date) -> bool:
        """Tell whether ``day`` falls into the window. Open sides always match."""
        if self.starting_on is not None and day < self.starting_on:
            return False
        if self.stopping_on is not None and day >= self.stopping_on:
            return False
        return True


class TaxCode(BaseModel):
    """Named tax rule: a rate, an invoice description and an optional country/date restriction."""
    name: str = Field(..., min_length=1, description="Unique tax code name")
    rate: Decimal = Field(default=Decimal("0"), description="Tax rate as a fraction, e.g. 0.20")
    tax_item_description: str = Field(
        default=DEFAULT_TAX_ITEM_DESC,
        description="Description of the tax items created with this code"
    )
    country: Optional[Country] = Field(None, description="Country the code is restricted to")
    starting_on: Optional[date] = Field(None, description="First day the code applies")
    stopping_on: Optional[date] = Field(None, description="First day the code no longer applies")

    class Config:
        frozen = True
        json_encoders = {
            Decimal: str
        }

    @property
    def validity(self) -> DateRange:
        return DateRange(starting_on=self.starting_on, stopping_on=self.stopping_on)

    def applies_to_country(self, country: Optional[Country]) -> bool:
        """Unrestricted codes apply everywhere, restricted ones only to their own country."""
        if self.country is None:
            return True
        return self.country == country

    def __str__(self) -> str:
        return (
            f"TaxCode[name={self.name}, rate={self.rate}, "
            f"description={self.tax_item_description!r}, country={self.country}, "
            f"startingOn={self.starting_on}, stoppingOn={self.stopping_on}]"
        )
