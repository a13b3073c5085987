"""Tax configuration built from a flat property map."""
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from simpletax.models.tax_code import DEFAULT_TAX_ITEM_DESC, Country, TaxCode
from simpletax.resolving.null_resolver import NullTaxResolver
from simpletax.resolving.registry import TaxResolverFactory, load_tax_resolver

# Property keys
PROPERTY_PREFIX = "simpletax."
TAX_RESOLVER_PROPERTY = PROPERTY_PREFIX + "taxResolver"
TAX_CODES_PREFIX = PROPERTY_PREFIX + "taxCodes."
PRODUCTS_PREFIX = PROPERTY_PREFIX + "products."
TAXATION_TIME_ZONE_PROPERTY = PROPERTY_PREFIX + "taxationTimeZone"
TAX_AMOUNT_PRECISION_PROPERTY = PROPERTY_PREFIX + "taxItem.amount.precision"

# Tax code sub-properties
RATE = "rate"
TAX_ITEM_DESCRIPTION = "taxItem.description"
STARTING_ON = "startingOn"
STOPPING_ON = "stoppingOn"
COUNTRY = "country"
TAX_CODE_FIELDS = (TAX_ITEM_DESCRIPTION, STARTING_ON, STOPPING_ON, COUNTRY, RATE)

DEFAULT_TAX_AMOUNT_PRECISION = 2
MAX_TAX_AMOUNT_PRECISION = 100
DEFAULT_TAXATION_TIME_ZONE = "UTC"


def split_names(names_csv: Optional[str]) -> List[str]:
    """Split a comma-separated list of names, dropping blanks and duplicates but keeping order."""
    if not names_csv:
        return []
    names = [name.strip() for name in names_csv.split(",")]
    return list(dict.fromkeys(name for name in names if name))


def parse_rate(text: Optional[str]) -> Decimal:
    """Parse a tax rate. Anything that is not a finite, non-negative decimal gives zero."""
    if text is None:
        return Decimal("0")
    try:
        rate = Decimal(text.strip())
    except InvalidOperation:
        return Decimal("0")
    if not rate.is_finite() or rate < 0:
        return Decimal("0")
    return rate


def parse_date(text: Optional[str]) -> Optional[date]:
    """Parse a YYYY-MM-DD calendar date, or return None."""
    if not text or not text.strip():
        return None
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        return None


def parse_time_zone(text: Optional[str]) -> ZoneInfo:
    """Parse an IANA time zone name, defaulting to UTC."""
    if text and text.strip():
        try:
            return ZoneInfo(text.strip())
        except (ZoneInfoNotFoundError, ValueError, OSError):
            pass
    return ZoneInfo(DEFAULT_TAXATION_TIME_ZONE)


def parse_precision(text: Optional[str]) -> int:
    """Parse a number of decimal digits between 0 and 100, defaulting to the platform precision."""
    if not text or not text.strip():
        return DEFAULT_TAX_AMOUNT_PRECISION
    try:
        precision = int(text.strip())
    except ValueError:
        return DEFAULT_TAX_AMOUNT_PRECISION
    if precision < 0 or precision > MAX_TAX_AMOUNT_PRECISION:
        return DEFAULT_TAX_AMOUNT_PRECISION
    return precision


class SimpleTaxConfig:
    """
    Tax configuration: tax codes, product mappings and the tax resolver to use.

    Everything is parsed and validated eagerly in the constructor, which never
    fails on bad input. Problems are reported through ``logger`` and the
    faulty entries are skipped or defaulted, so that the resulting object is
    always usable. Once built, a configuration is read-only and can be shared
    between concurrent invoice computations.

    Recognized properties (all prefixed with ``simpletax.``):
    - ``taxResolver``: registered name or dotted path of the tax resolver class
    - ``taxCodes.<name>[.rate|.taxItem.description|.startingOn|.stoppingOn|.country]``
    - ``products.<product>``: comma-separated names of candidate tax codes
    - ``taxationTimeZone``: time zone of tax code validity dates
    - ``taxItem.amount.precision``: decimal digits of computed tax amounts
    """

    def __init__(self, properties: Mapping[str, str], logger: Optional[logging.Logger] = None):
        if properties is None:
            raise TypeError("properties must not be None")
        self.logger = logger or logging.getLogger(__name__)

        self._tax_resolver_constructor = self._load_tax_resolver(properties)
        self._tax_codes = MappingProxyType(self._parse_tax_codes(properties))
        self._products = MappingProxyType(self._parse_products(properties))
        self._taxation_time_zone = parse_time_zone(properties.get(TAXATION_TIME_ZONE_PROPERTY))
        self._tax_amount_precision = parse_precision(properties.get(TAX_AMOUNT_PRECISION_PROPERTY))

    def _load_tax_resolver(self, properties: Mapping[str, str]) -> TaxResolverFactory:
        name = properties.get(TAX_RESOLVER_PROPERTY)
        if name is None or not name.strip():
            self.logger.warning(
                "The [%s] property should not be blank. Using %s instead.",
                TAX_RESOLVER_PROPERTY, NullTaxResolver.__name__
            )
            return NullTaxResolver
        return load_tax_resolver(name.strip(), TAX_RESOLVER_PROPERTY, self.logger)

    def _parse_tax_codes(self, properties: Mapping[str, str]) -> Dict[str, TaxCode]:
        # Group sub-properties by tax code name, in order of first appearance
        groups: Dict[str, Dict[str, str]] = {}
        for key, value in properties.items():
            if not key.startswith(TAX_CODES_PREFIX):
                continue
            name, field = self._split_tax_code_key(key[len(TAX_CODES_PREFIX):])
            if not name.strip():
                self.logger.warning("The tax code name should not be blank in property [%s]. Ignoring it.", key)
                continue
            if field is None and "." in name:
                self.logger.warning("Unknown tax code property [%s]. Ignoring it.", key)
                continue
            fields = groups.setdefault(name, {})
            if field is not None:
                fields[field] = value

        tax_codes = {}
        for name, fields in groups.items():
            tax_codes[name] = self._build_tax_code(name, fields)
        return tax_codes

    @staticmethod
    def _split_tax_code_key(suffix: str) -> Tuple[str, Optional[str]]:
        for field in TAX_CODE_FIELDS:
            if suffix.endswith("." + field):
                return suffix[:-len(field) - 1], field
        return suffix, None

    def _build_tax_code(self, name: str, fields: Dict[str, str]) -> TaxCode:
        description = fields.get(TAX_ITEM_DESCRIPTION)
        if description is None or not description.strip():
            description = DEFAULT_TAX_ITEM_DESC
        starting_on = parse_date(fields.get(STARTING_ON))
        stopping_on = parse_date(fields.get(STOPPING_ON))
        if starting_on is not None and stopping_on is not None and stopping_on < starting_on:
            self.logger.warning(
                "The stoppingOn date %s of tax code [%s] precedes its startingOn date %s. "
                "The tax code will never apply.",
                stopping_on, name, starting_on
            )
            stopping_on = starting_on

        return TaxCode(
            name=name,
            rate=parse_rate(fields.get(RATE)),
            tax_item_description=description,
            country=Country.parse(fields.get(COUNTRY)),
            starting_on=starting_on,
            stopping_on=stopping_on,
        )

    def _parse_products(self, properties: Mapping[str, str]) -> Dict[str, Tuple[str, ...]]:
        products = {}
        for key, value in properties.items():
            if not key.startswith(PRODUCTS_PREFIX):
                continue
            product_name = key[len(PRODUCTS_PREFIX):]
            names = split_names(value)
            for name in names:
                if name not in self._tax_codes:
                    self.logger.error(
                        "Invalid property [%s]: tax code [%s] is not defined. It will be ignored.",
                        key, name
                    )
            products[product_name] = tuple(names)
        return products

    @property
    def tax_codes(self) -> Mapping[str, TaxCode]:
        """Read-only view of all defined tax codes, by name."""
        return self._tax_codes

    @property
    def products(self) -> Mapping[str, Tuple[str, ...]]:
        """Read-only view of the tax code names declared for each product."""
        return self._products

    def find_tax_code(self, name: str) -> Optional[TaxCode]:
        """Return the tax code defined under ``name``, if any."""
        return self._tax_codes.get(name)

    def find_tax_codes(self, names_csv: Optional[str], context_label: str) -> Tuple[TaxCode, ...]:
        """
        Look up tax codes from a comma-separated list of names.

        Args:
            names_csv: Tax code names, e.g. as set on an invoice item
            context_label: Where the names come from, for error messages

        Returns:
            The tax codes found, without duplicates, in the listed order.
            Undefined names are logged as errors and left out.
        """
        return self._lookup(split_names(names_csv), context_label)

    def _lookup(self, names, context_label: str) -> Tuple[TaxCode, ...]:
        tax_codes = []
        for name in names:
            tax_code = self._tax_codes.get(name)
            if tax_code is None:
                self.logger.error("Tax code [%s] %s is undefined", name, context_label)
                continue
            tax_codes.append(tax_code)
        return tuple(tax_codes)

    def get_configured_tax_codes(self, product_name: str) -> Tuple[TaxCode, ...]:
        """
        Return the candidate tax codes configured for a product.

        Products without configuration have no tax codes; that is not an error.
        """
        names = self._products.get(product_name)
        if not names:
            return ()
        return self._lookup(names, f"from property [{PRODUCTS_PREFIX}{product_name}]")

    def get_tax_resolver_constructor(self) -> TaxResolverFactory:
        """Return the validated factory of the configured tax resolver."""
        return self._tax_resolver_constructor

    def get_taxation_time_zone(self) -> ZoneInfo:
        """Return the time zone in which tax code dates are expressed. Defaults to UTC."""
        return self._taxation_time_zone

    def get_tax_amount_precision(self) -> int:
        """Return the number of decimal digits of tax amounts. Defaults to 2."""
        return self._tax_amount_precision
