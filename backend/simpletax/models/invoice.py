"""Invoice item models."""
from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class InvoiceItem(BaseModel):
    """Invoice item subject to taxation."""
    id: str = Field(..., description="Invoice item identifier")
    invoice_id: str = Field(..., description="Identifier of the invoice the item belongs to")
    product_name: Optional[str] = Field(None, description="Billed product, used to look up candidate tax codes")
    amount: Decimal = Field(..., description="Taxable amount")
    start_date: date = Field(..., description="First day of the billed period")
    end_date: Optional[date] = Field(None, description="End of the billed period")

    # Per-item override of the product's candidate tax codes
    tax_codes: Optional[str] = Field(None, description="Comma-separated tax code names")

    class Config:
        json_encoders = {
            Decimal: str
        }


class TaxItem(BaseModel):
    """Tax line item computed for an invoice item."""
    linked_item_id: str = Field(..., description="Invoice item the tax applies to")
    invoice_id: str = Field(..., description="Invoice identifier")
    tax_code: str = Field(..., description="Name of the applied tax code")
    description: str = Field(..., description="Description shown on the invoice")
    rate: Decimal = Field(..., description="Applied rate")
    amount: Decimal = Field(..., description="Tax amount, rounded to the configured precision")

    class Config:
        json_encoders = {
            Decimal: str
        }
