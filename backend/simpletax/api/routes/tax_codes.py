"""Tax code lookup endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from typing import List, Optional
from simpletax.models.tax_code import TaxCode
from simpletax.resolving.registry import list_tax_resolvers
from simpletax.services.simple_tax_config import SimpleTaxConfig

router = APIRouter()


def get_tax_config(request: Request) -> SimpleTaxConfig:
    """Tax configuration of the running application."""
    return request.app.state.tax_config


@router.get("", response_model=List[TaxCode])
async def find_tax_codes(
    names: Optional[str] = Query(default=None, description="Comma-separated tax code names"),
    config: SimpleTaxConfig = Depends(get_tax_config)
):
    """
    List tax codes.

    Without ``names``, all defined tax codes are returned. Otherwise only the
    listed ones that are defined; undefined names are logged and left out.
    """
    if names is None:
        return list(config.tax_codes.values())
    return list(config.find_tax_codes(names, "from API request"))


@router.get("/resolvers")
async def list_resolvers(config: SimpleTaxConfig = Depends(get_tax_config)):
    """List registered tax resolvers and the one currently configured."""
    return {
        "resolvers": list_tax_resolvers(),
        "configured": config.get_tax_resolver_constructor().__name__
    }


@router.get("/products/{product_name}", response_model=List[TaxCode])
async def get_product_tax_codes(product_name: str, config: SimpleTaxConfig = Depends(get_tax_config)):
    """List the candidate tax codes configured for a product."""
    return list(config.get_configured_tax_codes(product_name))


@router.get("/{name}", response_model=TaxCode)
async def get_tax_code(name: str, config: SimpleTaxConfig = Depends(get_tax_config)):
    """Get a tax code by name."""
    tax_code = config.find_tax_code(name)
    if tax_code is None:
        raise HTTPException(status_code=404, detail=f"Tax code '{name}' is not defined")
    return tax_code
