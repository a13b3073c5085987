"""Tax resolver registry and loader."""
import importlib
import inspect
import logging
from typing import Any, Callable, Dict, List
from simpletax.resolving.base import TaxResolver
from simpletax.resolving.null_resolver import NullTaxResolver
from simpletax.utils.errors import TaxResolverRegistrationError

# Factories take the tax computation context and return a resolver
TaxResolverFactory = Callable[[Any], TaxResolver]

# Registry of available tax resolvers, by configuration name
_tax_resolvers: Dict[str, TaxResolverFactory] = {}


def is_tax_resolver_class(candidate: Any) -> bool:
    """Tell whether ``candidate`` is a sub-class of TaxResolver."""
    return inspect.isclass(candidate) and issubclass(candidate, TaxResolver)


def has_context_constructor(candidate: Any) -> bool:
    """Tell whether ``candidate`` can be built with one tax computation context argument."""
    if not callable(candidate) or inspect.isabstract(candidate):
        return False
    try:
        signature = inspect.signature(candidate)
    except (TypeError, ValueError):
        return False
    try:
        signature.bind(None)
    except TypeError:
        return False
    return True


def register_tax_resolver(name: str, resolver_class: TaxResolverFactory):
    """
    Register a tax resolver under a configuration name.

    Raises:
        TaxResolverRegistrationError: If the name is taken or the class does
            not satisfy the resolver contract
    """
    if name in _tax_resolvers:
        raise TaxResolverRegistrationError(f"Tax resolver already registered: {name}")
    if not is_tax_resolver_class(resolver_class):
        raise TaxResolverRegistrationError(
            f"Cannot register {resolver_class!r} as [{name}]: not a sub-class of {TaxResolver.__name__}"
        )
    if not has_context_constructor(resolver_class):
        raise TaxResolverRegistrationError(
            f"Cannot register {resolver_class!r} as [{name}]: "
            f"no constructor accepting a single tax computation context"
        )
    _tax_resolvers[name] = resolver_class


def list_tax_resolvers() -> List[str]:
    """List the names of all registered tax resolvers."""
    return sorted(_tax_resolvers.keys())


def load_class(name: str) -> Any:
    """
    Find a resolver by registered name, or import it from a dotted path.

    Raises:
        ImportError: If nothing can be found under that name
    """
    if name in _tax_resolvers:
        return _tax_resolvers[name]

    module_name, _, attribute = name.rpartition(".")
    if not module_name:
        raise ImportError(f"No tax resolver registered as [{name}] and not a dotted path")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attribute)
    except AttributeError as e:
        raise ImportError(f"Module [{module_name}] has no attribute [{attribute}]") from e


def load_tax_resolver(name: str, property_key: str, logger: logging.Logger) -> TaxResolverFactory:
    """
    Return the resolver factory configured under ``property_key``.

    Never raises: problems are logged as errors and the NullTaxResolver is
    returned instead. Both the sub-class and the constructor checks run, so
    a class failing both is reported twice.
    """
    try:
        candidate = load_class(name)
    except Exception as e:
        logger.error(
            "Cannot load class [%s] configured in property [%s]: %s. Using %s instead.",
            name, property_key, e, NullTaxResolver.__name__
        )
        return NullTaxResolver

    valid = True
    if not is_tax_resolver_class(candidate):
        logger.error(
            "Invalid class [%s] configured in property [%s]: it must be a sub-class of %s. Using %s instead.",
            name, property_key, TaxResolver.__name__, NullTaxResolver.__name__
        )
        valid = False
    if not has_context_constructor(candidate):
        logger.error(
            "Invalid class [%s] configured in property [%s]: it must have a constructor "
            "taking one tax computation context argument. Using %s instead.",
            name, property_key, NullTaxResolver.__name__
        )
        valid = False

    return candidate if valid else NullTaxResolver
