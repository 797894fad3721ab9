"""
Declaration helpers used in class bodies and on existing classes.

    class Order(Cattri):
        total = cattri(0, predicate=True)
        currency = final_cattri("EUR")
        tax_rate = cattri(0.2, scope="class", expose="read")

        @total.transformer
        def _to_cents(value):
            return round(value * 100)

    define_attribute(Order, "note", "", visibility="protected")
"""

from collections.abc import Callable
from typing import Any

from .exceptions import ValidationError
from .registry import AttributeRegistry, registry_for
from .visibility import current_visibility


class Declaration:
    """
    Pending attribute declaration collected from a class body.

    The ambient declared visibility is captured when the declaration is made,
    so ``with private():`` blocks inside a class body apply to it.
    """

    def __init__(
        self,
        default: Any = None,
        transformer: Callable[..., Any] | None = None,
        **options: Any,
    ) -> None:
        if transformer is not None and not callable(transformer):
            raise ValidationError("transformer must be callable")
        self.default = default
        self._transformer = transformer
        self.options = options
        if options.get("visibility") is None:
            self.options["visibility"] = current_visibility()

    def transformer(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Decorator setting the coercion applied to assigned values."""
        if self._transformer is not None:
            raise ValidationError("transformer is already set for this declaration")
        if not callable(func):
            raise ValidationError("transformer must be callable")
        self._transformer = func
        return func

    def register(self, registry: AttributeRegistry, name: str) -> tuple[str, ...]:
        return registry.define_attribute(
            name, self.default, self._transformer, **self.options
        )

    def __repr__(self) -> str:
        return f"Declaration(default={self.default!r}, options={self.options!r})"


def cattri(
    default: Any = None,
    /,
    transformer: Callable[..., Any] | None = None,
    **options: Any,
) -> Declaration:
    """
    Declare an attribute in a class body.

    Args:
        default: Default value, or a zero-argument callable producing it
        transformer: Coercion applied to assigned values
        **options: scope, expose, visibility, final, predicate, storage_key

    Returns:
        Declaration: Collected and registered by CattriMeta
    """
    return Declaration(default, transformer, **options)


def final_cattri(
    default: Any = None,
    /,
    transformer: Callable[..., Any] | None = None,
    **options: Any,
) -> Declaration:
    """Declare a write-once attribute (``cattri(..., final=True)``)."""
    if options.get("final") is False:
        raise ValidationError("final_cattri() declares final attributes only")
    options["final"] = True
    return Declaration(default, transformer, **options)


def define_attribute(
    target: type,
    name: str,
    default: Any = None,
    transformer: Callable[..., Any] | None = None,
    **options: Any,
) -> tuple[str, ...]:
    """
    Declare an attribute on an existing cattri class.

    Subclasses created before the call do not receive the attribute.

    Returns:
        tuple[str, ...]: Python names exposed for the attribute

    Raises:
        CattriError: If target is not a cattri class, or the declaration is invalid
    """
    return registry_for(target).define_attribute(name, default, transformer, **options)
