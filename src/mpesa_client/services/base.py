"""
Machinery shared by the fluent service builders.
"""

from __future__ import annotations

import enum
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Mapping, Tuple, Type, TypeVar
from urllib.parse import urlparse

from ..core.errors import ValidationFailed

if TYPE_CHECKING:
    from ..core.client import Mpesa

__all__ = ["ServiceBuilder"]

B = TypeVar("B", bound="ServiceBuilder")


class ServiceBuilder:
    """
    Accumulates fields for one gateway operation.

    Subclasses declare the payload class they build, the fields that must be
    set and the defaults for the rest. Nothing touches the network until
    :meth:`send`, and :meth:`send` validates before it does.
    """

    request_type: ClassVar[Type[Any]]
    required: ClassVar[Tuple[str, ...]] = ()
    defaults: ClassVar[Mapping[str, Any]] = {}

    def __init__(self, client: "Mpesa") -> None:
        self._client = client
        self._values: Dict[str, Any] = {}

    def _set(self: B, name: str, value: Any) -> B:
        self._values[name] = value
        return self

    def _validate(self, values: Dict[str, Any], invalid: Dict[str, str]) -> None:
        """Hook for per-service checks; normalise ``values`` in place."""

    def _resolve(self) -> Dict[str, Any]:
        values = dict(self.defaults)
        values.update(self._values)
        return values

    def build(self) -> Any:
        """
        Return the validated payload without sending it.

        Raises :class:`ValidationFailed` naming every missing or invalid field.
        """
        values = self._resolve()
        missing = [name for name in self.required if _is_blank(values.get(name))]
        invalid: Dict[str, str] = {}
        self._validate(values, invalid)
        for name in missing:
            invalid.pop(name, None)
        if missing or invalid:
            raise ValidationFailed(missing, invalid)
        return self.request_type(**values)

    def send(self) -> Any:
        return self._client.dispatch(self.build())


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def check_url(values: Dict[str, Any], name: str, invalid: Dict[str, str]) -> None:
    value = values.get(name)
    if _is_blank(value):
        return
    parsed = urlparse(str(value))
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        invalid[name] = f"'{value}' is not an http(s) URL"
    else:
        values[name] = str(value)


def check_amount(values: Dict[str, Any], name: str, invalid: Dict[str, str]) -> None:
    """
    Accept ints, floats, Decimals and numeric strings greater than zero.

    Integral amounts are sent as ints, the rest as floats.
    """
    value = values.get(name)
    if _is_blank(value):
        return
    if isinstance(value, bool):
        invalid[name] = "must be a number"
        return
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        invalid[name] = f"'{value}' is not a number"
        return
    if not amount.is_finite() or amount <= 0:
        invalid[name] = "must be greater than zero"
        return
    values[name] = int(amount) if amount == amount.to_integral_value() else float(amount)


def check_enum(
    values: Dict[str, Any],
    name: str,
    enum_type: Type[enum.Enum],
    invalid: Dict[str, str],
) -> None:
    value = values.get(name)
    if _is_blank(value):
        return
    try:
        values[name] = enum_type(value if isinstance(value, enum_type) else str(value))
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        invalid[name] = f"'{value}' is not one of: {allowed}"


def check_text(values: Dict[str, Any], name: str) -> None:
    value = values.get(name)
    if value is not None and not isinstance(value, str):
        values[name] = str(value)
