"""Dataclass <-> JSON-dict mapping for persisted records."""

import dataclasses
import typing
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Generic, TypeVar

from ..core.exceptions import MalformedStateError
from ..core.records import to_decimal

T = TypeVar("T")


def _to_datetime(value) -> datetime:
    """ISO-8601 string, or epoch milliseconds as older saves wrote them."""
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000)
    raise TypeError(f"not a timestamp: {value!r}")


def _to_bool(value) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"not a boolean: {value!r}")
    return value


class RecordCodec(Generic[T]):
    """Maps plain dicts to dataclass instances using type hints.

    Decoding is lenient for numbers (bad values coerce to 0) and strict for
    structure: a non-dict, a missing required field, or a flag or timestamp
    of the wrong JSON type raises MalformedStateError.
    """

    def __init__(self, model_class: type[T]):
        self._model_class = model_class
        self._fields = dataclasses.fields(model_class)  # type: ignore[arg-type]
        self._hints = typing.get_type_hints(model_class)
        self._converters = {
            f.name: self._get_converter(self._hints.get(f.name))
            for f in self._fields
        }

    def _get_converter(self, hint):
        if hint is None:
            return None

        origin = typing.get_origin(hint)
        args = typing.get_args(hint)

        # Optional[X] = Union[X, None]
        if origin is typing.Union:
            non_none = [a for a in args if a is not type(None)]
            if len(non_none) == 1:
                inner_conv = self._get_converter(non_none[0])
                if inner_conv is None:
                    return None
                return lambda v, c=inner_conv: c(v) if v is not None else None
            return None

        if hint is Decimal:
            return to_decimal
        if hint is datetime:
            return _to_datetime
        if hint is bool:
            return _to_bool
        if hint is int:
            return int
        if hint is str:
            return str
        if isinstance(hint, type) and issubclass(hint, Enum):
            return lambda v, cls=hint: cls(v)

        return None

    def decode(self, data) -> T:
        if not isinstance(data, dict):
            raise MalformedStateError(
                f"Expected an object for {self._model_class.__name__}, got {type(data).__name__}"
            )
        kwargs: dict = {}
        for f in self._fields:
            raw = data.get(f.name)
            if raw is None:
                if f.default is not dataclasses.MISSING:
                    kwargs[f.name] = f.default
                elif f.default_factory is not dataclasses.MISSING:  # type: ignore[misc]
                    kwargs[f.name] = f.default_factory()  # type: ignore[misc]
                elif f.name in data:
                    kwargs[f.name] = None
                else:
                    raise MalformedStateError(
                        f"{self._model_class.__name__} record is missing '{f.name}'"
                    )
                continue
            conv = self._converters.get(f.name)
            try:
                kwargs[f.name] = conv(raw) if conv else raw
            except (TypeError, ValueError, OverflowError, OSError) as e:
                raise MalformedStateError(
                    f"Bad value for {self._model_class.__name__}.{f.name}: {raw!r}"
                ) from e
        return self._model_class(**kwargs)

    def decode_all(self, items) -> list[T]:
        if not isinstance(items, list):
            raise MalformedStateError(f"Expected a list, got {type(items).__name__}")
        return [self.decode(item) for item in items]

    @staticmethod
    def _serialize(val):
        """Convert Python value -> JSON-compatible value."""
        if val is None:
            return None
        if isinstance(val, Decimal):
            return str(val)
        if isinstance(val, datetime):
            return val.isoformat()
        if isinstance(val, Enum):
            return val.value
        return val  # int, str, bool as-is

    def encode(self, obj: T) -> dict:
        return {f.name: self._serialize(getattr(obj, f.name)) for f in self._fields}

    def encode_all(self, objs: list[T]) -> list[dict]:
        return [self.encode(o) for o in objs]
