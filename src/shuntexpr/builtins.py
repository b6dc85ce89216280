"""
Built-in function table for shuntexpr.

Built-ins are resolved before caller-supplied functions, so these names
always mean the same thing regardless of what a caller passes in.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

VARIADIC = "any"


class FunctionSpec(BaseModel):
    """A callable together with the number of arguments it accepts."""

    arity: int | Literal["any"] = Field(description="Fixed argument count, or 'any'")
    call: Callable[..., Any] = Field(description="Numeric implementation")

    model_config = ConfigDict(frozen=True)

    @field_validator("arity")
    @classmethod
    def _non_negative(cls, v: int | str) -> int | str:
        if isinstance(v, int) and v < 0:
            raise ValueError("arity must be non-negative")
        return v

    @property
    def is_variadic(self) -> bool:
        return self.arity == VARIADIC

    def accepts(self, count: int) -> bool:
        """True if the function can be called with ``count`` arguments."""
        return self.is_variadic or self.arity == count


def _round_half_up(a: float) -> float:
    # Halves round toward positive infinity
    whole = math.floor(a)
    return float(whole + 1 if a - whole >= 0.5 else whole)


def _fixed(arity: int, fn: Callable[..., Any]) -> FunctionSpec:
    return FunctionSpec(arity=arity, call=fn)


BUILTIN_FUNCTIONS: Mapping[str, FunctionSpec] = MappingProxyType(
    {
        "floor": _fixed(1, lambda a: float(math.floor(a))),
        "ceil": _fixed(1, lambda a: float(math.ceil(a))),
        "round": _fixed(1, _round_half_up),
        "sin": _fixed(1, math.sin),
        "cos": _fixed(1, math.cos),
        "tan": _fixed(1, math.tan),
        "asin": _fixed(1, math.asin),
        "acos": _fixed(1, math.acos),
        "atan": _fixed(1, math.atan),
        "sinh": _fixed(1, math.sinh),
        "cosh": _fixed(1, math.cosh),
        "tanh": _fixed(1, math.tanh),
        "log": _fixed(1, math.log),
        "log10": _fixed(1, math.log10),
        "exp": _fixed(1, math.exp),
        "pow": _fixed(2, math.pow),
        "max": FunctionSpec(arity=VARIADIC, call=lambda *args: max(args)),
        "min": FunctionSpec(arity=VARIADIC, call=lambda *args: min(args)),
    }
)
