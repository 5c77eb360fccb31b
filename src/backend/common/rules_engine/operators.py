"""Value semantics for condition comparison and log rendering.

Rules and facts arrive as JSON produced by JavaScript tooling (rule editor,
extraction prompts), and existing consumers read the evaluation log verbatim.
Comparisons therefore follow JavaScript's abstract equality / relational
comparison, and numbers render the way ``String(number)`` renders them.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Optional, Sequence

NAN = float("nan")

_DECIMAL_LITERAL = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_RADIX_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}
_INFINITY_LITERALS = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def as_double(value: float | int) -> float | int:
    """Clamp integers beyond the float range to +/-Infinity, as a JSON parser producing doubles would."""
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    return value


def to_number(value: Any) -> float | int:
    if isinstance(value, bool):
        return 1 if value else 0
    if is_number(value):
        return as_double(value)
    if value is None:
        return 0
    if isinstance(value, str):
        return _string_to_number(value)
    if isinstance(value, list):
        return _string_to_number(format_value(value))
    return NAN


def _string_to_number(text: str) -> float | int:
    s = text.strip()
    if not s:
        return 0
    if s in _INFINITY_LITERALS:
        return _INFINITY_LITERALS[s]
    prefix = s[:2].lower()
    if prefix in _RADIX_PREFIXES:
        try:
            return int(s[2:], _RADIX_PREFIXES[prefix])
        except ValueError:
            return NAN
    if not _DECIMAL_LITERAL.match(s):
        return NAN
    number = float(s)
    if number == 0 and math.copysign(1.0, number) < 0:
        return number
    if number.is_integer() and abs(number) < 2**53:
        return int(number)
    return number


def apply_formula(base: float | int, operator: str, operand: float | int) -> Optional[float | int]:
    """Apply a formula operator; returns None when the operator is unsupported."""
    base = as_double(base)
    operand = as_double(operand)
    if operator == "*":
        return base * operand
    if operator == "+":
        return base + operand
    if operator == "-":
        return base - operand
    if operator == "/":
        return _divide(base, operand)
    return None


def _divide(numerator: float | int, denominator: float | int) -> float | int:
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return NAN
        negative = (numerator < 0) != (math.copysign(1.0, denominator) < 0)
        return -math.inf if negative else math.inf
    return numerator / denominator


def _to_primitive(value: Any) -> Any:
    if isinstance(value, list):
        return format_value(value)
    if isinstance(value, dict):
        return "[object Object]"
    return value


def _is_object(value: Any) -> bool:
    return isinstance(value, (list, dict))


def loose_equals(left: Any, right: Any) -> bool:
    """JavaScript ``==``: ``"50" == 50`` is true, ``null`` only equals ``null``."""
    if _is_object(left) and _is_object(right):
        return left is right
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, bool) and isinstance(right, bool):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    if is_number(left) and is_number(right):
        return left == right
    if isinstance(left, bool):
        return loose_equals(to_number(left), right)
    if isinstance(right, bool):
        return loose_equals(left, to_number(right))
    if _is_object(left):
        return loose_equals(_to_primitive(left), right)
    if _is_object(right):
        return loose_equals(left, _to_primitive(right))
    if isinstance(left, str) or isinstance(right, str):
        return to_number(left) == to_number(right)
    return False


def _utf16_key(text: str) -> bytes:
    return text.encode("utf-16-be", "surrogatepass")


def compare(operator: str, left: Any, right: Any) -> bool:
    """JavaScript relational comparison for ``>``, ``<``, ``>=`` and ``<=``."""
    left_p = _to_primitive(left)
    right_p = _to_primitive(right)
    if isinstance(left_p, str) and isinstance(right_p, str):
        a: Any = _utf16_key(left_p)
        b: Any = _utf16_key(right_p)
    else:
        a = to_number(left_p)
        b = to_number(right_p)
        if math.isnan(a) or math.isnan(b):
            return False
    if operator == ">":
        return a > b
    if operator == "<":
        return a < b
    if operator == ">=":
        return a >= b
    if operator == "<=":
        return a <= b
    raise ValueError(f"Not a relational operator: {operator}")


def _same_value_zero(left: Any, right: Any) -> bool:
    if is_number(left) and is_number(right):
        left, right = as_double(left), as_double(right)
        if math.isnan(left) and math.isnan(right):
            return True
        return left == right
    if isinstance(left, bool) and isinstance(right, bool):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    if left is None or right is None:
        return left is None and right is None
    return left is right


def contains(haystack: Sequence[Any], needle: Any) -> bool:
    """``Array.prototype.includes``: strict membership, NaN finds NaN."""
    return any(_same_value_zero(item, needle) for item in haystack)


def format_number(value: float | int) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    text = repr(abs(value))
    if "e" in text:
        mantissa, exp_text = text.split("e")
        exponent = int(exp_text)
    else:
        mantissa, exponent = text, 0
    int_part, _, frac_part = mantissa.partition(".")
    digits = int_part + frac_part
    # value == 0.<digits> * 10**point
    point = len(int_part) + exponent
    stripped = digits.lstrip("0")
    point -= len(digits) - len(stripped)
    digits = stripped.rstrip("0")
    k = len(digits)

    if k <= point <= 21:
        return sign + digits + "0" * (point - k)
    if 0 < point <= 21:
        return sign + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return sign + "0." + "0" * (-point) + digits
    e = point - 1
    e_text = f"e+{e}" if e >= 0 else f"e-{-e}"
    if k == 1:
        return sign + digits + e_text
    return sign + digits[0] + "." + digits[1:] + e_text


def format_value(value: Any) -> str:
    """Render a value the way a JavaScript template literal would."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ",".join("" if item is None else format_value(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def stringify(value: Any) -> str:
    """Compact JSON rendering (``JSON.stringify``) used in condition descriptions."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return "null"
        return format_number(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(stringify(item) for item in value) + "]"
    if isinstance(value, dict):
        return "{" + ",".join(f"{json.dumps(str(k), ensure_ascii=False)}:{stringify(v)}" for k, v in value.items()) + "}"
    return json.dumps(str(value), ensure_ascii=False)
