# app/utils/decimal_utils.py
from decimal import Decimal, ROUND_HALF_UP

TWOPLACES = Decimal("0.01")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    if isinstance(value, Decimal):
        return value.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    return Decimal(str(value)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def compute_line_total(quantity, cost) -> Decimal:
    return to_decimal(to_decimal(quantity) * to_decimal(cost))


def compute_line_tax(line_total, tax_rate) -> Decimal:
    return to_decimal(to_decimal(line_total) * to_decimal(tax_rate) / HUNDRED)
