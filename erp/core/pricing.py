"""
Line and document arithmetic shared by quotations, orders and GRNs.

Discount is a per-unit amount. GST splits evenly into CGST and SGST; IGST
applies as a single rate. All results are rounded half-up to two places.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

TWO_PLACES = Decimal('0.01')
ZERO = Decimal('0')


def to_decimal(value, default=ZERO):
    if value is None or value == '':
        return default
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return default


def money(value):
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def compute_line(quantity, unit_price, discount=0, gst_rate=0, igst_rate=0, tax_option='GST'):
    """Derived amounts for one document line"""
    quantity = to_decimal(quantity)
    unit_price = to_decimal(unit_price)
    discount = to_decimal(discount)

    price_after_discount = unit_price - discount
    total_amount = quantity * price_after_discount

    result = {
        'price_after_discount': money(price_after_discount),
        'total_amount': money(total_amount),
        'gst_amount': money(0),
        'cgst_amount': money(0),
        'sgst_amount': money(0),
        'igst_amount': money(0),
    }
    if (tax_option or 'GST').upper() == 'IGST':
        result['igst_amount'] = money(total_amount * to_decimal(igst_rate) / 100)
        result['tax_amount'] = result['igst_amount']
    else:
        gst_amount = total_amount * to_decimal(gst_rate) / 100
        result['gst_amount'] = money(gst_amount)
        result['cgst_amount'] = money(gst_amount / 2)
        result['sgst_amount'] = money(gst_amount / 2)
        result['tax_amount'] = result['gst_amount']
    return result


def compute_totals(lines, freight=0, rounding=0):
    """
    Document totals from line dicts carrying quantity, unit_price and the
    fields produced by compute_line.
    """
    total_before_discount = ZERO
    line_total = ZERO
    tax_total = ZERO
    for line in lines:
        total_before_discount += to_decimal(line.get('quantity')) * to_decimal(line.get('unit_price'))
        line_total += to_decimal(line.get('total_amount'))
        tax_total += to_decimal(line.get('tax_amount'))
    return {
        'total_before_discount': money(total_before_discount),
        'total_discount': money(total_before_discount - line_total),
        'gst_total': money(tax_total),
        'freight': money(freight),
        'rounding': money(rounding),
        'grand_total': money(line_total + tax_total + to_decimal(freight) + to_decimal(rounding)),
    }
