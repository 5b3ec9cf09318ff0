"""Price lookup and priced quotes"""
from erp.catalog.models import Item
from erp.core.exceptions import NotFoundError
from erp.core.pricing import compute_line, compute_totals, to_decimal
from .models import PriceList, PriceListItem


def resolve_price(item, price_list=None, on_date=None):
    """
    Price of an item: the price list's entry when the list is active and
    valid on the date, otherwise the item's own unit price.
    """
    if price_list is not None and price_list.is_valid_on(on_date):
        entry = PriceListItem.objects.filter(price_list=price_list, item=item).first()
        if entry is not None:
            return {'price': entry.price, 'source': 'price_list', 'price_list': price_list.id}
    return {'price': item.unit_price, 'source': 'item', 'price_list': None}


def get_price_list(price_list_id):
    if not price_list_id:
        return None
    price_list = PriceList.objects.filter(pk=price_list_id).first()
    if price_list is None:
        raise NotFoundError('Price list not found')
    return price_list


def build_quote(lines, price_list=None, freight=0, rounding=0):
    """Price each line through resolve_price and compute_line, then total them"""
    priced = []
    for line in lines:
        item = Item.objects.filter(pk=line['item']).first()
        if item is None:
            raise NotFoundError(f"Item {line['item']} not found")
        price = resolve_price(item, price_list)
        gst_rate = line.get('gst_rate')
        if gst_rate is None:
            gst_rate = item.gst_rate
        amounts = compute_line(line['quantity'], price['price'], line.get('discount', 0), gst_rate,
                               line.get('igst_rate', 0), line.get('tax_option', 'GST'))
        priced.append({
            'item': item.id,
            'item_code': item.item_code,
            'item_name': item.item_name,
            'quantity': to_decimal(line['quantity']),
            'unit_price': price['price'],
            'price_source': price['source'],
            'discount': to_decimal(line.get('discount', 0)),
            'gst_rate': to_decimal(gst_rate),
            'tax_option': line.get('tax_option', 'GST'),
            **amounts,
        })
    totals = compute_totals(priced, freight=freight, rounding=rounding)
    return {'lines': priced, 'totals': totals}
