"""
WhatsApp deep links for suppliers.

Nothing is sent from the server: the admin's browser opens
``https://wa.me/<number>?text=<message>`` for each newly notified supplier.
"""
from urllib.parse import quote

from django.conf import settings

from .validators import digits_only


def _place(place, taluk, district, state):
    """'Hosur, Krishnagiri, Tamil Nadu' with the taluk only when it adds something"""
    parts = [place]
    if taluk and taluk.strip().lower() != (place or '').strip().lower():
        parts.append(taluk)
    parts.extend([district, state])
    return ', '.join(part for part in parts if part)


def build_order_message(order):
    from_location = _place(order.from_place, order.from_taluk, order.from_district.name, order.from_state)
    to_location = _place(order.to_place, order.to_taluk, order.to_district.name, order.to_state)
    required = order.required_date.strftime('%d %b %Y') if order.required_date else 'ASAP'

    lines = [
        '🚛 *NEW TRANSPORT ORDER AVAILABLE*',
        '',
        f'*Order:* {order.order_number}',
        f'*Load Type:* {order.load_type.name}',
        f'*Weight/Quantity:* {order.get_quantity_display()}',
        f'*From:* {from_location}',
        f'*To:* {to_location}',
        f'*Required Date:* {required}',
        f'*Special Instructions:* {order.special_instructions or "None"}',
        '',
        'Please log in to your supplier dashboard to confirm this order with driver and vehicle details.',
    ]

    footer = [settings.TRANSPORT_OFFICE_NAME] + list(settings.TRANSPORT_OFFICE_CONTACTS)
    lines.append('')
    lines.append(' | '.join(part for part in footer if part))

    return '\n'.join(lines)


def normalize_number(phone_number, country_code=None):
    """
    Digits in international form. Ten-digit national numbers get the
    configured country code; numbers already carrying one are left alone.
    """
    country_code = country_code or settings.WHATSAPP_COUNTRY_CODE
    digits = digits_only(phone_number)
    if not digits:
        return ''
    if digits.startswith('0') and len(digits) == 11:
        digits = digits[1:]
    if len(digits) == 10:
        digits = f'{country_code}{digits}'
    return digits


def build_whatsapp_link(phone_number, message):
    number = normalize_number(phone_number)
    if not number:
        return None
    return f'https://wa.me/{number}?text={quote(message, safe="")}'
