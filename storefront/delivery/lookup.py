"""
Pincode serviceability: configured areas first, then a static prefix table.
"""
import re

from .models import ServiceableArea

PINCODE_PATTERN = re.compile(r'^\d{6}$')

GUJARAT_PREFIXES = ('36', '37', '38', '39')

# Approximate metro prefixes; three-digit keys win over two-digit ones
CITY_PREFIXES = {
    '40': ('Mumbai/Thane', 'Maharashtra'),
    '411': ('Pune', 'Maharashtra'),
    '11': ('Delhi', 'Delhi'),
    '56': ('Bengaluru', 'Karnataka'),
    '60': ('Chennai', 'Tamil Nadu'),
    '50': ('Hyderabad', 'Telangana'),
    '70': ('Kolkata', 'West Bengal'),
    '30': ('Jaipur', 'Rajasthan'),
    '45': ('Indore', 'Madhya Pradesh'),
    '46': ('Bhopal', 'Madhya Pradesh'),
}


def is_valid_pincode(pincode):
    return bool(PINCODE_PATTERN.match(pincode or ''))


def fallback_lookup(pincode):
    """Prefix-table answer for a pincode, or None"""
    if pincode[:2] in GUJARAT_PREFIXES:
        return {'city': 'Gujarat Area', 'state': 'Gujarat'}
    for prefix in (pincode[:3], pincode[:2]):
        if prefix in CITY_PREFIXES:
            city, state = CITY_PREFIXES[prefix]
            return {'city': city, 'state': state}
    return None


def check_pincode(pincode):
    """Availability answer for a valid six-digit pincode"""
    area = ServiceableArea.objects.filter(pincode=pincode, is_active=True).first()
    if area:
        return {'available': True, 'city': area.city, 'state': area.state, 'source': 'db'}

    match = fallback_lookup(pincode)
    if match:
        return {'available': True, **match, 'source': 'fallback'}

    return {'available': False}
