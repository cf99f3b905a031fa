"""Validators for order-related models"""
from django.core.exceptions import ValidationError


def digits_only(value):
    """Strip spaces, '+', dashes and brackets from a phone number"""
    return ''.join(filter(str.isdigit, value or ''))


def validate_phone_number(value):
    """Validate mobile/WhatsApp number format"""
    if not value:
        return

    cleaned_number = digits_only(value)

    if len(cleaned_number) < 10:
        raise ValidationError('Phone number must be at least 10 digits')

    if len(cleaned_number) > 15:
        raise ValidationError('Phone number cannot exceed 15 digits')

    return value


def validate_load_quantity(estimated_tons, number_of_goods):
    """An order must say how much it carries: tons, a count of goods, or both"""
    if estimated_tons is None and number_of_goods is None:
        raise ValidationError('Either estimated tons or number of goods is required')

    if estimated_tons is not None and estimated_tons <= 0:
        raise ValidationError({'estimated_tons': 'Estimated tons must be greater than zero'})

    if number_of_goods is not None and number_of_goods <= 0:
        raise ValidationError({'number_of_goods': 'Number of goods must be greater than zero'})
