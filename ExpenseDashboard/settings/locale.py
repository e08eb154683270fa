"""
Module for formatting dates, decimal and currency values using Babel.

"""
import datetime
import logging
from typing import List, Union

from babel import Locale, dates, numbers

CURRENCY_MAP: dict[str, str] = {
    'US': 'USD',
    'GB': 'GBP',
    'DE': 'EUR',
    'FR': 'EUR',
    'BE': 'EUR',
    'IT': 'EUR',
    'ES': 'EUR',
    'JP': 'JPY',
    'CA': 'CAD',
    'AU': 'AUD',
    'IN': 'INR',
    'BR': 'BRL',
    'RU': 'RUB',
    'CN': 'CNY',
    'KR': 'KRW',
    'DK': 'DKK',
    'SE': 'SEK',
    'NO': 'NOK',
    'FI': 'EUR',
    'HU': 'HUF',
    'MX': 'MXN',
    'ID': 'IDR',
    'SA': 'SAR',
    'ZA': 'ZAR',
    'TR': 'TRY',
    'NL': 'EUR',
}

LOCALE_MAP: List[str] = [
    'en_GB',
    'de_DE',
    'es_ES',
    'hu_HU',
    'da_DK',
    'en_AU',
    'en_CA',
    'en_IN',
    'en_US',
    'en_ZA',
    'es_MX',
    'fi_FI',
    'fr_BE',
    'fr_FR',
    'it_IT',
    'ja_JP',
    'nb_NO',
    'nl_NL',
    'pt_BR',
    'sv_SE',
]

DEFAULT_LOCALE: str = 'en_US'

# Symbol prefix, two decimals, no grouping. Symbol and decimal mark follow the
# configured locale, so en_US gives "$40.00" and de_DE gives "€40,00".
CURRENCY_PATTERN: str = '¤0.00'


def get_currency_from_locale(locale: str) -> str:
    """
    Retrieve the default currency code based on the locale's territory.

    Args:
        locale (str): Locale string, e.g. 'fr_FR'.

    Returns:
        str: Currency code such as 'EUR'. Defaults to 'EUR' if the territory is unknown.
    """
    parts = locale.split('_')
    if len(parts) < 2:
        return 'EUR'
    country_code = parts[1]
    return CURRENCY_MAP.get(country_code, 'EUR')


def format_float(value: float, locale: str, decimal_places: int = 2) -> str:
    """
    Format a float as a fixed-point decimal string according to the locale conventions.

    Args:
        value (float): The numeric value to be formatted.
        locale (str): Locale string, e.g. 'en_US'.
        decimal_places (int): Number of decimals to show.

    Returns:
        str: The formatted decimal string.
    """
    try:
        locale_obj = Locale.parse(locale)
        fmt = '0.' + '0' * decimal_places if decimal_places > 0 else '0'
        return numbers.format_decimal(value, format=fmt, locale=locale_obj)
    except (ValueError, TypeError) as ex:
        logging.debug(f'Error formatting float "{value}": {ex}')
        return str(value)


def format_currency_value(value: float, locale: str = DEFAULT_LOCALE) -> str:
    """
    Format a number as a currency string based on the locale's default currency.

    The currency symbol is prefixed and the value is always shown with exactly two
    decimals and no digit grouping, e.g. ``40`` becomes ``$40.00`` for ``en_US``.

    Args:
        value (float): The numeric value to be formatted.
        locale (str): Locale string, e.g. 'en_US'.

    Returns:
        str: The formatted currency string.
    """
    try:
        currency_code = get_currency_from_locale(locale)
        locale_obj = Locale.parse(locale)
        return numbers.format_currency(
            value,
            currency=currency_code,
            format=CURRENCY_PATTERN,
            locale=locale_obj,
            currency_digits=False,
        )
    except (ValueError, TypeError, ArithmeticError) as ex:
        logging.error(f'Error formatting currency "{value}": {ex}')
        return str(value)


def format_date(value: Union[str, datetime.date], locale: str = DEFAULT_LOCALE) -> str:
    """
    Format an ISO date as a short human-readable date, e.g. ``Jan 1, 2024``.

    Args:
        value (str | datetime.date): ISO ``YYYY-MM-DD`` string or a date.
        locale (str): Locale string, e.g. 'en_US'.

    Returns:
        str: The formatted date. Input that cannot be parsed is returned unchanged.
    """
    if isinstance(value, datetime.datetime):
        value = value.date()
    if not isinstance(value, datetime.date):
        try:
            value = datetime.date.fromisoformat(str(value).strip())
        except ValueError:
            logging.debug(f'Could not parse date "{value}", leaving it unformatted.')
            return str(value)

    try:
        return dates.format_date(value, format='medium', locale=Locale.parse(locale))
    except (ValueError, TypeError) as ex:
        logging.error(f'Error formatting date "{value}": {ex}')
        return value.isoformat()
