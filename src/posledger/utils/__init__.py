"""Utility functions for posledger."""

from posledger.utils.date_parser import parse_date, get_date_range
from posledger.utils.amount_parser import parse_amount, format_amount

__all__ = ["parse_date", "get_date_range", "parse_amount", "format_amount"]
