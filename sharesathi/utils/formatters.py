"""
Indian number formatting
12,34,567 grouping, rupee prices, lakh / crore suffixes
"""
from typing import Optional


def format_indian_number(num: float, decimals: Optional[int] = None) -> str:
    """
    Format a number with Indian digit grouping

    Args:
        num: value to format
        decimals: fixed decimal places; by default whole numbers get none
                  and fractional numbers get two

    Examples:
        1234567 -> "12,34,567"
        999 -> "999"
        1234567.5 -> "12,34,567.50"
    """
    if decimals is None:
        decimals = 0 if float(num).is_integer() else 2

    text = f"{abs(num):.{decimals}f}"
    whole, _, fraction = text.partition(".")

    if len(whole) > 3:
        # last three digits, then pairs
        head, groups = whole[:-3], [whole[-3:]]
        while head:
            groups.insert(0, head[-2:])
            head = head[:-2]
        whole = ",".join(groups)

    sign = "-" if num < 0 and float(text) != 0 else ""
    return sign + whole + (f".{fraction}" if fraction else "")


def format_price(price: float) -> str:
    """Rupee price with two decimals"""
    return "₹" + format_indian_number(price, decimals=2)


def format_market_cap(crores: float) -> str:
    """Market cap given in crores"""
    if crores >= 100000:
        return f"₹{crores / 100000:.2f}L Cr"
    elif crores >= 1000:
        return f"₹{crores / 1000:.2f}K Cr"
    return f"₹{format_indian_number(crores, decimals=2)} Cr"


def format_change(change: float, percent: float) -> str:
    """Signed rupee change with percentage, e.g. +₹12.50 (+1.25%)"""
    sign = "+" if change >= 0 else "-"
    return f"{sign}₹{abs(change):.2f} ({sign}{abs(percent):.2f}%)"


def format_percent(percent: float) -> str:
    sign = "+" if percent >= 0 else ""
    return f"{sign}{percent:.2f}%"


def format_volume(volume: float) -> str:
    """Volume in K / lakhs / crores"""
    if volume >= 10000000:
        return f"{volume / 10000000:.2f} Cr"
    elif volume >= 100000:
        return f"{volume / 100000:.2f} L"
    elif volume >= 1000:
        return f"{volume / 1000:.2f} K"
    return str(int(volume)) if float(volume).is_integer() else str(volume)
