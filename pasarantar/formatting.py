"""Display helpers for Indonesian Rupiah amounts."""


def format_rupiah(value) -> str:
    """
    Format an amount with dot thousands separators and no decimals.

    >>> format_rupiah(15000)
    'Rp 15.000'
    """
    try:
        value = float(value)
    except (TypeError, ValueError):
        return str(value)
    formatted = "{:,.0f}".format(abs(value)).replace(",", ".")
    sign = "-" if round(value) < 0 else ""
    return f"{sign}Rp {formatted}"
