"""
Price-by-quantity table rendering.

A quotation's parts are laid out as one row per part and one column per
distinct tier quantity found anywhere in the quotation, sorted ascending.
A part without a tier at a column's exact quantity shows a dash in that
column. The same table is available as structured cells (for document
generators), as fixed-width text and as HTML markup.
"""
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from quotebuilder.rendering.templates import render_template

NO_DATA_TEXT = "No data available"
PLACEHOLDER = "-"
PART_NAME_LABEL = "Part Name"
MOQ_LABEL = "MOQ"

# Wide enough for "$999,999,999.99" plus one space each side
PRICE_COLUMN_WIDTH = 17
CELL_PADDING = 2

DEFAULT_CURRENCY_SYMBOL = "$"
CURRENCY_SYMBOLS = {
    "USD": "$",
    "INR": "INR ",
}


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj[name]
    return getattr(obj, name)


def currency_symbol_for(currency: Any) -> str:
    code = getattr(currency, "value", currency)
    return CURRENCY_SYMBOLS.get(code, DEFAULT_CURRENCY_SYMBOL)


def format_price(price: Any, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Formats a unit price, e.g. 1234.5 -> "$1,234.50"."""
    return f"{currency_symbol}{price:,.2f}"


def format_quantity(quantity: Any) -> str:
    """Formats a tier quantity for a column label: 10.0 -> "10", 2.5 -> "2.5"."""
    as_float = float(quantity)
    if as_float.is_integer():
        return str(int(as_float))
    return str(quantity)


def price_column_label(quantity: Any) -> str:
    return f"Price ({format_quantity(quantity)})"


def collect_quantities(parts: Iterable[Any]) -> List[Any]:
    """Distinct tier quantities across all parts, ascending."""
    quantities = set()
    for part in parts:
        for tier in _field(part, "price_tiers"):
            quantities.add(_field(tier, "quantity"))
    return sorted(quantities)


def find_price(part: Any, quantity: Any) -> Optional[Any]:
    """Price of the first tier whose quantity equals `quantity` exactly."""
    for tier in _field(part, "price_tiers"):
        if _field(tier, "quantity") == quantity:
            return _field(tier, "price")
    return None


@dataclass(frozen=True)
class PriceTable:
    """Header and body cells of a rendered price table, as strings."""
    header: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
    quantities: Tuple[Any, ...] = ()

    @classmethod
    def empty(cls) -> "PriceTable":
        return cls(header=(), rows=())

    @property
    def is_empty(self) -> bool:
        return not self.header

    @property
    def column_count(self) -> int:
        return len(self.header)

    def cells(self) -> List[str]:
        """All cell values, header first, in row-major order."""
        values = list(self.header)
        for row in self.rows:
            values.extend(row)
        return values

    def column_widths(self) -> List[int]:
        """Global width of every column, padding included."""
        if self.is_empty:
            return []
        all_rows = (self.header,) + self.rows
        widths = []
        for index in range(self.column_count):
            longest = max(len(row[index]) for row in all_rows)
            if index < 2:
                widths.append(longest + CELL_PADDING)
            else:
                widths.append(max(PRICE_COLUMN_WIDTH, longest + CELL_PADDING))
        return widths


def build_price_table(parts: Sequence[Any], currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> PriceTable:
    """Builds the structured price table for a sequence of parts.

    Args:
        parts: objects or mappings exposing part_name, moq and price_tiers,
               each tier exposing quantity and price.
        currency_symbol: prefix put in front of every price.

    Returns:
        PriceTable.empty() when there are no parts, otherwise a table with the
        two fixed columns followed by one column per tier quantity.
    """
    parts = list(parts)
    if not parts:
        return PriceTable.empty()

    quantities = collect_quantities(parts)
    header = (PART_NAME_LABEL, MOQ_LABEL) + tuple(price_column_label(q) for q in quantities)

    rows = []
    for part in parts:
        row = [str(_field(part, "part_name")), str(_field(part, "moq"))]
        for quantity in quantities:
            price = find_price(part, quantity)
            row.append(PLACEHOLDER if price is None else format_price(price, currency_symbol))
        rows.append(tuple(row))

    return PriceTable(header=header, rows=tuple(rows), quantities=tuple(quantities))


def _text_cell(value: str, width: int, left_align: bool) -> str:
    inner = width - CELL_PADDING
    return " " + (value.ljust(inner) if left_align else value.rjust(inner)) + " "


def _text_row(values: Sequence[str], widths: Sequence[int]) -> str:
    cells = [_text_cell(value, width, index == 0) for index, (value, width) in enumerate(zip(values, widths))]
    return "|" + "|".join(cells) + "|"


def render_text_table(parts: Sequence[Any], currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Renders the price table as fixed-width text with +, - and | borders."""
    table = build_price_table(parts, currency_symbol)
    if table.is_empty:
        return NO_DATA_TEXT

    widths = table.column_widths()
    border = "+" + "+".join("-" * width for width in widths) + "+"

    lines = [border, _text_row(table.header, widths), border]
    lines.extend(_text_row(row, widths) for row in table.rows)
    lines.append(border)
    return "\n".join(lines)


def render_html_table(parts: Sequence[Any], currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Renders the price table as an HTML <table>; cell text is escaped."""
    table = build_price_table(parts, currency_symbol)
    return render_template(
        "price_table.html",
        table=table,
        no_data_text=NO_DATA_TEXT,
    ).strip()
