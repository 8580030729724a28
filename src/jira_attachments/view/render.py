"""Attachment Rendering

Formats an ordered sequence of attachments as an aligned table, as plain
rows without a header, or as CSV. None of these functions sort or modify
their input.
"""

import io
from typing import Iterable, List, Sequence, TextIO

from rich.cells import cell_len
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..models.attachment import Attachment

KB = 1024
MB = KB * 1024
GB = MB * 1024

COLUMNS = ("ID", "FILENAME", "SIZE", "AUTHOR", "CREATED")
COLUMN_PADDING = 1
TAB_SIZE = 8


def format_size(size: int) -> str:
    """Human-readable size using 1024 steps, two decimals from KB upward."""
    if size >= GB:
        return f"{size / GB:.2f} GB"
    if size >= MB:
        return f"{size / MB:.2f} MB"
    if size >= KB:
        return f"{size / KB:.2f} KB"
    return f"{size} B"


def format_date(raw: str) -> str:
    """Keep the YYYY-MM-DD prefix of a timestamp; shorter input is returned as is."""
    if len(raw) > 10:
        return raw[:10]
    return raw


def escape_csv(value: str) -> str:
    """Quote a CSV field containing a comma, double quote or newline.

    Embedded double quotes are doubled so the field parses back to the
    original value.
    """
    if any(ch in value for ch in (',', '"', '\n')):
        return '"' + value.replace('"', '""') + '"'
    return value


def _cell(value: str) -> str:
    """Flatten a value onto a single line with tabs expanded to spaces."""
    value = value.replace("\r\n", " ").replace("\r", " ").replace("\n", " ")
    return value.expandtabs(TAB_SIZE)


def _row(attachment: Attachment) -> List[str]:
    return [
        _cell(attachment.id),
        _cell(attachment.filename),
        format_size(attachment.size),
        _cell(attachment.author.displayName),
        _cell(format_date(attachment.created)),
    ]


def _render_columns(attachments: Sequence[Attachment], out: TextIO, show_header: bool) -> None:
    rows = [_row(a) for a in attachments]

    table = Table(
        box=None,
        show_header=show_header,
        show_edge=False,
        pad_edge=False,
        padding=(0, COLUMN_PADDING),
        header_style="bold",
    )
    for name in COLUMNS:
        table.add_column(name, no_wrap=True)
    cells = [[Text(cell) for cell in row] for row in rows]
    for row in cells:
        table.add_row(*row)

    # Wide enough that no cell is ever wrapped or truncated
    header_widths = [cell_len(name) if show_header else 0 for name in COLUMNS]
    widths = [
        max([header_widths[i]] + [row[i].cell_len for row in cells])
        for i in range(len(COLUMNS))
    ]
    width = sum(widths) + 2 * COLUMN_PADDING * len(COLUMNS) + 1

    buf = io.StringIO()
    console = Console(
        file=buf,
        width=width,
        color_system=None,
        highlight=False,
        emoji=False,
        markup=False,
    )
    console.print(table)

    # rich pads the last column out to its full width
    for line in buf.getvalue().splitlines():
        out.write(line.rstrip() + "\n")


def render_table(attachments: Sequence[Attachment], out: TextIO) -> None:
    """Write an aligned table with an ID/FILENAME/SIZE/AUTHOR/CREATED header."""
    _render_columns(attachments, out, show_header=True)


def render_plain(attachments: Sequence[Attachment], out: TextIO) -> None:
    """Write the same aligned columns as render_table, without the header."""
    _render_columns(attachments, out, show_header=False)


def render_csv(attachments: Iterable[Attachment], out: TextIO) -> None:
    """Write CSV with raw byte size and raw timestamp for machine consumption."""
    out.write(",".join(COLUMNS) + "\n")
    for a in attachments:
        out.write(
            f"{a.id},{escape_csv(a.filename)},{a.size},"
            f"{escape_csv(a.author.displayName)},{a.created}\n"
        )


def _to_string(render, attachments: Sequence[Attachment]) -> str:
    buf = io.StringIO()
    render(attachments, buf)
    return buf.getvalue()


def render_table_to_string(attachments: Sequence[Attachment]) -> str:
    return _to_string(render_table, attachments)


def render_plain_to_string(attachments: Sequence[Attachment]) -> str:
    return _to_string(render_plain, attachments)


def render_csv_to_string(attachments: Sequence[Attachment]) -> str:
    return _to_string(render_csv, attachments)
