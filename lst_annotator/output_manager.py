"""
Output Manager - writes decoded records as text tables, CSV, Excel workbooks,
JSON or Markdown.

One output file per listing, named after the listing with the format's
extension. Keeps simple statistics across writes.
"""

from __future__ import annotations
import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from openpyxl import Workbook
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from .profiles import ListingProfile
from .records import DecodedRecord

__all__ = ['OutputManager', 'FORMAT_EXTENSIONS', 'format_table', 'format_markdown']

log = logging.getLogger(__name__)

FORMAT_EXTENSIONS = {
    'txt': 'txt',
    'csv': 'csv',
    'xlsx': 'xlsx',
    'json': 'json',
    'md': 'md',
}

# Text table column widths; the last column is left unpadded
_WIDTHS = {
    "Index": 6,
    "Section": 8,
    "Address": 8,
    "Label": 12,
    "Opcode": 12,
    "Mnemonic": 28,
    "Flags Affected": 16,
    "Symbol": 32,
    "Comment": 0,
    "ASCII": 0,
}

# Workbook styling: blue header with white text, thin borders on every cell
_THIN = Side(style="thin")
_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)
_HEADER_FONT = Font(name="Aptos", size=11, color="FFFFFF")
_HEADER_FILL = PatternFill(fill_type="solid", start_color="4F81BD", end_color="4F81BD")
_CELL_FONT = Font(name="Aptos", size=11)


def format_table(records: Sequence[DecodedRecord], profile: ListingProfile) -> str:
    """Plain columnar table, one line per record."""
    columns = profile.columns

    def _line(values: List[str]) -> str:
        cells = []
        for col, value in zip(columns, values):
            width = _WIDTHS.get(col, 0)
            cells.append(f"{value:<{width}}" if width else value)
        return " ".join(cells).rstrip()

    lines = [_line(list(columns))]
    lines.append("-" * len(lines[0]))
    for record in records:
        row = record.as_row()
        lines.append(_line([row[col] for col in columns]))
    return "\n".join(lines) + "\n"


def format_markdown(records: Sequence[DecodedRecord], profile: ListingProfile,
                    title: Optional[str] = None) -> str:
    columns = profile.columns
    out = []
    if title:
        out.append(f"# {title}\n")
    out.append("| " + " | ".join(columns) + " |")
    out.append("|" + "|".join("---" for _ in columns) + "|")
    for record in records:
        row = record.as_row()
        cells = [row[col].replace("|", "\\|") for col in columns]
        out.append("| " + " | ".join(cells) + " |")
    return "\n".join(out) + "\n"


class OutputManager:
    """Manages output files for one conversion run"""

    def __init__(self, base_dir: Optional[Union[str, Path]] = None):
        """
        Initialize output manager

        Args:
            base_dir: Directory for all outputs. None writes each output
                      next to its input listing.
        """
        self.base_dir = Path(base_dir) if base_dir else None
        if self.base_dir is not None:
            self.base_dir.mkdir(parents=True, exist_ok=True)

        self.files_written = 0
        self.bytes_written = 0

    def get_output_path(self, input_path: Union[str, Path], fmt: str) -> Path:
        """Same base name as the input, extension chosen by format."""
        input_path = Path(input_path)
        directory = self.base_dir if self.base_dir is not None else input_path.parent
        return directory / f"{input_path.stem}.{FORMAT_EXTENSIONS[fmt]}"

    def write_records(self,
                      records: Sequence[DecodedRecord],
                      input_path: Union[str, Path],
                      profile: ListingProfile,
                      fmt: str = 'csv') -> Path:
        """
        Write records for one listing in the requested format

        Returns:
            Path to written file
        """
        if fmt not in FORMAT_EXTENSIONS:
            raise ValueError(f"Unsupported output format: {fmt}")
        output_path = self.get_output_path(input_path, fmt)

        if fmt == 'csv':
            self._write_csv(records, profile, output_path)
        elif fmt == 'xlsx':
            self._write_xlsx(records, profile, output_path)
        elif fmt == 'json':
            self._write_json(records, profile, input_path, output_path)
        elif fmt == 'md':
            self._write_text(format_markdown(records, profile, Path(input_path).name), output_path)
        else:
            self._write_text(format_table(records, profile), output_path)

        self.files_written += 1
        self.bytes_written += output_path.stat().st_size
        log.info("Wrote %s (%d rows)", output_path, len(records))
        return output_path

    def _write_text(self, content: str, output_path: Path):
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(content)

    def _write_csv(self, records, profile: ListingProfile, output_path: Path):
        # utf-8-sig so spreadsheet applications pick up the arrows and operators
        with open(output_path, 'w', encoding='utf-8-sig', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=list(profile.columns), extrasaction='ignore')
            writer.writeheader()
            for record in records:
                writer.writerow(record.as_row())

    def _write_xlsx(self, records, profile: ListingProfile, output_path: Path):
        wb = Workbook()
        ws = wb.active
        ws.title = profile.name.upper()

        columns = list(profile.columns)
        widths = [len(name) for name in columns]
        for col, name in enumerate(columns, start=1):
            cell = ws.cell(row=1, column=col, value=name)
            cell.font = _HEADER_FONT
            cell.fill = _HEADER_FILL
            cell.border = _BORDER

        for row_num, record in enumerate(records, start=2):
            row = record.as_row()
            for col, name in enumerate(columns, start=1):
                value = row[name]
                cell = ws.cell(row=row_num, column=col, value=value)
                # listing text is never a formula
                cell.data_type = "s"
                cell.font = _CELL_FONT
                cell.border = _BORDER
                widths[col - 1] = max(widths[col - 1], len(value))

        # size columns to their contents
        for col, width in enumerate(widths, start=1):
            ws.column_dimensions[get_column_letter(col)].width = width + 2
        ws.freeze_panes = "A2"
        wb.save(output_path)

    def _write_json(self, records, profile: ListingProfile, input_path, output_path: Path):
        data = {
            "source": Path(input_path).name,
            "family": profile.name,
            "records": [record.to_dict() for record in records],
        }
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def get_statistics(self) -> Dict[str, Any]:
        """Get output statistics"""
        return {
            'files_written': self.files_written,
            'bytes_written': self.bytes_written,
            'base_dir': str(self.base_dir.absolute()) if self.base_dir else None,
        }
