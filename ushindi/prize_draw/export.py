"""Build and write the spreadsheet-compatible results sheet for a draw."""

from __future__ import annotations

import html
import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from ..errors import ApiError, SchemaError
from ..models import ExportPayload
from ..models.utils import format_timestamp

if TYPE_CHECKING:
    from ..api.client import RaffleClient

logger = logging.getLogger(__name__)

EXPORT_SUFFIX = "_Results.xls"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9]")

_DOCUMENT_TEMPLATE = """<html xmlns:o="urn:schemas-microsoft-com:office:office" xmlns:x="urn:schemas-microsoft-com:office:excel" xmlns="http://www.w3.org/TR/REC-html40">
<head>
<meta charset="utf-8">
<!--[if gte mso 9]>
<xml>
  <x:ExcelWorkbook>
    <x:ExcelWorksheets>
      <x:ExcelWorksheet>
        <x:Name>{sheet_name}</x:Name>
        <x:WorksheetOptions>
          <x:DisplayGridlines/>
        </x:WorksheetOptions>
      </x:ExcelWorksheet>
    </x:ExcelWorksheets>
  </x:ExcelWorkbook>
</xml>
<![endif]-->
<style>
  table {{ border-collapse: collapse; width: 100%; margin-bottom: 20px; }}
  th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
  th {{ background-color: #6B21A8; color: white; font-weight: bold; }}
  .info {{ margin-bottom: 20px; }}
  .info p {{ margin: 5px 0; }}
</style>
</head>
<body>
<h1>{title} - Results</h1>
<div class="info">
  <p><strong>Draw Date:</strong> {draw_date}</p>
  <p><strong>Status:</strong> {status}</p>
  <p><strong>Total Tickets:</strong> {total_tickets}</p>
  <p><strong>Purchased Tickets:</strong> {purchased_tickets}</p>
</div>
<h2>Winners</h2>
{winners_table}
<h2>Purchased Tickets</h2>
{tickets_table}
</body>
</html>
"""


def _cell(value: object) -> str:
    return html.escape("" if value is None else str(value))


def _table(headers: list[str], rows: list[list[object]]) -> str:
    head = "".join(f"<th>{_cell(h)}</th>" for h in headers)
    body = "\n".join(
        "<tr>" + "".join(f"<td>{_cell(v)}</td>" for v in row) + "</tr>" for row in rows
    )
    return (
        "<table>\n"
        f"<thead><tr>{head}</tr></thead>\n"
        f"<tbody>\n{body}\n</tbody>\n"
        "</table>"
    )


def export_filename(draw_name: str) -> str:
    """Return the download filename for ``draw_name``.

    Every character outside ``[A-Za-z0-9]`` becomes an underscore.
    """

    return _UNSAFE_FILENAME_CHARS.sub("_", draw_name) + EXPORT_SUFFIX


def build_results_document(payload: ExportPayload) -> str:
    """Render the results workbook as an Excel-compatible HTML document.

    The "Purchased Tickets" table contains exactly the purchased subset of
    ``payload.all_tickets``.
    """

    purchased = payload.purchased_only()
    if len(purchased) != payload.purchased_tickets:
        logger.warning(
            "Export for %r reports %d purchased tickets but lists %d",
            payload.draw_name,
            payload.purchased_tickets,
            len(purchased),
        )

    winners_table = _table(
        ["Rank", "Ticket Number", "Winner Name", "Winning Time"],
        [
            [w.rank, w.ticket_number, w.buyer_name, format_timestamp(w.winning_time)]
            for w in payload.winners
        ],
    )
    tickets_table = _table(
        ["Ticket Number", "Buyer Name", "Purchased At"],
        [
            [t.ticket_number, t.buyer_name, format_timestamp(t.purchased_at)]
            for t in purchased
        ],
    )
    return _DOCUMENT_TEMPLATE.format(
        sheet_name=_cell(payload.draw_name),
        title=_cell(payload.draw_name),
        draw_date=_cell(format_timestamp(payload.draw_date)),
        status=_cell(payload.status),
        total_tickets=payload.total_tickets,
        purchased_tickets=payload.purchased_tickets,
        winners_table=winners_table,
        tickets_table=tickets_table,
    )


class ResultsExporter:
    """Fetch a draw's export payload and write the results sheet to disk."""

    def __init__(self, client: "RaffleClient") -> None:
        self._client = client

    def export(
        self, draw_id: int, directory: Union[str, Path] = "."
    ) -> Optional[Path]:
        """Write the results sheet for ``draw_id`` into ``directory``.

        Returns the written path, or ``None`` when the fetch failed or the
        payload was malformed. No file is left behind on failure.
        """

        try:
            payload = self._client.get_export(draw_id)
        except (ApiError, SchemaError) as e:
            logger.error("Error exporting draw %s: %s", draw_id, e)
            return None

        document = build_results_document(payload)
        target_dir = Path(directory)
        path = target_dir / export_filename(payload.draw_name)
        tmp_path = path.with_name(path.name + ".part")
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(document, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            logger.error("Error writing export %s: %s", path, e)
            if tmp_path.exists():
                tmp_path.unlink()
            return None
        logger.info("Exported results for %r to %s", payload.draw_name, path)
        return path


__all__ = [
    "ResultsExporter",
    "build_results_document",
    "export_filename",
]
