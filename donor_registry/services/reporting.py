"""
Donor export: tabular rows, per-blood-group summary, XLSX and CSV rendering.
"""
import io
import logging
import re
import time
from dataclasses import dataclass
from typing import List, Sequence

import pandas as pd
from openpyxl.utils import get_column_letter

from donor_registry.repositories.donor_repository import DonorRecord, GroupCounts
from donor_registry.services.eligibility import EligibilityPolicy, to_canonical_form

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MEDIA_TYPE = "text/csv; charset=utf-8"

AVAILABLE_LABEL = "Available"
UNAVAILABLE_LABEL = "Not available"

DONOR_COLUMNS = [
    ("id", "ID", 8),
    ("name", "Name", 24),
    ("contact", "Contact", 20),
    ("blood_group", "Blood Group", 12),
    ("last_donation_date", "Last Donation", 15),
    ("next_eligible_date", "Next Eligible", 15),
    ("available", "Availability", 14),
    ("created_at", "Created At", 22),
]
SUMMARY_COLUMNS = [
    ("blood_group", "Blood Group", 12),
    ("total", "Total Users", 14),
    ("available", "Available", 12),
    ("unavailable", UNAVAILABLE_LABEL, 16),
]


@dataclass
class ExportFile:
    content: bytes
    media_type: str
    filename: str


def availability_label(available: bool) -> str:
    return AVAILABLE_LABEL if available else UNAVAILABLE_LABEL


def export_rows(records: Sequence[DonorRecord], policy: EligibilityPolicy) -> List[dict]:
    rows = []
    for r in records:
        last_iso = to_canonical_form(r.last_donation_date)
        rows.append({
            "id": r.id,
            "name": r.name,
            "contact": r.contact,
            "blood_group": r.blood_group,
            "last_donation_date": last_iso or "",
            "next_eligible_date": policy.next_eligible_date(last_iso) or "",
            "available": availability_label(r.available),
            "created_at": to_canonical_form(r.created_at) or "",
        })
    return rows


def summarize(records: Sequence[DonorRecord], blood_groups: Sequence[str]) -> GroupCounts:
    """Counts over exactly the exported rows, so filters carry through."""
    counts = GroupCounts.empty(blood_groups)
    for r in records:
        counts.add(r.blood_group, r.available)
    return counts


def summary_rows(counts: GroupCounts, blood_groups: Sequence[str]) -> List[dict]:
    return [
        {
            "blood_group": g,
            "total": counts.total[g],
            "available": counts.available[g],
            "unavailable": counts.unavailable(g),
        }
        for g in blood_groups
    ]


def _frame(rows: List[dict], columns) -> pd.DataFrame:
    keys = [key for key, _, _ in columns]
    headers = [header for _, header, _ in columns]
    df = pd.DataFrame(rows, columns=keys)
    df.columns = headers
    return df


def render_csv(donor_rows: List[dict], summary: List[dict]) -> bytes:
    buffer = io.StringIO()
    _frame(donor_rows, DONOR_COLUMNS).to_csv(buffer, index=False, lineterminator="\r\n")
    buffer.write("\r\nSummary\r\n")
    _frame(summary, SUMMARY_COLUMNS).to_csv(buffer, index=False, lineterminator="\r\n")
    return buffer.getvalue().encode("utf-8")


def render_xlsx(donor_rows: List[dict], summary: List[dict], creator: str) -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for sheet, rows, columns in (
            ("Donors", donor_rows, DONOR_COLUMNS),
            ("Summary", summary, SUMMARY_COLUMNS),
        ):
            _frame(rows, columns).to_excel(writer, sheet_name=sheet, index=False)
            worksheet = writer.sheets[sheet]
            for idx, (_, _, width) in enumerate(columns):
                worksheet.column_dimensions[get_column_letter(idx + 1)].width = width
        writer.book.properties.creator = creator
    return buffer.getvalue()


def export_filename(app_name: str, extension: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "_", app_name.lower()).strip("_") or "donors"
    return f"{slug}_{int(time.time() * 1000)}.{extension}"


def build_export(
    records: Sequence[DonorRecord],
    policy: EligibilityPolicy,
    fmt: str = "xlsx",
    app_name: str = "donors",
) -> ExportFile:
    donor_rows = export_rows(records, policy)
    summary = summary_rows(summarize(records, policy.blood_groups), policy.blood_groups)

    if fmt == "csv":
        content = render_csv(donor_rows, summary)
        media_type = CSV_MEDIA_TYPE
    elif fmt == "xlsx":
        content = render_xlsx(donor_rows, summary, creator=app_name)
        media_type = XLSX_MEDIA_TYPE
    else:
        raise ValueError(f"Unsupported export format: {fmt}")

    logger.info(f"Built {fmt} export with {len(donor_rows)} donor row(s)")
    return ExportFile(content=content, media_type=media_type, filename=export_filename(app_name, fmt))
