import csv
import io
from datetime import datetime

from models.expense import ExpenseWithCategory
from utils.constants import DATE_FORMAT, DATETIME_FORMAT

HEADER = ["Date", "Amount", "Category", "Description", "Created", "Updated"]


def export_to_csv(records: list[ExpenseWithCategory]) -> str:
    """Render records as CSV text, one row each, in the order given."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(HEADER)
    for r in records:
        writer.writerow([
            r.date.strftime(DATE_FORMAT),
            f"{r.amount:.2f}",
            r.category.name,
            r.description,
            r.created_at.strftime(DATETIME_FORMAT),
            r.updated_at.strftime(DATETIME_FORMAT),
        ])
    return buf.getvalue()


def generate_filename(now: datetime | None = None) -> str:
    return f"expenses_{(now or datetime.now()).strftime('%Y%m%d_%H%M%S')}.csv"
