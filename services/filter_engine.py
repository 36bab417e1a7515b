from models.expense import ExpenseWithCategory
from models.filter_criteria import FilterCriteria
from models.page import Page


def matches(record: ExpenseWithCategory, criteria: FilterCriteria) -> bool:
    if criteria.start_date is not None and record.date < criteria.start_date:
        return False
    if criteria.end_date is not None and record.date > criteria.end_date:
        return False
    if criteria.category_ids and record.category.id not in criteria.category_ids:
        return False
    return True


def apply_filter(
    records: list[ExpenseWithCategory], criteria: FilterCriteria
) -> list[ExpenseWithCategory]:
    """Keep records inside the date range and category set. Order preserved."""
    if not criteria.is_active:
        return list(records)
    return [r for r in records if matches(r, criteria)]


def filter_page(page: Page, criteria: FilterCriteria) -> Page:
    """Filter one loaded page. Keys stay as loaded, so paging is unaffected."""
    return Page(
        items=apply_filter(page.items, criteria),
        prev_key=page.prev_key,
        next_key=page.next_key,
    )
