import logging
import sqlite3
from dataclasses import replace

from database.category_dao import CategoryDAO
from models.category import Category
from models.errors import (
    ConflictError, ExpenseTrackerError, NotFoundError, StoreError, ValidationError,
)
from models.result import Err, Ok, Result
from utils.constants import CUSTOM_CATEGORY_SORT_ORDER, MAX_CATEGORY_NAME_LENGTH

logger = logging.getLogger(__name__)

_NAME_ERROR = f"Category name must be between 1 and {MAX_CATEGORY_NAME_LENGTH} characters"


class CategoryService:
    def __init__(self, category_dao: CategoryDAO):
        self._dao = category_dao

    def get_all(self) -> list[Category]:
        """Ordered by sort_order: defaults first, then custom in creation order."""
        return self._dao.get_all()

    def get_by_id(self, category_id: int) -> Category | None:
        return self._dao.get_by_id(category_id)

    def _check_name(self, name: str, exclude_id: int | None = None) -> ExpenseTrackerError | None:
        if not name.strip() or len(name) > MAX_CATEGORY_NAME_LENGTH:
            return ValidationError({"name": _NAME_ERROR}, code="invalid-name")
        existing = self._dao.get_by_name(name)
        if existing is not None and existing.id != exclude_id:
            return ConflictError(f"A category named '{name}' already exists.", code="duplicate")
        return None

    def add_category(self, name: str, icon: str, color_hex: str) -> Result:
        name = name.strip()
        try:
            error = self._check_name(name)
            if error:
                return Err(error)
            category = self._dao.create(
                name, icon, color_hex,
                is_custom=True, sort_order=CUSTOM_CATEGORY_SORT_ORDER,
            )
        except sqlite3.IntegrityError:
            # lost a race with another insert of the same name
            return Err(ConflictError(f"A category named '{name}' already exists.", code="duplicate"))
        except sqlite3.Error as exc:
            logger.exception("Failed to add category %r", name)
            return Err(StoreError(f"Could not save category: {exc}"))
        logger.info("Added category %s (%r)", category.id, category.name)
        return Ok(category.id)

    def update_category(self, category: Category) -> Result:
        category = replace(category, name=category.name.strip())
        try:
            if self._dao.get_by_id(category.id) is None:
                return Err(NotFoundError("Category not found"))
            error = self._check_name(category.name, exclude_id=category.id)
            if error:
                return Err(error)
            updated = self._dao.update(category)
        except sqlite3.IntegrityError:
            return Err(ConflictError(
                f"A category named '{category.name}' already exists.", code="duplicate"))
        except sqlite3.Error as exc:
            logger.exception("Failed to update category %s", category.id)
            return Err(StoreError(f"Could not save category: {exc}"))
        return Ok(updated)

    def can_delete(self, category_id: int) -> bool:
        try:
            return self._dao.count_expenses(category_id) == 0
        except sqlite3.Error:
            logger.exception("Failed to count expenses for category %s", category_id)
            return False

    def delete_category(self, category_id: int) -> Result:
        try:
            deleted = self._dao.delete(category_id)
        except ConflictError as exc:
            logger.info("Refused to delete category %s: still in use", category_id)
            return Err(exc)
        except sqlite3.IntegrityError:
            # foreign key caught a reference the count did not see
            return Err(ConflictError("Cannot delete category with existing expenses", code="in-use"))
        except sqlite3.Error as exc:
            logger.exception("Failed to delete category %s", category_id)
            return Err(StoreError(f"Could not delete category: {exc}"))
        if not deleted:
            return Err(NotFoundError("Category not found"))
        logger.info("Deleted category %s", category_id)
        return Ok()
