"""Tests for category management."""

import pytest

from paytrack.domain.category import CategoryService
from paytrack.domain.entities import CategoryKind
from paytrack.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    PermissionDenied,
    ValidationError,
)
from paytrack.domain.state import DEFAULT_CATEGORY_ITEMS


def test_list_categories_in_fixed_order(category_service):
    categories = category_service.list_categories()

    assert [c.id for c in categories] == [
        CategoryKind.BANK,
        CategoryKind.COMPANY,
        CategoryKind.BUSINESS_GROUP,
    ]
    assert [c.name for c in categories] == ["Bank", "Company", "Business Group"]
    assert categories[0].items == DEFAULT_CATEGORY_ITEMS[CategoryKind.BANK]


def test_add_item_sorts_items(category_service):
    category = category_service.add_item(CategoryKind.BANK, "  Akbank ")

    assert "Akbank" in category.items
    assert list(category.items) == sorted(category.items)
    assert category_service.has_item(CategoryKind.BANK, "Akbank")


def test_add_blank_item(category_service):
    with pytest.raises(ValidationError):
        category_service.add_item(CategoryKind.COMPANY, "   ")


def test_add_duplicate_item(category_service):
    with pytest.raises(ConflictError, match="already exists"):
        category_service.add_item(CategoryKind.BANK, "Deniz Bank")


def test_remove_unused_item(category_service):
    category = category_service.remove_item(CategoryKind.BANK, "Deniz Bank")

    assert "Deniz Bank" not in category.items


def test_remove_referenced_item_is_refused(category_service, sample_payments):
    before = category_service.get_category(CategoryKind.BANK).items

    with pytest.raises(DependencyError) as excinfo:
        category_service.remove_item(CategoryKind.BANK, "Halk Bankası")

    assert str(excinfo.value) == "Cannot remove 'Halk Bankası': it is used by 2 payments."
    assert category_service.get_category(CategoryKind.BANK).items == before


def test_remove_missing_item(category_service):
    with pytest.raises(NotFoundError):
        category_service.remove_item(CategoryKind.BUSINESS_GROUP, "YOK")


def test_usage_count(category_service, sample_payments):
    assert category_service.usage_count(CategoryKind.COMPANY, "ALTAY") == 2
    assert category_service.usage_count(CategoryKind.COMPANY, "ALTAY HAMİLİNE") == 0
    assert category_service.is_item_in_use(CategoryKind.BUSINESS_GROUP, "ESENYURT")
    assert not category_service.is_item_in_use(CategoryKind.BUSINESS_GROUP, "DİĞER")


def test_rename_unused_item(category_service):
    category = category_service.rename_item(CategoryKind.BANK, "Deniz Bank", "DenizBank")

    assert "DenizBank" in category.items
    assert "Deniz Bank" not in category.items


def test_rename_referenced_item_is_refused(category_service, sample_payments):
    with pytest.raises(DependencyError):
        category_service.rename_item(CategoryKind.BANK, "Deniz Bank", "DenizBank")


def test_move_item(category_service):
    category = category_service.move_item(CategoryKind.BANK, "Deniz Bank", 0)

    assert category.items[0] == "Deniz Bank"
    assert len(category.items) == len(DEFAULT_CATEGORY_ITEMS[CategoryKind.BANK])


def test_move_item_out_of_range(category_service):
    with pytest.raises(ValidationError, match="Position must be between"):
        category_service.move_item(CategoryKind.BANK, "Deniz Bank", 99)


def test_item_stats(category_service, sample_payments):
    stats = category_service.item_stats(CategoryKind.BANK)

    by_item = {s.item: s for s in stats}
    assert by_item["Halk Bankası"].usage == 2
    assert by_item["Halk Bankası"].total_amount == 5500.0
    assert by_item["Ziraat Bankası Hamiline"].usage == 0
    assert [s.item for s in stats] == list(DEFAULT_CATEGORY_ITEMS[CategoryKind.BANK])


def test_item_stats_search(category_service, sample_payments):
    stats = category_service.item_stats(CategoryKind.BANK, search="hamiline")

    assert [s.item for s in stats] == ["Halk Bankası Hamiline", "Ziraat Bankası Hamiline"]


def test_manage_categories_permission(state, viewer):
    service = CategoryService(state, viewer)

    with pytest.raises(PermissionDenied, match="manage categories"):
        service.add_item(CategoryKind.BANK, "Akbank")
    # Reading needs no permission
    assert service.list_categories()
