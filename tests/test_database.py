"""Tests for persisting the application state."""

from datetime import date

import pytest

from paytrack.database.factories import create_sqlite_database, default_database_path
from paytrack.domain.category import CategoryService
from paytrack.domain.entities import CategoryKind, PaymentStatus, Permissions
from paytrack.domain.payment import PaymentService
from paytrack.domain.state import DEFAULT_CATEGORY_ITEMS
from paytrack.domain.user import UserService


def _reopen(temp_db):
    db = create_sqlite_database(database_path=temp_db.database_path)
    db.connect()
    db.initialize_schema()
    return db


class TestLoadState:
    """Tests for Database.load_state."""

    def test_first_load_seeds_and_persists_admin(self, temp_db):
        state = temp_db.load_state(admin_password="ilk-parola")

        assert [u.username for u in state.users] == ["admin"]
        assert state.payments == []
        assert state.categories[CategoryKind.BANK].items == DEFAULT_CATEGORY_ITEMS[CategoryKind.BANK]

        other = _reopen(temp_db)
        try:
            reloaded = other.load_state()
            assert reloaded.users == state.users
            assert UserService(reloaded).authenticate("admin", "ilk-parola")
        finally:
            other.disconnect()

    def test_second_load_does_not_reseed(self, temp_db):
        first = temp_db.load_state()
        second = temp_db.load_state()

        assert second.users == first.users


class TestSaveState:
    """Tests for Database.save_state."""

    def test_round_trip(self, temp_db):
        state = temp_db.load_state(admin_password="123456")
        admin = state.users[0]
        payments = PaymentService(state, admin)
        first = payments.create_payment(
            due_date=date(2024, 2, 15),
            check_number="CK-1",
            bank="Halk Bankası",
            company="ALTAY",
            business_group="KULU",
            amount=1500.25,
            description="Beton",
        )
        second = payments.create_payment(
            due_date=date(2024, 1, 5),
            check_number="CK-2",
            bank="Deniz Bank",
            company="ALTAY",
            business_group="AKSARAY",
            amount=99.0,
        )
        payments.set_status(second.id, PaymentStatus.PAID)
        UserService(state, admin).create_user("ayse", "parola1", Permissions(add=True))
        categories = CategoryService(state, admin)
        categories.add_item(CategoryKind.BANK, "Akbank")
        categories.move_item(CategoryKind.BANK, "Ziraat Bankası", 0)

        temp_db.save_state(state)

        other = _reopen(temp_db)
        try:
            loaded = other.load_state()
        finally:
            other.disconnect()

        assert loaded.payments == state.payments
        assert [p.id for p in loaded.payments] == [first.id, second.id]
        assert loaded.payments[1].status is PaymentStatus.PAID
        assert loaded.users == state.users
        assert loaded.categories == state.categories
        assert loaded.categories[CategoryKind.BANK].items[0] == "Ziraat Bankası"

    def test_save_replaces_previous_content(self, temp_db):
        state = temp_db.load_state(admin_password="123456")
        admin = state.users[0]
        service = PaymentService(state, admin)
        payment = service.create_payment(
            due_date=date(2024, 2, 15),
            check_number="CK-1",
            bank="Halk Bankası",
            company="ALTAY",
            business_group="KULU",
            amount=10,
        )
        temp_db.save_state(state)

        service.delete_payment(payment.id)
        UserService(state, admin).create_user("mehmet", "parola1", Permissions())
        CategoryService(state, admin).remove_item(CategoryKind.COMPANY, "ALTAY")
        temp_db.save_state(state)

        assert temp_db.list_payments() == []
        assert [u.username for u in temp_db.list_users()] == ["admin", "mehmet"]
        assert "ALTAY" not in temp_db.list_category_items(CategoryKind.COMPANY)

    def test_empty_category_is_kept_empty(self, temp_db):
        state = temp_db.load_state(admin_password="123456")
        admin = state.users[0]
        categories = CategoryService(state, admin)
        for item in DEFAULT_CATEGORY_ITEMS[CategoryKind.BUSINESS_GROUP]:
            categories.remove_item(CategoryKind.BUSINESS_GROUP, item)

        temp_db.save_state(state)

        assert temp_db.list_category_items(CategoryKind.BUSINESS_GROUP) == []
        assert temp_db.load_state().categories[CategoryKind.BUSINESS_GROUP].items == ()

    def test_failed_save_rolls_back(self, temp_db):
        state = temp_db.load_state(admin_password="123456")
        duplicate = state.users[0]
        state.users.append(duplicate)

        with pytest.raises(Exception):
            temp_db.save_state(state)

        state.users.pop()
        assert [u.username for u in temp_db.list_users()] == ["admin"]


class TestFactories:
    """Tests for create_sqlite_database."""

    def test_creates_missing_directories(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "paytrack.db"

        db = create_sqlite_database(database_path=str(path))
        db.connect()
        try:
            db.initialize_schema()
        finally:
            db.disconnect()

        assert path.exists()

    def test_environment_variable(self, tmp_path, monkeypatch):
        path = tmp_path / "env.db"
        monkeypatch.setenv("PAYTRACK_DB_PATH", str(path))

        db = create_sqlite_database()
        db.connect()
        try:
            db.initialize_schema()
        finally:
            db.disconnect()

        assert path.exists()

    def test_default_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))

        assert default_database_path() == tmp_path / ".paytrack" / "paytrack.db"
