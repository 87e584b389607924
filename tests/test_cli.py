"""Tests for the command line interface."""

import json
import os
import re

import pytest
from openpyxl import Workbook

from paytrack.cli.main import cli
from paytrack.domain.tabular_import import EXPECTED_COLUMNS


def _add(run_cli, check_number="CK-001", due_date="15.02.2024", amount="1500",
         bank="Halk Bankası", company="ALTAY", group="KULU", description=""):
    result = run_cli(
        "add",
        "--due-date", due_date,
        "--check-number", check_number,
        "--bank", bank,
        "--company", company,
        "--business-group", group,
        "--amount", amount,
        "--description", description,
    )
    assert result.exit_code == 0, result.output
    return re.search(r"Added payment (\w+)", result.output).group(1)


class TestLogin:
    """Tests for authentication on every invocation."""

    def test_help_needs_no_login(self, cli_runner):
        result = cli_runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "Paytrack" in result.output

    def test_command_help_needs_no_login(self, cli_runner, db_path):
        result = cli_runner.invoke(cli, ["--db-path", db_path, "add", "--help"], input="")

        assert result.exit_code == 0
        assert "Usage:" in result.output
        assert "Username" not in result.output
        assert not os.path.exists(db_path)

    def test_nested_command_help_needs_no_login(self, cli_runner, db_path):
        result = cli_runner.invoke(cli, ["--db-path", db_path, "category", "add", "--help"], input="")

        assert result.exit_code == 0
        assert "Usage:" in result.output
        assert not os.path.exists(db_path)

    def test_version_needs_no_login(self, cli_runner):
        result = cli_runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "paytrack" in result.output

    def test_wrong_password(self, run_cli):
        result = run_cli("list", password="wrong")

        assert result.exit_code == 1
        assert "Invalid username or password" in result.output

    def test_password_from_environment(self, cli_runner, db_path, monkeypatch):
        monkeypatch.setenv("PAYTRACK_USER", "admin")
        monkeypatch.setenv("PAYTRACK_PASSWORD", "123456")

        result = cli_runner.invoke(cli, ["--db-path", db_path, "list"])

        assert result.exit_code == 0
        assert "No payments found." in result.output

    def test_prompted_credentials(self, cli_runner, db_path):
        result = cli_runner.invoke(cli, ["--db-path", db_path, "list"], input="admin\n123456\n")

        assert result.exit_code == 0
        assert "No payments found." in result.output


class TestPaymentCommands:
    """Tests for add, edit, delete, status and list."""

    def test_add_and_list(self, run_cli):
        _add(run_cli, description="Beton")

        result = run_cli("list")

        assert result.exit_code == 0
        assert "CK-001" in result.output
        assert "₺1.500,00" in result.output
        assert "1 payment(s), total ₺1.500,00" in result.output

    def test_add_turkish_amount(self, run_cli):
        _add(run_cli, amount="1.234,56")

        assert "₺1.234,56" in run_cli("list").output

    def test_add_unknown_bank(self, run_cli):
        result = run_cli(
            "add", "--due-date", "15.02.2024", "--check-number", "CK-1",
            "--bank", "Akbank", "--company", "ALTAY", "--business-group", "KULU",
            "--amount", "10",
        )

        assert result.exit_code == 1
        assert "Unknown bank 'Akbank'" in result.output

    def test_add_invalid_amount(self, run_cli):
        result = run_cli(
            "add", "--due-date", "15.02.2024", "--check-number", "CK-1",
            "--bank", "Halk Bankası", "--company", "ALTAY", "--business-group", "KULU",
            "--amount", "-10",
        )

        assert result.exit_code == 1
        assert "Amount must be a positive number" in result.output

    def test_add_invalid_date(self, run_cli):
        result = run_cli(
            "add", "--due-date", "31.02.2024", "--check-number", "CK-1",
            "--bank", "Halk Bankası", "--company", "ALTAY", "--business-group", "KULU",
            "--amount", "10",
        )

        assert result.exit_code == 1
        assert "Invalid date format" in result.output

    def test_edit(self, run_cli):
        payment_id = _add(run_cli)

        result = run_cli("edit", payment_id, "--amount", "2000", "--bank", "Deniz Bank")

        assert result.exit_code == 0, result.output
        listing = run_cli("list", "--bank", "Deniz Bank").output
        assert "₺2.000,00" in listing

    def test_edit_without_changes(self, run_cli):
        payment_id = _add(run_cli)

        result = run_cli("edit", payment_id)

        assert result.exit_code == 1
        assert "No changes given" in result.output

    def test_pay_hides_payment_from_default_list(self, run_cli):
        payment_id = _add(run_cli)

        result = run_cli("pay", payment_id)

        assert result.exit_code == 0
        assert "is now paid" in result.output
        assert "No payments found." in run_cli("list").output
        assert "CK-001" in run_cli("list", "--include-paid").output
        assert "CK-001" in run_cli("list", "--status", "paid").output

    def test_toggle_and_unpay(self, run_cli):
        payment_id = _add(run_cli)

        assert "is now paid" in run_cli("toggle", payment_id).output
        assert "is now unpaid" in run_cli("unpay", payment_id).output

    def test_delete(self, run_cli):
        payment_id = _add(run_cli)

        result = run_cli("delete", payment_id, "--yes")

        assert result.exit_code == 0
        assert "No payments found." in run_cli("list").output

    def test_delete_cancelled(self, run_cli):
        payment_id = _add(run_cli)

        result = run_cli("delete", payment_id, input="n\n")

        assert "Deletion cancelled." in result.output
        assert "CK-001" in run_cli("list").output

    def test_unknown_payment(self, run_cli):
        result = run_cli("pay", "doesnotexist")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_list_filters(self, run_cli):
        _add(run_cli, check_number="CK-001", due_date="15.01.2024", amount="1500")
        _add(run_cli, check_number="CK-002", due_date="15.02.2024", amount="250",
             bank="Ziraat Bankası")
        _add(run_cli, check_number="AB-003", due_date="20.02.2024", amount="2150",
             company="ONURAY İNŞAAT")

        feb = run_cli("list", "--month", "2024-02").output
        assert "CK-002" in feb and "AB-003" in feb and "CK-001" not in feb

        banks = run_cli("list", "--bank", "Ziraat Bankası", "--bank", "Deniz Bank").output
        assert "CK-002" in banks and "CK-001" not in banks

        amount = run_cli("list", "--amount", "150").output
        assert "CK-001" in amount and "AB-003" in amount and "CK-002" not in amount

        check = run_cli("list", "--check-number", "ab").output
        assert "AB-003" in check and "CK-001" not in check

    def test_list_invalid_month(self, run_cli):
        result = run_cli("list", "--month", "2024-13")

        assert result.exit_code == 1
        assert "Invalid month" in result.output


class TestPermissions:
    """Refused actions report a notice and change nothing."""

    def test_viewer_cannot_add(self, run_cli):
        result = run_cli("user", "create", "viewer", "--new-password", "viewer-pass")
        assert result.exit_code == 0, result.output

        result = run_cli(
            "add", "--due-date", "15.02.2024", "--check-number", "CK-1",
            "--bank", "Halk Bankası", "--company", "ALTAY", "--business-group", "KULU",
            "--amount", "10",
            user="viewer", password="viewer-pass",
        )

        assert result.exit_code == 1
        assert "Notice: You do not have permission to add payments" in result.output
        assert "No payments found." in run_cli("list").output


class TestSummaryCommand:
    """Tests for the summary command."""

    def test_summary(self, run_cli):
        _add(run_cli, check_number="CK-001", due_date="15.01.2024", amount="1500")
        paid_id = _add(run_cli, check_number="CK-002", due_date="20.01.2024", amount="500",
                       bank="Ziraat Bankası")
        run_cli("pay", paid_id)

        result = run_cli("summary", "--as-of", "2024-01-25")

        assert result.exit_code == 0, result.output
        assert "Payments:          2" in result.output
        assert "Total amount:      ₺2.000,00" in result.output
        assert "Paid:              ₺500,00" in result.output
        assert "Pending:           ₺1.500,00" in result.output
        assert "All payments by bank" in result.output

    def test_summary_group_by_company(self, run_cli):
        _add(run_cli, company="ONURAY İNŞAAT")

        result = run_cli("summary", "--group-by", "company")

        assert "All payments by company" in result.output
        assert "ONURAY İNŞAAT" in result.output


class TestImportCommand:
    """Tests for the import command."""

    def _workbook(self, tmp_path, rows):
        path = tmp_path / "cekler.xlsx"
        workbook = Workbook()
        sheet = workbook.active
        sheet.append(list(EXPECTED_COLUMNS))
        for row in rows:
            sheet.append(row)
        workbook.save(path)
        return str(path)

    def test_import_asks_about_past_due(self, run_cli, tmp_path):
        path = self._workbook(tmp_path, [
            ["01.01.2020", "CK1", "BankA", "Co1", "GroupX", "desc", 100],
            ["01.01.2099", "CK2", "BankA", "Co2", "GroupY", "desc2", 200],
        ])

        result = run_cli("import", path, "--as-of", "2024-01-01", input="y\n")

        assert result.exit_code == 0, result.output
        assert "1 payment(s) are past due (total ₺100,00)" in result.output
        assert "Imported: 2 payments (₺300,00)" in result.output
        assert "Marked as paid: 1" in result.output
        listing = run_cli("list").output
        assert "CK2" in listing and "CK1" not in listing

    def test_import_keep_pending(self, run_cli, tmp_path):
        path = self._workbook(tmp_path, [
            ["01.01.2020", "CK1", "BankA", "Co1", "GroupX", "", 100],
        ])

        result = run_cli("import", path, "--keep-pending")

        assert result.exit_code == 0, result.output
        assert "past due" not in result.output
        assert "CK1" in run_cli("list").output

    def test_import_reports_skipped_rows(self, run_cli, tmp_path):
        path = self._workbook(tmp_path, [
            ["01.01.2099", "CK1", "BankA", "Co1", "GroupX", "", 100],
            ["01.01.2099", "", "BankA", "Co1", "GroupX", "", 100],
            ["someday", "CK3", "BankA", "Co1", "GroupX", "", 50],
        ])

        result = run_cli("import", path, "--keep-pending")

        assert result.exit_code == 0, result.output
        assert "Skipped 1 invalid row(s): 3" in result.output
        assert "using today for row(s): 4" in result.output

    def test_import_wrong_header(self, run_cli, tmp_path):
        path = tmp_path / "bozuk.csv"
        path.write_text("a,b,c\n1,2,3\n", encoding="utf-8")

        result = run_cli("import", str(path))

        assert result.exit_code == 1
        assert "Spreadsheet must have the columns in this order" in result.output


class TestBackupCommands:
    """Tests for backup and restore."""

    def test_backup_and_restore(self, run_cli, tmp_path):
        _add(run_cli, check_number="CK-001")
        _add(run_cli, check_number="CK-002")
        backup_file = tmp_path / "yedek.json"

        result = run_cli("backup", str(backup_file))
        assert result.exit_code == 0, result.output
        assert len(json.loads(backup_file.read_text(encoding="utf-8"))) == 2

        run_cli("clear", "--confirm-password", "123456")
        assert "No payments found." in run_cli("list").output

        result = run_cli("restore", str(backup_file), "--yes")

        assert result.exit_code == 0, result.output
        assert "Restored 2 payments" in result.output
        listing = run_cli("list").output
        assert "CK-001" in listing and "CK-002" in listing

    def test_backup_into_directory(self, run_cli, tmp_path):
        result = run_cli("backup", str(tmp_path))

        assert result.exit_code == 0
        assert list(tmp_path.glob("odeme_takip_yedek_*.json"))

    def test_restore_invalid_backup_lists_problems(self, run_cli, tmp_path):
        path = tmp_path / "bozuk.json"
        path.write_text(json.dumps([{"id": "x", "amount": "10", "status": "paid"}]), encoding="utf-8")

        result = run_cli("restore", str(path), "--yes")

        assert result.exit_code == 1
        assert "record 0: amount: must be a number" in result.output
        assert "record 0: checkNumber: is required" in result.output


class TestClearCommand:
    """Tests for the clear command."""

    def test_clear_with_wrong_password(self, run_cli):
        _add(run_cli)

        result = run_cli("clear", input="yanlis\n")

        assert result.exit_code == 1
        assert "Invalid password" in result.output
        assert "CK-001" in run_cli("list").output

    def test_clear_with_prompted_password(self, run_cli):
        _add(run_cli)

        result = run_cli("clear", input="123456\n")

        assert result.exit_code == 0, result.output
        assert "Deleted 1 payments" in result.output


class TestExportCommands:
    """Tests for export commands."""

    @pytest.mark.parametrize(
        "kind, filename, magic",
        [
            ("excel", "rapor.xlsx", b"PK"),
            ("pdf", "rapor.pdf", b"%PDF"),
            ("image", "rapor.jpg", b"\xff\xd8"),
        ],
    )
    def test_export(self, run_cli, tmp_path, kind, filename, magic):
        _add(run_cli)
        output = tmp_path / filename

        result = run_cli("export", kind, "-o", str(output))

        assert result.exit_code == 0, result.output
        assert "Exported 1 payments" in result.output
        assert output.read_bytes().startswith(magic)

    def test_export_nothing(self, run_cli, tmp_path):
        result = run_cli("export", "excel", "-o", str(tmp_path / "bos.xlsx"))

        assert result.exit_code == 0
        assert "nothing to export" in result.output


class TestCategoryCommands:
    """Tests for category commands."""

    def test_list(self, run_cli):
        result = run_cli("category", "list", "bank")

        assert result.exit_code == 0
        assert "Halk Bankası" in result.output
        assert "ALTAY" not in result.output

    def test_add_move_and_remove(self, run_cli):
        assert run_cli("category", "add", "bank", "Akbank").exit_code == 0

        result = run_cli("category", "move", "bank", "Deniz Bank", "1")
        assert result.exit_code == 0, result.output
        assert "  1. Deniz Bank" in run_cli("category", "list", "bank").output

        assert run_cli("category", "remove", "bank", "Akbank").exit_code == 0
        assert "Akbank" not in run_cli("category", "list", "bank").output

    def test_remove_referenced_item_is_refused(self, run_cli):
        _add(run_cli, bank="Deniz Bank")

        result = run_cli("category", "remove", "bank", "Deniz Bank")

        assert result.exit_code == 1
        assert "Cannot remove 'Deniz Bank': it is used by 1 payment." in result.output
        assert "Deniz Bank" in run_cli("category", "list", "bank").output

    def test_stats(self, run_cli):
        _add(run_cli, group="AKSARAY", amount="300")
        _add(run_cli, group="AKSARAY", amount="200")

        result = run_cli("category", "stats", "business-group", "--search", "aks")

        assert result.exit_code == 0
        assert "AKSARAY" in result.output
        assert "₺500,00" in result.output
        assert "KULU" not in result.output


class TestUserCommands:
    """Tests for user commands."""

    def test_create_list_update_delete(self, run_cli):
        result = run_cli("user", "create", "ayse", "--new-password", "parola1",
                         "--perm", "add", "--perm", "change-status")
        assert result.exit_code == 0, result.output
        assert "add, change-status" in result.output

        listing = run_cli("user", "list").output
        assert "admin *" in listing and "ayse" in listing

        result = run_cli("user", "update", "ayse", "--no-permissions")
        assert "Permissions of 'ayse': (none)" in result.output

        result = run_cli("user", "delete", "ayse", "--yes")
        assert result.exit_code == 0
        assert "ayse" not in run_cli("user", "list").output

    def test_cannot_delete_self(self, run_cli):
        result = run_cli("user", "delete", "admin", "--yes")

        assert result.exit_code == 1
        assert "You cannot delete your own account" in result.output

    def test_change_own_password(self, run_cli):
        result = run_cli("user", "passwd", input="123456\nyeni-parola\nyeni-parola\n")

        assert result.exit_code == 0, result.output
        assert run_cli("list").exit_code == 1
        assert run_cli("list", password="yeni-parola").exit_code == 0
