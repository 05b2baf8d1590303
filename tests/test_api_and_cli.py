"""End-to-end through the public API and the Typer CLI with a file-backed DB."""

from __future__ import annotations

from pathlib import Path

import pytest
from db.client import session_scope
from sqlalchemy.orm import Session
from typer.testing import CliRunner

import spending_tracker
from spending_tracker import logging_setup
from spending_tracker.cli import app
from spending_tracker.importer import FEEDBACK_ALREADY_IMPORTED
from spending_tracker.persistence import count_expenses
from tests.helpers.csv_files import write_csv
from tests.helpers.db import make_account, make_expense, make_user


@pytest.fixture(autouse=True)
def _quiet_cli_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    # CliRunner swaps sys.stderr per invocation; keep the package logger unconfigured.
    monkeypatch.setattr(logging_setup, "_configured", True)


HEADERS = ["Posted Date", "Payee", "Amount"]
ROWS = [
    ["02/01/2026", "Starbucks", "-5.50"],
    ["02/02/2026", "Amazon", "-42.99"],
    ["02/03/2026", "Online Payment", "100.00"],
]


@pytest.fixture
def seeded(session: Session) -> dict[str, int]:
    """Commit a user with one account and one manual expense; return their ids."""

    user = make_user(session)
    account = make_account(session, user, name="Checking")
    manual = make_expense(session, account, merchant="Coffee", amount=550, on="2026-01-31")
    ids = {"user_id": user.id, "account_id": account.id, "manual_id": manual.id}
    session.commit()
    return ids


def test_api_preview_then_confirm(db_url: str, seeded: dict[str, int], tmp_path: Path) -> None:
    csv_path = write_csv(tmp_path / "statement.csv", HEADERS, ROWS)
    ids = {"user_id": seeded["user_id"], "account_id": seeded["account_id"]}

    preview = spending_tracker.parse_csv_import(csv_path, database_url=db_url, **ids)
    assert [m.expense_id for m in preview.match_candidates] == [seeded["manual_id"]]
    assert [r.merchant for r in preview.import_candidates] == ["Amazon"]

    # The host keeps the preview as JSON between requests.
    summary = spending_tracker.commit_import(
        preview.model_dump(mode="json"), database_url=db_url, **ids
    )
    assert (summary.created, summary.matched) == (1, 1)

    with session_scope(database_url=db_url) as s:
        assert count_expenses(s, user_id=ids["user_id"], account_id=ids["account_id"]) == 2

    again = spending_tracker.parse_csv_import(csv_path, database_url=db_url, **ids)
    assert again.is_empty
    assert again.feedback == FEEDBACK_ALREADY_IMPORTED


def test_api_text_variant_uses_given_session(session: Session, seeded: dict[str, int]) -> None:
    text = "Date,Description,Amount\n2026-02-10,Lyft,-18.00\n"
    result = spending_tracker.parse_csv_import_text(
        text, user_id=seeded["user_id"], account_id=seeded["account_id"], session=session
    )
    assert [(r.merchant, r.amount) for r in result.import_candidates] == [("Lyft", 1800)]


def test_api_commit_forbidden_for_other_user(
    db_url: str, seeded: dict[str, int], tmp_path: Path
) -> None:
    csv_path = write_csv(tmp_path / "statement.csv", HEADERS, ROWS)
    preview = spending_tracker.parse_csv_import(
        csv_path, user_id=seeded["user_id"], account_id=seeded["account_id"], database_url=db_url
    )
    with pytest.raises(spending_tracker.AuthorizationError):
        spending_tracker.commit_import(
            preview,
            user_id=seeded["user_id"] + 100,
            account_id=seeded["account_id"],
            database_url=db_url,
        )


def test_api_requires_database_url(tmp_path: Path) -> None:
    with pytest.raises(RuntimeError):
        spending_tracker.parse_csv_import(tmp_path / "x.csv", user_id=1, account_id=1)


# ---- CLI ---------------------------------------------------------------------


def _invoke(*args: str):
    return CliRunner().invoke(app, list(args))


def test_cli_dry_run_writes_nothing(db_url: str, seeded: dict[str, int], tmp_path: Path) -> None:
    csv_path = write_csv(tmp_path / "statement.csv", HEADERS, ROWS)
    res = _invoke(
        "import-csv",
        "--csv-path",
        str(csv_path),
        "--account-id",
        str(seeded["account_id"]),
        "--user-id",
        str(seeded["user_id"]),
        "--database-url",
        db_url,
        "--dry-run",
    )
    assert res.exit_code == 0, res.output
    assert "Amazon" in res.output

    with session_scope(database_url=db_url) as s:
        assert count_expenses(s, user_id=seeded["user_id"]) == 1


def test_cli_import_commits_everything(
    db_url: str, seeded: dict[str, int], tmp_path: Path
) -> None:
    csv_path = write_csv(tmp_path / "statement.csv", HEADERS, ROWS)
    args = [
        "import-csv",
        "--csv-path",
        str(csv_path),
        "--account-id",
        str(seeded["account_id"]),
        "--user-id",
        str(seeded["user_id"]),
        "--database-url",
        db_url,
    ]
    res = _invoke(*args)
    assert res.exit_code == 0, res.output
    assert "Imported 1 new expense(s), reconciled 1 manual entry." in res.output

    res = _invoke(*args)
    assert res.exit_code == 0, res.output
    assert FEEDBACK_ALREADY_IMPORTED in res.output


def test_cli_import_into_foreign_account_fails(
    db_url: str, seeded: dict[str, int], tmp_path: Path
) -> None:
    csv_path = write_csv(tmp_path / "statement.csv", HEADERS, ROWS)
    res = _invoke(
        "import-csv",
        "--csv-path",
        str(csv_path),
        "--account-id",
        str(seeded["account_id"]),
        "--user-id",
        str(seeded["user_id"] + 100),
        "--database-url",
        db_url,
    )
    assert res.exit_code == 1


@pytest.mark.parametrize("user_offset, account_offset", [(100, 0), (0, 100)])
def test_cli_dry_run_checks_account_ownership(
    db_url: str, seeded: dict[str, int], tmp_path: Path, user_offset: int, account_offset: int
) -> None:
    csv_path = write_csv(tmp_path / "statement.csv", HEADERS, ROWS)
    res = _invoke(
        "import-csv",
        "--csv-path",
        str(csv_path),
        "--account-id",
        str(seeded["account_id"] + account_offset),
        "--user-id",
        str(seeded["user_id"] + user_offset),
        "--database-url",
        db_url,
        "--dry-run",
    )
    assert res.exit_code == 1
    assert "Amazon" not in res.output


def test_cli_accounts_create_list_delete(db_url: str, seeded: dict[str, int]) -> None:
    user_id = str(seeded["user_id"])

    res = _invoke(
        "accounts", "create", "Travel Card", "--user-id", user_id, "--database-url", db_url
    )
    assert res.exit_code == 0, res.output
    assert "Created account" in res.output

    res = _invoke("accounts", "list", "--user-id", user_id, "--database-url", db_url)
    assert res.exit_code == 0, res.output
    assert "Checking" in res.output
    assert "Travel Card" in res.output

    res = _invoke(
        "accounts",
        "delete",
        str(seeded["account_id"]),
        "--user-id",
        user_id,
        "--database-url",
        db_url,
    )
    assert res.exit_code == 0, res.output
    with session_scope(database_url=db_url) as s:
        assert count_expenses(s, user_id=seeded["user_id"]) == 0


def test_cli_user_id_from_environment(
    db_url: str, seeded: dict[str, int], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("SPENDING_TRACKER_DEFAULT_USER_ID", str(seeded["user_id"]))
    res = _invoke("accounts", "list", "--database-url", db_url)
    assert res.exit_code == 0, res.output
    assert "Checking" in res.output
