from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from fleetlead.database.exceptions import CompanyNotFoundError
from fleetlead.database.models import CompanyStatus
from fleetlead.database.repositories.company_repository import CompanyRepository
from fleetlead.dedup.merge import CompanyCandidate, UpsertOutcome

_MODULE = "fleetlead.database.repositories.company_repository"


def _row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": "11111111-1111-1111-1111-111111111111",
        "name": "ABC Plumbing",
        "normalized_name": "abc plumbing",
        "email": ["info@abc.com"],
        "phone": ["5551234567"],
        "industry": ["plumbing"],
        "city": "Austin",
        "state": "",
        "website": "",
        "revenue": None,
        "sic_codes": None,
        "naics_codes": None,
        "primary_industry": None,
        "zoominfo_id": None,
        "status": CompanyStatus.ENRICHING,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    row.update(overrides)
    return row


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


def _executed_sql(mock_conn: MagicMock) -> list[str]:
    return [str(c.args[0]) for c in mock_conn.execute.call_args_list]


class TestUpsertInsert:
    @patch(f"{_MODULE}.get_connection")
    def test_inserts_when_nothing_matches(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = []

        result = CompanyRepository().upsert_company(CompanyCandidate(name="New Co Heating"))

        assert result.outcome == UpsertOutcome.INSERTED
        assert result.needs_enrichment is True
        assert any("INSERT INTO companies" in s for s in _executed_sql(mock_conn))
        mock_conn.commit.assert_called_once()

    @patch(f"{_MODULE}.get_connection")
    def test_takes_advisory_locks_before_lookup(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = []

        CompanyRepository().upsert_company(
            CompanyCandidate(name="New Co", email="a@b.com", phone="555")
        )

        lock_calls = [
            c for c in mock_conn.execute.call_args_list if "pg_advisory_xact_lock" in c.args[0]
        ]
        assert [c.args[1][0] for c in lock_calls] == [
            "company:email:a@b.com",
            "company:name:new",
            "company:phone:555",
        ]

    def test_rejects_blank_name(self) -> None:
        with pytest.raises(ValueError, match="name is required"):
            CompanyRepository().upsert_company(CompanyCandidate(name="  "))


class TestUpsertMerge:
    @patch(f"{_MODULE}.get_connection")
    def test_merges_into_name_match(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = [_row()]

        result = CompanyRepository().upsert_company(
            CompanyCandidate(name="abc plumbing inc", phone="555-000-1111")
        )

        assert result.outcome == UpsertOutcome.MERGED
        assert result.company_id == "11111111-1111-1111-1111-111111111111"
        assert result.needs_enrichment is False
        update = next(
            c for c in mock_conn.execute.call_args_list if "UPDATE companies" in c.args[0]
        )
        assert update.args[1][1] == ["5551234567", "5550001111"]

    @patch(f"{_MODULE}.get_connection")
    def test_skips_update_when_nothing_changed(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = [_row()]

        result = CompanyRepository().upsert_company(CompanyCandidate(name="ABC Plumbing"))

        assert result.outcome == UpsertOutcome.MERGED
        assert not any("UPDATE companies" in s for s in _executed_sql(mock_conn))

    @patch(f"{_MODULE}.get_connection")
    def test_revived_company_needs_enrichment(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = [_row(status=None)]

        result = CompanyRepository().upsert_company(CompanyCandidate(name="ABC Plumbing"))

        assert result.needs_enrichment is True


class TestUpsertSkip:
    @patch(f"{_MODULE}.get_connection")
    def test_sent_company_is_left_alone(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = [_row(status=CompanyStatus.SENT)]

        result = CompanyRepository().upsert_company(
            CompanyCandidate(name="ABC Plumbing", email="new@abc.com", state="TX")
        )

        assert result.outcome == UpsertOutcome.SKIPPED
        assert result.reason == "already contacted"
        assert not any("UPDATE companies" in s for s in _executed_sql(mock_conn))
        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()


class TestFindById:
    @patch(f"{_MODULE}.get_connection")
    def test_returns_company(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _row(zoominfo_id=42)

        company = CompanyRepository().find_by_id("11111111-1111-1111-1111-111111111111")

        assert company is not None
        assert company.name == "ABC Plumbing"
        assert company.zoominfo_id == 42

    @patch(f"{_MODULE}.get_connection")
    def test_returns_none_when_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        assert CompanyRepository().find_by_id("missing") is None


class TestStatusUpdates:
    @patch(f"{_MODULE}.get_connection")
    def test_update_status_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 1

        assert CompanyRepository().update_status("c-1", CompanyStatus.NOT_FOUND) is True

        assert mock_cursor.execute.call_args.args[1] == (
            CompanyStatus.NOT_FOUND,
            None,
            "c-1",
            CompanyStatus.SENT,
        )
        mock_conn.commit.assert_called_once()

    @patch(f"{_MODULE}.get_connection")
    def test_update_status_raises_when_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0
        mock_cursor.fetchone.return_value = None

        with pytest.raises(CompanyNotFoundError, match="Company c-9 not found"):
            CompanyRepository().update_status("c-9", CompanyStatus.ERROR)

    @patch(f"{_MODULE}.get_connection")
    def test_record_enrichment_raises_when_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0
        mock_cursor.fetchone.return_value = None

        with pytest.raises(CompanyNotFoundError):
            CompanyRepository().record_enrichment(
                "c-9",
                status=CompanyStatus.PROCESSED,
                zoominfo_id=1,
                revenue=None,
                sic_codes=None,
                naics_codes=None,
                primary_industry=None,
            )

    @patch(f"{_MODULE}.get_connection")
    def test_update_status_leaves_contacted_company(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0
        mock_cursor.fetchone.return_value = (1,)

        assert CompanyRepository().update_status("c-1", CompanyStatus.ERROR) is False

        update_sql = str(mock_cursor.execute.call_args_list[0].args[0])
        assert "status IS DISTINCT FROM %s" in update_sql
        mock_conn.commit.assert_called_once()

    @patch(f"{_MODULE}.get_connection")
    def test_record_enrichment_leaves_contacted_company(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0
        mock_cursor.fetchone.return_value = (1,)

        updated = CompanyRepository().record_enrichment(
            "c-1",
            status=CompanyStatus.PROCESSED,
            zoominfo_id=1,
            revenue=3_000_000,
            sic_codes=None,
            naics_codes=None,
            primary_industry=None,
        )

        assert updated is False
        assert mock_cursor.execute.call_args_list[0].args[1][-1] == CompanyStatus.SENT
