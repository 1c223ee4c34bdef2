"""
Tests for database.py - SQLite database operations.
"""

import pytest
from datetime import datetime
from sqlalchemy.exc import IntegrityError

from mallmatch.database import MallRecord, init_database, get_session


class TestDatabaseInit:
    """Test database initialization."""

    def test_init_creates_database_file(self, tmp_path):
        """Test that init_database creates the database file."""
        db_path = tmp_path / "test.db"
        assert not db_path.exists()

        init_database(db_path)

        assert db_path.exists()

    def test_init_creates_tables(self, tmp_path):
        """Test that init_database creates the malls table."""
        db_path = tmp_path / "test.db"
        init_database(db_path)

        session = get_session(db_path)
        assert session.query(MallRecord).count() == 0
        session.close()

    def test_init_creates_parent_directories(self, tmp_path):
        """Test that init_database creates parent directories if missing."""
        db_path = tmp_path / "nested" / "dir" / "test.db"
        assert not db_path.parent.exists()

        init_database(db_path)

        assert db_path.exists()


class TestMallRecord:
    """Test MallRecord persistence and serialization."""

    @pytest.fixture
    def sample_record(self):
        return MallRecord(
            mall_key="orion mall|bengaluru|karnataka",
            mall_name="Orion Mall",
            city="Bengaluru",
            state="Karnataka",
            products=[{"brandName": "Nike", "productId": "N1", "storeName": "Nike Store"}],
            threshold=70,
        )

    def test_create_and_read(self, db_session, sample_record):
        db_session.add(sample_record)
        db_session.commit()

        result = db_session.get(MallRecord, "orion mall|bengaluru|karnataka")
        assert result is not None
        assert result.products[0]["brandName"] == "Nike"
        assert result.created_at is not None
        assert result.updated_at is not None

    def test_missing_required_fields_fails(self, db_session):
        db_session.add(MallRecord(mall_key="x||"))
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_duplicate_key_fails(self, db_session, sample_record):
        db_session.add(sample_record)
        db_session.commit()

        db_session.expunge_all()
        db_session.add(MallRecord(
            mall_key="orion mall|bengaluru|karnataka",
            mall_name="Other",
            products=[],
        ))
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_to_summary(self, sample_record):
        assert sample_record.to_summary() == {
            "mallKey": "orion mall|bengaluru|karnataka",
            "mallName": "Orion Mall",
            "city": "Bengaluru",
            "state": "Karnataka",
            "productsCount": 1,
        }

    def test_to_dict(self, sample_record):
        sample_record.created_at = datetime(2024, 1, 2, 3, 4, 5)
        data = sample_record.to_dict()
        assert data["products"] == sample_record.products
        assert data["threshold"] == 70
        assert data["createdAt"] == "2024-01-02T03:04:05"
        assert data["updatedAt"] is None
