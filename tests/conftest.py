"""
Pytest configuration and shared fixtures.
"""

import pytest
import json
from pathlib import Path
from typing import Any, Dict, List

from mallmatch.database import init_database, get_session
from mallmatch.logger import get_logger, reset_logger
from mallmatch.schema import BrandRecord


@pytest.fixture(autouse=True)
def quiet_logger(tmp_path):
    """Fresh global logger per test, file output kept under tmp_path."""
    reset_logger()
    logger = get_logger(log_dir=tmp_path / "logs", enable_console=False)
    yield logger
    reset_logger()


@pytest.fixture
def sample_brands() -> List[BrandRecord]:
    """Small catalog covering variations and a very short brand."""
    return [
        BrandRecord(brand_name="Nike", product_id="N1"),
        BrandRecord(brand_name="Marks & Spencer", product_id="MS1", variations="M&S|Marks and Spencer"),
        BrandRecord(brand_name="W", product_id="W1"),
        BrandRecord(brand_name="Titan", product_id="T1", offline_redeem_url="https://example.com/titan"),
    ]


@pytest.fixture
def sample_malls() -> List[Dict[str, Any]]:
    return [
        {
            "Name": "Phoenix Marketcity",
            "City": "Mumbai",
            "State": "Maharashtra",
            "directory": ["Nike Store", "Reebok Outlet", "Marks & Spencer", "Titan"],
        },
        {
            "Name": "Orion Mall",
            "City": "Bengaluru",
            "State": "Karnataka",
            "directory": ["Titan World Orion Mall", "W Store Deals"],
        },
        {
            "Name": "Empty Mall",
            "City": "Pune",
            "State": "Maharashtra",
            "directory": [],
        },
    ]


@pytest.fixture
def malls_file(tmp_path, sample_malls) -> Path:
    path = tmp_path / "malls.json"
    path.write_text(json.dumps(sample_malls), encoding="utf-8")
    return path


@pytest.fixture
def brands_csv(tmp_path) -> Path:
    """Catalog export without a product id column."""
    path = tmp_path / "brands.csv"
    path.write_text(
        "name,offline_redeemurl,Known Variations\n"
        "Nike,https://example.com/nike,\n"
        "Marks & Spencer,,M&S;Marks and Spencer\n"
        ",https://example.com/orphan,\n"
        "Titan,,\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def db_path(tmp_path) -> Path:
    path = tmp_path / "malls.db"
    init_database(path)
    return path


@pytest.fixture
def db_session(db_path):
    """Create a temporary database and return a session."""
    session = get_session(db_path)
    yield session
    session.close()
