import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from radiotrack.database import Base
from radiotrack.services.photo_store import FilePhotoStore
from radiotrack.storage import JsonFileStore, SqlRecordStore
import radiotrack.models  # noqa: F401 register all models


TEST_DB_URL = "sqlite:///:memory:"


@pytest.fixture(params=["json", "sql"])
def store(request, tmp_path):
    """Every store-level test runs against both backends."""
    if request.param == "json":
        yield JsonFileStore(tmp_path / "data")
        return
    engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield SqlRecordStore(sessionmaker(bind=engine))
    Base.metadata.drop_all(engine)


@pytest.fixture
def photos(tmp_path):
    return FilePhotoStore(tmp_path / "profile-images")
