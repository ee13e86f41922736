from moviecatalog.db.session import SessionLocal
from moviecatalog.services.catalog_store import CatalogStore

_store = CatalogStore(SessionLocal)


async def get_store() -> CatalogStore:
    return _store
