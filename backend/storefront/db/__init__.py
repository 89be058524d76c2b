import importlib

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from storefront.config import settings
from storefront.utils.logging import get_logger

log = get_logger("db")

DATABASE_URL = settings.DATABASE_URL
connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    # TestClient and the FastAPI threadpool hand pooled connections across threads
    connect_args["check_same_thread"] = False
engine = create_engine(DATABASE_URL, future=True, echo=False, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# List of model modules we expect to import here (add new modules here)
MODEL_MODULES = [
    "storefront.models.category",
    "storefront.models.product",
    "storefront.models.cart_line",
    "storefront.models.order",
]


def init_db(reset: bool = False):
    """
    Initialize DB schema.

    Behavior:
      - If `reset` is passed or RESET_DB is set, drop & recreate tables.
      - Otherwise, leave existing tables in place.
      - If SEED_CATALOG is on, upsert the default catalog so a fresh
        database has something to browse.

    All model modules are imported first so metadata is populated.
    """
    for mod in MODEL_MODULES:
        importlib.import_module(mod)

    if reset or settings.RESET_DB:
        log.info("Resetting database schema")
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)
    log.info("Database initialized: %s", sorted(Base.metadata.tables.keys()))

    if settings.SEED_CATALOG:
        from storefront.db.seed import DEFAULT_CATALOG, seed_catalog

        s = SessionLocal()
        try:
            created = seed_catalog(s, DEFAULT_CATALOG)
            if created:
                log.info("Seeded %d catalog products", created)
        finally:
            s.close()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
