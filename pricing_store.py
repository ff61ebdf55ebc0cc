# pricing_store.py
"""
Admin-edited pricing data, persisted with SQLAlchemy.

The global config is a single row; each technique table is one row keyed
by technique. Both are stored as JSON documents and validated into pydantic
models on load. init_db() seeds missing rows from tuning_knobs; loads only
ever read, so any number of quotes can load a snapshot in parallel.
"""
import logging
import os
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, Column, DateTime, String, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from pricing_config import PricingConfig, default_pricing_config
from pricing_engine import PricingSnapshot
from service_pricing import ServicePricingTables, default_service_pricing

logger = logging.getLogger(__name__)

# ----------------------------
# DB config
# ----------------------------
DATABASE_URL = os.environ.get("DATABASE_URL", "")
CONFIG_ID = "singleton"

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ----------------------------
# DB Models
# ----------------------------
class PricingConfigRecord(Base):
    __tablename__ = "pricing_config"

    id = Column(String, primary_key=True, default=CONFIG_ID)
    data = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now)


class ServicePricingRecord(Base):
    __tablename__ = "service_pricing"

    technique = Column(String, primary_key=True)  # screen_print / embroidery / direct_to_film
    data = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now)


class PricingStore:
    """Config provider + pricing table provider."""

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None):
        url = database_url or DATABASE_URL
        if engine is None and not url:
            raise RuntimeError("DB not configured (missing DATABASE_URL).")
        self.engine = engine or create_engine(url, pool_pre_ping=True)
        self.SessionLocal = sessionmaker(bind=self.engine)

    def init_db(self) -> None:
        Base.metadata.create_all(bind=self.engine)
        self.seed_defaults()

    def seed_defaults(self) -> None:
        """Insert tuning_knobs defaults for every row that does not exist yet."""
        db = self.SessionLocal()
        try:
            seeded = []
            if db.get(PricingConfigRecord, CONFIG_ID) is None:
                db.add(PricingConfigRecord(id=CONFIG_ID, data=default_pricing_config().model_dump(mode="json")))
                seeded.append("config")
            for table in default_service_pricing().as_list():
                if db.get(ServicePricingRecord, table.technique) is None:
                    db.add(ServicePricingRecord(technique=table.technique, data=table.model_dump(mode="json")))
                    seeded.append(table.technique)
            db.commit()
            if seeded:
                logger.info("Seeded default pricing: %s", ", ".join(seeded))
        except IntegrityError:
            # Another process seeded the same rows first.
            db.rollback()
            logger.info("Default pricing already seeded concurrently")
        finally:
            db.close()

    # ---- config ----
    def _load_config(self, db: Session) -> PricingConfig:
        record = db.get(PricingConfigRecord, CONFIG_ID)
        if record is None:
            logger.warning("No pricing config stored, using defaults (run init_db to seed)")
            return default_pricing_config()
        return PricingConfig.model_validate(record.data)

    def load_pricing_config(self) -> PricingConfig:
        db = self.SessionLocal()
        try:
            return self._load_config(db)
        finally:
            db.close()

    def save_pricing_config(self, config: PricingConfig) -> None:
        db = self.SessionLocal()
        try:
            record = db.get(PricingConfigRecord, CONFIG_ID)
            if record is None:
                db.add(PricingConfigRecord(id=CONFIG_ID, data=config.model_dump(mode="json")))
            else:
                record.data = config.model_dump(mode="json")
            db.commit()
        finally:
            db.close()
        logger.info("Pricing config saved")

    # ---- service tables ----
    def _load_tables(self, db: Session) -> ServicePricingTables:
        records = db.query(ServicePricingRecord).all()
        if not records:
            logger.warning("No service pricing stored, using defaults (run init_db to seed)")
            return default_service_pricing()
        return ServicePricingTables.from_list([r.data for r in records])

    def _write_tables(self, db: Session, tables: ServicePricingTables) -> None:
        for table in tables.as_list():
            record = db.get(ServicePricingRecord, table.technique)
            data = table.model_dump(mode="json")
            if record is None:
                db.add(ServicePricingRecord(technique=table.technique, data=data))
            else:
                record.data = data

    def load_service_pricing(self) -> ServicePricingTables:
        db = self.SessionLocal()
        try:
            return self._load_tables(db)
        finally:
            db.close()

    def save_service_pricing(self, tables: ServicePricingTables) -> None:
        db = self.SessionLocal()
        try:
            self._write_tables(db, tables)
            db.commit()
        finally:
            db.close()
        logger.info("Service pricing saved")

    # ---- snapshot ----
    def load_snapshot(self) -> PricingSnapshot:
        """Config and all tables read in one session / transaction."""
        db = self.SessionLocal()
        try:
            return PricingSnapshot(config=self._load_config(db), tables=self._load_tables(db))
        finally:
            db.close()
