# saas_architect/db.py
import json
import uuid
from typing import Optional, Dict, Any, List, Callable

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base, Session
from sqlalchemy.exc import SQLAlchemyError

from saas_architect import config
from saas_architect import monitoring

DATABASE_URL = config.database_url()


def _make_engine(url: str):
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


engine = _make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


class PersistenceError(Exception):
    """A generation record could not be written or read."""


def reconfigure(url: str):
    """Reconfigure the DB engine and session factory at runtime (for tests)."""
    global engine, SessionLocal
    engine = _make_engine(url)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db():
    """Create tables if they don't exist. Failure is logged, not raised."""
    try:
        import saas_architect.models as models  # noqa: F401
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError:
        monitoring.logger.exception("DB init failed")


def _loads(raw: Optional[str], default):
    if raw is None:
        return default
    if not isinstance(raw, str):
        return raw
    return json.loads(raw)


def record_to_dict(rec) -> Dict[str, Any]:
    created = rec.created_at
    return {
        "id": rec.id,
        "idea": rec.idea,
        "roles_input": rec.roles_input,
        "monetization_type": rec.monetization_type,
        "tenant_type": rec.tenant_type,
        "tech_stack": _loads(rec.tech_stack, []),
        "ai_response": _loads(rec.ai_response, {}),
        "created_at": created.isoformat() if hasattr(created, "isoformat") else created,
    }


class GenerationStore:
    """
    create / find_by_id / find_all over the generations table.

    tech_stack and ai_response are stored as JSON text and decoded on every
    read. Rows are never updated or deleted here.
    """

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        self._session_factory = session_factory

    def _session(self) -> Session:
        # resolve lazily so reconfigure() is honoured
        factory = self._session_factory or SessionLocal
        return factory()

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a record. fields:
          - idea (str)
          - roles_input (str)
          - monetization_type (str)
          - tenant_type (str)
          - tech_stack (list)
          - ai_response (dict)
        Returns the stored record as a dict; raises PersistenceError.
        """
        from saas_architect.models import GenerationRecord

        db = self._session()
        try:
            rec = GenerationRecord(
                id=str(uuid.uuid4()),
                idea=fields["idea"],
                roles_input=fields["roles_input"],
                monetization_type=fields["monetization_type"],
                tenant_type=fields["tenant_type"],
                tech_stack=json.dumps(fields.get("tech_stack") or []),
                ai_response=json.dumps(fields.get("ai_response") or {}),
            )
            db.add(rec)
            db.commit()
            db.refresh(rec)
            return record_to_dict(rec)
        except SQLAlchemyError as e:
            db.rollback()
            monitoring.inc_persistence_failure()
            monitoring.logger.exception("DB save error")
            raise PersistenceError(f"Failed to save generation: {e}") from e
        finally:
            db.close()

    def find_by_id(self, generation_id: str) -> Optional[Dict[str, Any]]:
        """Return the stored record as a dict or None."""
        from saas_architect.models import GenerationRecord

        db = self._session()
        try:
            rec = db.query(GenerationRecord).filter(GenerationRecord.id == generation_id).first()
            return record_to_dict(rec) if rec else None
        except (SQLAlchemyError, ValueError) as e:
            monitoring.logger.exception("DB read error", extra={"generation_id": generation_id})
            raise PersistenceError(f"Failed to read generation: {e}") from e
        finally:
            db.close()

    def find_all(self) -> List[Dict[str, Any]]:
        """All records, newest first."""
        from saas_architect.models import GenerationRecord

        db = self._session()
        try:
            rows = db.query(GenerationRecord).order_by(GenerationRecord.created_at.desc()).all()
            return [record_to_dict(r) for r in rows]
        except (SQLAlchemyError, ValueError) as e:
            monitoring.logger.exception("DB list error")
            raise PersistenceError(f"Failed to list generations: {e}") from e
        finally:
            db.close()
