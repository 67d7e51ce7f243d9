"""SQLite storage layer for btmm.

The tournament is saved as one row holding the whole state as JSON, so
every save replaces the previous state in a single transaction.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from sqlalchemy import Column, DateTime, Integer, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

from btmm.models import TournamentState

Base = declarative_base()

CURRENT_STATE_ID = 1


# ============================================================================
# ORM Models
# ============================================================================


class TournamentStateORM(Base):
    """Tournament state table.

    Holds a single row (id 1) with the current tournament.
    """

    __tablename__ = "tournament_state"

    id = Column(Integer, primary_key=True)
    phase = Column(String(20), nullable=False, default="registration")
    state_json = Column(Text, nullable=False, default="{}")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def state(self) -> dict:
        """Get the state dict from JSON."""
        return json.loads(self.state_json)

    @state.setter
    def state(self, value: dict):
        """Set the state dict as JSON."""
        self.state_json = json.dumps(value, ensure_ascii=False)


# ============================================================================
# Database Manager
# ============================================================================


class DatabaseManager:
    """Manages SQLite database connection and session."""

    def __init__(self, db_path: Union[str, Path] = ".btmm/btmm.sqlite"):
        """Initialize database manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        # Use NullPool for SQLite to avoid connection pool issues
        self.engine = create_engine(
            f"sqlite:///{self.db_path}",
            echo=False,
            poolclass=NullPool,
            connect_args={"check_same_thread": False}
        )
        self.SessionLocal = sessionmaker(bind=self.engine)

    def create_tables(self):
        """Create all tables in the database."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self):
        """Drop all tables (use with caution!)."""
        Base.metadata.drop_all(self.engine)

    def get_session(self):
        """Get a new database session."""
        return self.SessionLocal()


# ============================================================================
# Repository
# ============================================================================


class StateRepository:
    """Repository for the tournament state."""

    def __init__(self, session):
        self.session = session

    def _get_row(self) -> Optional[TournamentStateORM]:
        return (
            self.session.query(TournamentStateORM)
            .filter(TournamentStateORM.id == CURRENT_STATE_ID)
            .first()
        )

    def load(self) -> TournamentState:
        """Load the saved tournament.

        Returns:
            The saved state, or the initial empty state if nothing was saved
        """
        row = self._get_row()
        if row is None:
            return TournamentState.initial()
        return TournamentState.from_dict(row.state)

    def save(self, state: TournamentState) -> TournamentStateORM:
        """Replace the saved tournament with the given state.

        Args:
            state: Full tournament state

        Returns:
            The saved TournamentStateORM row
        """
        row = self._get_row()
        if row is None:
            row = TournamentStateORM(id=CURRENT_STATE_ID)
            self.session.add(row)

        row.phase = state.phase.value
        row.state = state.to_dict()
        self.session.commit()
        self.session.refresh(row)
        return row

    def clear(self) -> bool:
        """Delete the saved tournament.

        Returns:
            True if a saved state was deleted, False if there was none
        """
        row = self._get_row()
        if row is None:
            return False
        self.session.delete(row)
        self.session.commit()
        return True
