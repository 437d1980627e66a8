"""Local task model (client-side offline store)."""
from sqlalchemy import BigInteger, Boolean, CheckConstraint, Column, Integer, String, Text, JSON

from taskpwa.database import Base


class LocalTaskRecord(Base):
    """A task as held by the client, with its sync flags.

    Exactly one of ``local_token`` / ``remote_id`` is set: the row is either a
    client-created task never seen by the server, or a server-issued one.
    """

    __tablename__ = "local_tasks"
    __table_args__ = (
        CheckConstraint(
            "(local_token IS NULL) <> (remote_id IS NULL)",
            name="ck_local_tasks_one_identifier",
        ),
    )

    row_id = Column(Integer, primary_key=True, autoincrement=True)
    local_token = Column(String(64), nullable=True, unique=True, index=True)
    remote_id = Column(Integer, nullable=True, unique=True, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    completed = Column(Boolean, nullable=False, default=False)
    location = Column(JSON, nullable=True)
    photo = Column(JSON, nullable=True)

    created_at = Column(BigInteger, nullable=False, index=True)
    updated_at = Column(BigInteger, nullable=False)

    dirty = Column(Boolean, nullable=False, default=True, index=True)
    deleted = Column(Boolean, nullable=False, default=False)
