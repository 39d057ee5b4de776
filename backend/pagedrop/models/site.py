"""Hosted site registry model."""
from sqlalchemy import Column, String, Integer, BigInteger, DateTime, func
from pagedrop.database import Base


class HostedSite(Base):
    """A published bundle of static files keyed by its site_id."""
    __tablename__ = "hosted_sites"

    id = Column(Integer, primary_key=True, autoincrement=True)
    site_id = Column(String(36), unique=True, nullable=False, index=True)  # Also the directory name
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False, index=True)  # upload|url|code
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_accessed = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Captured at creation time only, never recomputed
    file_count = Column(Integer, default=0, nullable=False)
    size_bytes = Column(BigInteger, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<HostedSite {self.site_id} ({self.type})>"
