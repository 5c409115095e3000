"""User SQLAlchemy model"""

from sqlalchemy import Column, Integer, BigInteger, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from minci.core.database import Base


class User(Base):
    """
    User model representing a CI runner identity.

    Attributes:
        id: Primary key, auto-incrementing integer
        apikey: Public key the runner sends with each report
        apisecret: Shared secret used to sign reports, never transmitted
        email: Contact address recorded in the audit log
        created_at: Timestamp of user creation
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    apikey = Column(BigInteger, unique=True, nullable=False, index=True)
    apisecret = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    reports = relationship("Report", back_populates="user")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, apikey={self.apikey}, email={self.email})>"
