"""Report SQLAlchemy model"""
from sqlalchemy import Column, Integer, BigInteger, String, Text, ForeignKey, Index
from sqlalchemy.orm import relationship

from minci.core.database import Base


class Report(Base):
    """Outcome of one CI run of one project on one machine.

    Stage columns hold Unix times, 0 when the stage was not reached.
    ctime is assigned by the server on acceptance. Rows are insert-only.
    """

    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    start = Column(BigInteger, nullable=False)
    env = Column(BigInteger, nullable=False, default=0)
    depend = Column(BigInteger, nullable=False, default=0)
    build = Column(BigInteger, nullable=False, default=0)
    test = Column(BigInteger, nullable=False, default=0)
    install = Column(BigInteger, nullable=False, default=0)
    distcheck = Column(BigInteger, nullable=False, default=0)
    ctime = Column(BigInteger, nullable=False, index=True)

    log = Column(Text, nullable=False, default="")
    fetchhead = Column(String(255), nullable=False, default="")

    unamem = Column(String(255), nullable=False)
    unamen = Column(String(255), nullable=False)
    unamer = Column(String(255), nullable=False)
    unames = Column(String(255), nullable=False)
    unamev = Column(String(1024), nullable=False)
    machine_hash = Column(String(128), nullable=False, index=True)
    project_machine_hash = Column(String(128), nullable=False, index=True)

    # Listings always show the project, so load it with the report
    project = relationship("Project", back_populates="reports", lazy="joined")
    user = relationship("User", back_populates="reports")

    __table_args__ = (Index("ix_reports_project_machine_ctime", "project_machine_hash", "ctime"),)

    @property
    def project_name(self) -> str:
        return self.project.name

    @property
    def passed(self) -> bool:
        return self.distcheck != 0

    @property
    def has_log(self) -> bool:
        return bool(self.log)

    @property
    def stages(self) -> tuple[int, ...]:
        return (self.start, self.env, self.depend, self.build, self.test, self.install, self.distcheck)

    def __repr__(self) -> str:
        return f"<Report(id={self.id}, project_id={self.project_id}, ctime={self.ctime})>"
