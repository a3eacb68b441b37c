"""
Jobs Module

Job postings: title, salary, equity share and the owning company.
"""

from decimal import Decimal
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    CheckConstraint,
    UniqueConstraint,
)
from database.engine import Base
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.companies import Company


class Job(Base):
    """
    Job posting at a company.

    ``company_handle`` is fixed at creation; every other column changes only
    through partial updates.
    """

    __tablename__: str = "jobs"
    __table_args__ = (
        CheckConstraint("salary >= 0", name="ck_jobs_salary"),
        CheckConstraint("equity >= 0 AND equity <= 1.0", name="ck_jobs_equity"),
        UniqueConstraint("title", "company_handle", name="uq_jobs_title_company"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    salary: Mapped[int | None] = mapped_column(Integer, nullable=True)
    equity: Mapped[Decimal | None] = mapped_column(Numeric, nullable=True)
    company_handle: Mapped[str] = mapped_column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    company: Mapped["Company"] = relationship(back_populates="jobs")
