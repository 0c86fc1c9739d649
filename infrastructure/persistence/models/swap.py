from datetime import datetime
from decimal import Decimal

from sqlalchemy import DECIMAL, DateTime, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
	pass


class SwapRateDB(Base):
	__tablename__ = 'swap_rates'

	id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
	code: Mapped[str] = mapped_column(String(5), nullable=False)
	rate: Mapped[Decimal] = mapped_column(DECIMAL(precision=18, scale=6), nullable=False)
	fetched_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
	source: Mapped[str] = mapped_column(String(50), nullable=False)

	__table_args__ = (Index('idx_swap_rates_code_fetched', 'code', 'fetched_at'),)
