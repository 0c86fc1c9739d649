from datetime import UTC

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from domain.models.swap import RateEntry
from infrastructure.persistence.models.swap import SwapRateDB


class SwapRateRepository:
	def __init__(self, db_session: AsyncSession):
		self.db_session = db_session

	async def get_latest(self, code: str) -> RateEntry | None:
		stmt = (
			select(SwapRateDB)
			.filter(SwapRateDB.code == code)
			.order_by(SwapRateDB.fetched_at.desc(), SwapRateDB.id.desc())
			.limit(1)
		)
		result = await self.db_session.execute(stmt)
		row = result.scalars().first()
		if row is None:
			return None

		fetched_at = row.fetched_at
		# sqlite drops the offset on the way back
		if fetched_at.tzinfo is None:
			fetched_at = fetched_at.replace(tzinfo=UTC)

		return RateEntry(code=row.code, rate=row.rate, fetched_at=fetched_at, source=row.source)

	async def save_rate(self, entry: RateEntry) -> None:
		self.db_session.add(
			SwapRateDB(
				code=entry.code,
				rate=entry.rate,
				fetched_at=entry.fetched_at,
				source=entry.source,
			)
		)
