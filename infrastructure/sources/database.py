from sqlalchemy.exc import SQLAlchemyError

from domain.exceptions.swap import SourceUnavailableError
from domain.models.swap import RateEntry
from infrastructure.persistence.database import Database
from infrastructure.persistence.repositories.swap import SwapRateRepository
from infrastructure.sources.base import RateSource


class DatabaseRateSource(RateSource):
	def __init__(self, db: Database):
		self.db = db

	@property
	def name(self) -> str:
		return 'database'

	async def get_rate(self, code: str) -> RateEntry | None:
		try:
			async with self.db.session() as session:
				return await SwapRateRepository(session).get_latest(code)
		except SQLAlchemyError as e:
			raise SourceUnavailableError(self.name, f'query failed: {e.__class__.__name__}') from e
