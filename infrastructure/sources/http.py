from decimal import Decimal, InvalidOperation

import httpx

from domain.exceptions.swap import SourceUnavailableError
from domain.models.swap import RateEntry
from domain.utils.time import utc_now
from infrastructure.sources.base import RateSource


class HttpRateSource(RateSource):
	"""Fetches the latest rate of ``code`` against ``base_currency``.

	Expects a fixer-style payload: ``{"success": true, "rates": {"RUB": 91.2}}``.
	"""

	def __init__(
		self,
		base_url: str,
		base_currency: str = 'USD',
		api_key: str = '',
		client: httpx.AsyncClient | None = None,
		timeout: float = 10,
	):
		self.base_url = base_url.rstrip('/')
		self.base_currency = base_currency
		self.api_key = api_key
		self._client = client or httpx.AsyncClient(timeout=timeout)

	@property
	def name(self) -> str:
		return 'http'

	async def _request(self, endpoint: str, params: dict) -> dict | None:
		if self.api_key:
			params['access_key'] = self.api_key
		url = f'{self.base_url}/{endpoint}'

		try:
			response = await self._client.get(url, params=params)
			if response.status_code == httpx.codes.NOT_FOUND:
				return None
			response.raise_for_status()
			data = response.json()
		except httpx.HTTPStatusError as e:
			raise SourceUnavailableError(
				self.name, f'HTTP error {e.response.status_code}: {e.response.text[:200]}'
			) from e
		except httpx.RequestError as e:
			raise SourceUnavailableError(self.name, f'request failed: {e.__class__.__name__}') from e
		except ValueError as e:
			raise SourceUnavailableError(self.name, f'response parsing error: {e}') from e

		if not isinstance(data, dict):
			raise SourceUnavailableError(
				self.name, f'response parsing error: expected an object, got {type(data).__name__}'
			)

		if data.get('success') is False:
			error = data.get('error')
			info = error.get('info', 'Unknown error') if isinstance(error, dict) else error or 'Unknown error'
			raise SourceUnavailableError(self.name, f'API error: {info}')

		return data

	async def get_rate(self, code: str) -> RateEntry | None:
		data = await self._request('latest', {'base': self.base_currency, 'symbols': code})
		if data is None:
			return None

		rates = data.get('rates') or {}
		if not isinstance(rates, dict):
			raise SourceUnavailableError(
				self.name, f'response parsing error: rates is a {type(rates).__name__}'
			)

		value = rates.get(code)
		if value is None:
			return None

		try:
			rate = Decimal(str(value))
		except InvalidOperation as e:
			raise SourceUnavailableError(self.name, f'invalid rate for {code}: {value!r}') from e
		if not rate.is_finite() or rate <= 0:
			raise SourceUnavailableError(self.name, f'invalid rate for {code}: {value!r}')

		return RateEntry(code=code, rate=rate, fetched_at=utc_now(), source=self.name)

	async def close(self) -> None:
		await self._client.aclose()
