import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from domain.exceptions.swap import (
	CacheError,
	ConfigurationError,
	InvalidCurrencyError,
	SourceUnavailableError,
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(InvalidCurrencyError)
	async def invalid_currency_handler(request: Request, exc: InvalidCurrencyError):
		return JSONResponse(status_code=400, content={'detail': str(exc)})

	@app.exception_handler(SourceUnavailableError)
	async def source_unavailable_handler(request: Request, exc: SourceUnavailableError):
		logger.error(f'Source error: {exc}')
		return JSONResponse(status_code=503, content={'detail': 'Swap rate source unavailable'})

	@app.exception_handler(CacheError)
	async def cache_error_handler(request: Request, exc: CacheError):
		logger.error(f'Cache error: {exc}')
		return JSONResponse(status_code=503, content={'detail': 'Swap rate cache unavailable'})

	@app.exception_handler(ConfigurationError)
	async def configuration_error_handler(request: Request, exc: ConfigurationError):
		logger.error(f'Configuration error: {exc}')
		return JSONResponse(status_code=500, content={'detail': 'Service misconfigured'})
