from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	DATABASE_URL: str = 'sqlite+aiosqlite:///./swap_rates.db'

	REDIS_URL: str = ''

	# Cache
	SWAP_CACHE_TYPE: str = 'memory'
	SWAP_CACHE_DIR: str = './.swap_cache'
	SWAP_CACHE_KEY_PREFIX: str = 'swap'
	SWAP_CACHE_EXPIRATION_SECONDS: int = 3600

	# Fallback HTTP source
	SWAP_HTTP_BASE_URL: str = 'http://data.fixer.io/api'
	SWAP_HTTP_API_KEY: str = ''
	SWAP_HTTP_TIMEOUT: float = 10
	SWAP_BASE_CURRENCY: str = 'USD'

	SOURCE_RETRY_ATTEMPTS: int = 3
	PROPAGATE_SOURCE_ERRORS: bool = False

	# Application
	APP_NAME: str = 'Swap Rate API'
	DEBUG: bool = True

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')

	def cache_config(self) -> dict:
		config = {'type': self.SWAP_CACHE_TYPE, 'key_prefix': self.SWAP_CACHE_KEY_PREFIX}
		if self.SWAP_CACHE_DIR:
			config['directory'] = self.SWAP_CACHE_DIR
		if self.REDIS_URL:
			config['redis_url'] = self.REDIS_URL
		return config


@lru_cache
def get_settings() -> Settings:
	return Settings()
