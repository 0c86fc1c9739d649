from .base import RateSource
from .database import DatabaseRateSource
from .http import HttpRateSource

__all__ = ['RateSource', 'DatabaseRateSource', 'HttpRateSource']
