from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class SwapRateResponse(BaseModel):
	code: str = Field(..., description='Currency code')
	rate: Decimal = Field(..., description='Swap rate for the code')
	fetched_at: datetime = Field(..., description='When the rate was fetched from its source')
	source: str = Field(..., description='Source that produced the rate')

	class ConfigDict:
		json_schema_extra = {
			'example': {
				'code': 'RUB',
				'rate': 91.2,
				'fetched_at': '2025-09-27T10:30:00Z',
				'source': 'database',
			}
		}
