from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status

from api.dependencies import get_swap_service
from api.schemas import SwapRateResponse
from application.services import CachedSwapService
from domain.models.swap import NotFound

router = APIRouter(prefix='/api', tags=['swap'])

CodePath = Annotated[str, Path(min_length=3, max_length=5)]


@router.get(
	'/swaps/{code}',
	response_model=SwapRateResponse,
	status_code=status.HTTP_200_OK,
	summary='Get swap rate for a currency',
)
async def get_swap_rate(
	code: CodePath,
	service: Annotated[CachedSwapService, Depends(get_swap_service)],
) -> SwapRateResponse:
	result = await service.get_rate(code)
	if isinstance(result, NotFound):
		raise HTTPException(
			status_code=status.HTTP_404_NOT_FOUND, detail=f'No swap rate for {result.code}'
		)

	return SwapRateResponse(
		code=result.code,
		rate=result.rate,
		fetched_at=result.fetched_at,
		source=result.source,
	)


@router.delete(
	'/swaps/{code}',
	status_code=status.HTTP_204_NO_CONTENT,
	summary='Drop the cached swap rate for a currency',
)
async def invalidate_swap_rate(
	code: CodePath,
	service: Annotated[CachedSwapService, Depends(get_swap_service)],
) -> None:
	await service.invalidate(code)
