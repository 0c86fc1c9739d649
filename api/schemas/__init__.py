from .responses import SwapRateResponse

__all__ = ['SwapRateResponse']
