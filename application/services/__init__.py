from .swap_service import CachedSwapService

__all__ = ['CachedSwapService']
