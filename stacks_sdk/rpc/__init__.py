from .http import StacksApiClient

__all__ = ["StacksApiClient"]
