"""
Access token providers.

Token acquisition itself (OAuth flows, refresh) is handled outside this
package. Upload code asks the provider for a token before every request.
"""
import inspect
from typing import Awaitable, Callable, Protocol, Union


class AccessTokenProvider(Protocol):
    """Protocol for objects handing out access tokens."""
    
    async def get_access_token(self) -> str:
        """Return a currently valid access token."""
        ...


class StaticTokenProvider:
    """Provider for callers that already hold a token."""
    
    def __init__(self, token: str):
        if not token:
            raise ValueError("Access token must not be empty")
        self._token = token
    
    async def get_access_token(self) -> str:
        return self._token


class CallableTokenProvider:
    """
    Adapts a plain function to the provider protocol.
    
    Supports both sync and async callables, so a refresh routine of an
    external OAuth client can be plugged in directly.
    """
    
    def __init__(self, func: Callable[[], Union[str, Awaitable[str]]]):
        self._func = func
    
    async def get_access_token(self) -> str:
        token = self._func()
        if inspect.isawaitable(token):
            token = await token
        return token
