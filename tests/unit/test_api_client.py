"""Tests for the async REST transport, its configuration and token providers."""
import ssl
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from dracoonpy.core.api import (
    APIConfig,
    ApiResponse,
    AsyncAPIClient,
    CallableTokenProvider,
    SSLConfig,
    StaticTokenProvider,
    TimeoutConfig
)
from dracoonpy.core.api.async_client import AUTH_HEADER
from dracoonpy.core.exceptions import InsecureTransportError, TransportError


def make_response(status=200, body=b'', headers=None):
    response = MagicMock()
    response.status = status
    response.headers = headers or {}
    response.read = AsyncMock(return_value=body)
    return response


def make_session(response=None, error=None):
    """Session mock whose `request` works as async context manager."""
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=None)
    
    session = MagicMock()
    session.closed = False
    session.close = AsyncMock()
    if error is not None:
        session.request = MagicMock(side_effect=error)
    else:
        session.request = MagicMock(return_value=context)
    return session


@pytest.fixture
def client():
    return AsyncAPIClient(APIConfig.default('https://dracoon.example.com'))


class TestApiResponse:
    """Test suite for ApiResponse decoding."""
    
    def test_is_successful(self):
        assert ApiResponse(200).is_successful
        assert ApiResponse(201).is_successful
        assert not ApiResponse(199).is_successful
        assert not ApiResponse(404).is_successful
    
    @pytest.mark.asyncio
    async def test_json_body(self):
        """Test JSON bodies are decoded."""
        response = make_response(201, b'{"uploadId": "abc"}', {'Content-Type': 'application/json'})
        
        result = await ApiResponse.from_aiohttp(response)
        
        assert result.status == 201
        assert result.body == {'uploadId': 'abc'}
        assert result.headers == {'Content-Type': 'application/json'}
    
    @pytest.mark.asyncio
    async def test_text_body(self):
        """Test non-JSON bodies are kept as text."""
        result = await ApiResponse.from_aiohttp(make_response(502, b'Bad Gateway'))
        
        assert result.body == 'Bad Gateway'
    
    @pytest.mark.asyncio
    async def test_empty_body(self):
        result = await ApiResponse.from_aiohttp(make_response(204))
        
        assert result.body is None


class TestAsyncAPIClient:
    """Test suite for AsyncAPIClient."""
    
    @pytest.mark.asyncio
    async def test_request(self, client):
        """Test URL, auth header and JSON body are passed to aiohttp."""
        session = make_session(make_response(201, b'{"uploadId": "abc"}'))
        client._session = session
        
        result = await client.request(
            'POST', 'nodes/files/uploads', token='secret', json={'parentId': 42}
        )
        
        assert result.body == {'uploadId': 'abc'}
        args, kwargs = session.request.call_args
        assert args == ('POST', 'https://dracoon.example.com/api/v4/nodes/files/uploads')
        assert kwargs['json'] == {'parentId': 42}
        assert kwargs['headers'] == {AUTH_HEADER: 'secret'}
        assert kwargs['proxy'] is None
    
    @pytest.mark.asyncio
    async def test_request_without_token(self, client):
        """Test no auth header is sent without token."""
        session = make_session(make_response(200))
        client._session = session
        
        await client.request('GET', '/public/software/version', headers={'Accept': 'application/json'})
        
        _, kwargs = session.request.call_args
        assert kwargs['headers'] == {'Accept': 'application/json'}
    
    @pytest.mark.asyncio
    async def test_error_status_is_returned(self, client):
        """Test non-2xx responses are returned, not raised."""
        client._session = make_session(make_response(404, b'{"errorCode": -40000}'))
        
        result = await client.request('PUT', 'nodes/files/uploads/abc', token='secret')
        
        assert result.status == 404
        assert result.body == {'errorCode': -40000}
    
    @pytest.mark.asyncio
    async def test_send_multipart(self, client):
        """Test chunk bodies are sent as multipart form data."""
        session = make_session(make_response(201))
        client._session = session
        
        async def content():
            yield b"abc"
        
        result = await client.send_multipart(
            'nodes/files/uploads/abc',
            token='secret',
            field_name='file',
            file_name='report.pdf',
            content=content(),
            headers={'Content-Range': 'bytes 0-3/*'}
        )
        
        assert result.status == 201
        args, kwargs = session.request.call_args
        assert args == ('POST', 'https://dracoon.example.com/api/v4/nodes/files/uploads/abc')
        assert isinstance(kwargs['data'], aiohttp.MultipartWriter)
        assert kwargs['headers'] == {'Content-Range': 'bytes 0-3/*', AUTH_HEADER: 'secret'}
    
    @pytest.mark.asyncio
    async def test_connection_error(self, client):
        """Test network failures become TransportError."""
        error = aiohttp.ClientConnectionError("refused")
        client._session = make_session(error=error)
        
        with pytest.raises(TransportError) as exc_info:
            await client.request('GET', 'user/account')
        
        assert str(exc_info.value) == "Server communication failed!"
        assert exc_info.value.cause is error
        assert not isinstance(exc_info.value, InsecureTransportError)
    
    @pytest.mark.asyncio
    async def test_ssl_error(self, client):
        """Test TLS failures become InsecureTransportError."""
        client._session = make_session(error=ssl.SSLError("certificate verify failed"))
        
        with pytest.raises(InsecureTransportError) as exc_info:
            await client.request('GET', 'user/account')
        
        assert str(exc_info.value) == "Server SSL handshake failed!"
        assert isinstance(exc_info.value, TransportError)
    
    @pytest.mark.asyncio
    async def test_closed_client(self, client):
        """Test a closed client refuses requests."""
        await client.close()
        
        with pytest.raises(TransportError):
            await client.request('GET', 'user/account')
    
    @pytest.mark.asyncio
    async def test_close_closes_session(self, client):
        session = make_session(make_response(200))
        client._session = session
        
        await client.close()
        
        session.close.assert_awaited_once()


class TestAPIConfig:
    """Test suite for APIConfig."""
    
    def test_base_url(self):
        assert APIConfig.default('https://dracoon.example.com/').base_url == \
            'https://dracoon.example.com/api/v4/'
    
    def test_proxy_is_passed_per_request(self):
        config = APIConfig(server_url='https://dracoon.example.com', proxy_url='http://proxy:3128')
        
        assert config.get_request_kwargs() == {'proxy': 'http://proxy:3128'}
    
    @pytest.mark.asyncio
    async def test_request_uses_proxy(self):
        """Test the configured proxy reaches aiohttp."""
        config = APIConfig(server_url='https://dracoon.example.com', proxy_url='http://proxy:3128')
        client = AsyncAPIClient(config)
        session = make_session(make_response(200))
        client._session = session
        
        await client.request('GET', 'user/account', token='secret')
        
        _, kwargs = session.request.call_args
        assert kwargs['proxy'] == 'http://proxy:3128'
    
    def test_verification_disabled(self):
        config = APIConfig(server_url='https://x', ssl=SSLConfig(verify=False))
        
        assert config.get_connector_kwargs()['ssl'] is False
    
    def test_default_ssl_verifies(self):
        kwargs = APIConfig.default('https://x').get_connector_kwargs()
        
        assert isinstance(kwargs['ssl'], ssl.SSLContext)
        assert kwargs['ssl'].verify_mode == ssl.CERT_REQUIRED
        assert kwargs['limit'] == 10
    
    def test_max_connections_must_be_positive(self):
        with pytest.raises(ValueError):
            APIConfig(server_url='https://x', max_connections=0)
    
    def test_timeouts(self):
        config = APIConfig(server_url='https://x', timeout=TimeoutConfig(connect=5.0, read=20.0))
        
        timeout = config.get_session_kwargs()['timeout']
        
        assert timeout.sock_connect == 5.0
        assert timeout.sock_read == 20.0
        assert timeout.total is None
    
    def test_session_kwargs(self):
        config = APIConfig(server_url='https://x', extra_headers={'X-Trace': '1'})
        
        headers = config.get_session_kwargs()['headers']
        
        assert headers['User-Agent'] == config.user_agent
        assert headers['X-Trace'] == '1'


class TestTokenProviders:
    """Test suite for access token providers."""
    
    @pytest.mark.asyncio
    async def test_static(self):
        assert await StaticTokenProvider('abc').get_access_token() == 'abc'
    
    def test_static_empty(self):
        with pytest.raises(ValueError):
            StaticTokenProvider('')
    
    @pytest.mark.asyncio
    async def test_callable_sync(self):
        provider = CallableTokenProvider(lambda: 'sync-token')
        
        assert await provider.get_access_token() == 'sync-token'
    
    @pytest.mark.asyncio
    async def test_callable_async(self):
        async def refresh():
            return 'async-token'
        
        provider = CallableTokenProvider(refresh)
        
        assert await provider.get_access_token() == 'async-token'
