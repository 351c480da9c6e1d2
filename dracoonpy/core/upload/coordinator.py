"""
Buffered file upload.

Drives one upload of a bounded-length source through the create / upload
chunk / complete phases, with lifecycle callbacks and cooperative
cancellation.
"""
import asyncio
import inspect
from typing import Callable, Optional
import time

from .cancellation import CancellationToken
from .models import Chunk, FileUploadRequest, Node, UploadConfig, UploadState
from .notifier import ProgressNotifier, UploadCallbackRegistry
from .protocols import ApiClientProtocol, ByteSourceProtocol, LoggerProtocol, UploadCallback
from .services import ChunkTransmitter, UploadSession
from ..api.auth import AccessTokenProvider
from ..exceptions import (
    LocalSourceError,
    TransportError,
    UploadCanceledError
)
from ..logging import get_logger


class FileUpload:
    """
    Uploads a byte source of known length.
    
    Can run in the background (`start`, observe callbacks or await the
    returned task) or on the caller's task (`await run()`).
    
    Cancellation is cooperative. `cancel()` sets a flag which is checked
    before the upload is created, after every read and after every chunk.
    A TransportError or LocalSourceError raised while the flag is set is
    reported as a cancellation, not as a failure.
    
    Example:
        >>> upload = FileUpload(api, tokens, "up-1", request, source, length)
        >>> upload.add_callback(my_callback)
        >>> task = upload.start()
        >>> node = await task
    """
    
    def __init__(
        self,
        api_client: ApiClientProtocol,
        token_provider: AccessTokenProvider,
        upload_id: str,
        request: FileUploadRequest,
        source: ByteSourceProtocol,
        length: int,
        config: Optional[UploadConfig] = None,
        logger: Optional[LoggerProtocol] = None,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize file upload.
        
        Args:
            api_client: REST transport
            token_provider: Source of access tokens
            upload_id: Caller-chosen ID reported in every callback
            request: Description of the file to create
            source: Byte source with a sync or async `read(size)`
            length: Declared number of bytes in `source`
            config: Buffer sizes and progress interval
            logger: Logger instance
            clock: Wall-clock function used for progress throttling
        """
        if length < 0:
            raise ValueError("Source length must not be negative")
        
        self._api = api_client
        self._tokens = token_provider
        self._id = upload_id
        self._request = request
        self._source = source
        self._length = length
        self._config = config or UploadConfig()
        self._logger = logger or get_logger('dracoonpy.upload')
        self._clock = clock
        
        self._callbacks = UploadCallbackRegistry()
        self._token = CancellationToken()
        self._state = UploadState.CREATED
        self._bytes_sent = 0
        self._started = False
        self._task: Optional[asyncio.Task] = None
        self._notifier: Optional[ProgressNotifier] = None
    
    @property
    def id(self) -> str:
        return self._id
    
    @property
    def state(self) -> UploadState:
        return self._state
    
    @property
    def bytes_sent(self) -> int:
        """Bytes acknowledged by the server so far."""
        return self._bytes_sent
    
    @property
    def length(self) -> int:
        return self._length
    
    @property
    def is_canceled(self) -> bool:
        return self._token.is_cancelled
    
    @property
    def task(self) -> Optional[asyncio.Task]:
        """Background task (None unless `start` was called)."""
        return self._task
    
    def add_callback(self, callback: Optional[UploadCallback]) -> None:
        self._callbacks.add(callback)
    
    def remove_callback(self, callback: Optional[UploadCallback]) -> None:
        self._callbacks.remove(callback)
    
    def cancel(self) -> None:
        """Request cancellation; takes effect at the next read/chunk boundary."""
        self._logger.debug(f"Cancel requested for upload '{self._id}'")
        self._token.cancel()
    
    def start(self) -> asyncio.Task:
        """
        Run the upload as a background task.
        
        Failures are only reported through `on_failed`; the task result is
        the created node, or None if the upload was canceled or failed.
        """
        self._mark_started()
        self._task = asyncio.get_running_loop().create_task(
            self._run_background(), name=f"dracoon-upload-{self._id}"
        )
        return self._task
    
    async def run(self) -> Optional[Node]:
        """
        Run the upload on the calling task.
        
        Returns:
            The created node, or None if the upload was canceled
            
        Raises:
            DracoonException: If the upload failed (after `on_failed`); other
                exceptions, e.g. from the token provider, are re-raised the same way
        """
        self._mark_started()
        return await self._execute()
    
    def _mark_started(self) -> None:
        if self._started:
            raise RuntimeError(f"Upload '{self._id}' was already started")
        self._started = True
    
    async def _run_background(self) -> Optional[Node]:
        try:
            return await self._execute()
        except Exception:
            # already reported through on_failed
            return None
    
    async def _execute(self) -> Optional[Node]:
        try:
            return await self._upload()
        except UploadCanceledError:
            self._on_canceled()
            return None
        except (TransportError, LocalSourceError) as e:
            if self._token.is_cancelled:
                self._on_canceled()
                return None
            self._on_failed(e)
            raise
        except asyncio.CancelledError:
            self._on_canceled()
            raise
        except Exception as e:
            self._on_failed(e)
            raise
    
    async def _upload(self) -> Node:
        size_mb = self._length / (1024 * 1024)
        self._logger.info(f"Starting upload '{self._id}': {self._request.name} ({size_mb:.2f} MB)")
        
        self._callbacks.notify_started(self._id)
        self._set_state(UploadState.RUNNING)
        self._notifier = ProgressNotifier(
            self._callbacks, self._config.progress_interval_ms, self._clock
        )
        self._check_canceled()
        
        session = UploadSession(self._api, self._tokens, self._request)
        upload_id = await session.open()
        
        await self._upload_content(session, upload_id)
        
        self._set_state(UploadState.COMPLETING)
        node = await session.complete()
        
        self._set_state(UploadState.COMPLETED)
        self._logger.info(f"Upload '{self._id}' finished: node {node.id}")
        self._callbacks.notify_finished(self._id, node)
        return node
    
    async def _upload_content(self, session: UploadSession, upload_id: str) -> None:
        transmitter = ChunkTransmitter(self._api, self._tokens, self._config.block_size)
        offset = 0
        
        while True:
            data = await self._read(self._config.read_size)
            self._check_canceled()
            if not data:
                break
            
            chunk = Chunk(offset, bytes(data))
            await transmitter.send(
                upload_id,
                session.file_name,
                chunk,
                on_progress=lambda sent, base=offset: self._on_progress(base + sent)
            )
            offset = chunk.end
            self._bytes_sent = offset
            self._check_canceled()
        
        if offset != self._length:
            self._logger.warning(
                f"Upload '{self._id}': source provided {offset} bytes, {self._length} declared"
            )
    
    async def _read(self, size: int) -> bytes:
        try:
            data = self._source.read(size)
            if inspect.isawaitable(data):
                data = await data
        except Exception as e:
            self._logger.debug(f"File read failed for upload '{self._id}': {e!r}")
            raise LocalSourceError("File read failed!", e) from e
        return data
    
    def _on_progress(self, bytes_sent: int) -> None:
        if self._token.is_cancelled:
            return
        self._notifier.update(self._id, bytes_sent, self._length)
    
    def _check_canceled(self) -> None:
        if self._token.is_cancelled:
            raise UploadCanceledError(self._id)
    
    def _set_state(self, state: UploadState) -> None:
        if self._state.is_terminal:
            raise RuntimeError(
                f"Upload '{self._id}' is {self._state.value}, cannot become {state.value}"
            )
        self._state = state
    
    def _on_canceled(self) -> None:
        if self._state.is_terminal:
            return
        self._state = UploadState.CANCELED
        self._logger.info(f"Upload '{self._id}' canceled after {self._bytes_sent} bytes")
        self._callbacks.notify_canceled(self._id)
    
    def _on_failed(self, error: Exception) -> None:
        if self._state.is_terminal:
            return
        self._state = UploadState.FAILED
        self._logger.error(f"Upload '{self._id}' failed: {error}")
        self._callbacks.notify_failed(self._id, error)
