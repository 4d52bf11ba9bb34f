import anyio

from src.platform.exception.exceptions import ForbiddenError, UpstreamFailureError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_blob_store import IBlobStore


class LocalBlobStore(IBlobStore):
    """Uploaded files on local disk under a single root directory"""

    def __init__(self, *, root: str) -> None:
        self.root = anyio.Path(root)

    async def _resolve(self, path: str) -> anyio.Path:
        # Only files below the root are ever touched, symlinks included
        if anyio.Path(path).is_absolute():
            raise ForbiddenError(f'Stored file path must be relative: {path}')
        root = await self.root.resolve()
        target = await (root / path).resolve()
        if target == root or not target.is_relative_to(root):
            raise ForbiddenError(f'Stored file path escapes the upload directory: {path}')
        return target

    @Logger.io
    async def delete(self, *, path: str) -> None:
        target = await self._resolve(path)
        try:
            await target.unlink(missing_ok=True)
        except OSError as e:
            raise UpstreamFailureError(f'Could not delete stored file {path}: {e}') from e
