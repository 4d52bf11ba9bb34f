from typing import Iterable

from src.platform.exception.exceptions import ForbiddenError, UpstreamFailureError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_blob_store import IBlobStore


async def delete_files_best_effort(
    *, blob_store: IBlobStore, paths: Iterable[str], booking_id: str
) -> int:
    """
    Delete stored files, logging and skipping any the store refuses or cannot reach.

    Returns:
        Number of files deleted
    """
    deleted = 0
    for path in paths:
        try:
            await blob_store.delete(path=path)
            deleted += 1
        except (ForbiddenError, UpstreamFailureError) as e:
            Logger.base.warning(f'⚠️ [FILES] Could not delete {path} of booking {booking_id}: {e}')
    return deleted
