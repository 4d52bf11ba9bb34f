from abc import ABC, abstractmethod


class IBlobStore(ABC):
    """Storage for uploaded artwork, logos and images, keyed by path"""

    @abstractmethod
    async def delete(self, *, path: str) -> None:
        """
        Remove a stored file. A missing file is not an error.

        Raises:
            ForbiddenError: the path points outside the store
            UpstreamFailureError: the store could not be reached or refused the delete
        """
        pass
