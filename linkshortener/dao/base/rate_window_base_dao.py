from abc import ABC, abstractmethod

from linkshortener.models import RateWindowModel


class RateWindowBaseDAO(ABC):
    """Interface for fixed rate limit window counters.

    Methods:
        hit(client_key: str, window_seconds: int) -> RateWindowModel:
            Count one request against the client's current window, creating
            the window (with a `window_seconds` expiry) if none is open.
            Creating the window and setting its expiry must behave as a
            single atomic unit: a window may never be left without expiry.
            Raises DataStoreError when the backend is unreachable and
            RateWindowError when it rejects the update.
    """

    @abstractmethod
    def hit(self, client_key: str, window_seconds: int) -> RateWindowModel:
        pass
