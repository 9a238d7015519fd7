from abc import ABC, abstractmethod

from linkshortener.models import ClickEventModel


class ClickEventBasePublisher(ABC):
    """Interface for click event sinks.

    Methods:
        publish(event: ClickEventModel) -> None:
            Hand a click event off for asynchronous recording.
            Must not block on recording itself (fire-and-forget).
            Raises DataStoreError if the sink is unreachable and
            ClickPublishError if it rejects the event.
    """

    @abstractmethod
    def publish(self, event: ClickEventModel) -> None:
        pass
