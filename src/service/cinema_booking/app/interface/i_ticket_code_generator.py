from abc import ABC, abstractmethod


class ITicketCodeGenerator(ABC):
    @abstractmethod
    def generate(self) -> str:
        """Return a fresh candidate code; uniqueness is checked by the caller."""
        pass
