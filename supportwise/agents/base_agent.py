from abc import ABC, abstractmethod


class BaseAgent(ABC):
    """Abstract base class for the agents that make up one SupportWise chat turn."""

    agent_id: str

    @abstractmethod
    async def process(self, data: dict) -> dict:
        """
        Process an incoming request payload.

        Concrete agents define their own keys, but every result carries a
        'status' of 'success' or 'failure', and failures carry an 'error'.

        Args:
            data (dict): The input data for the agent to process.

        Returns:
            dict: The result of the processing.
        """
        pass
