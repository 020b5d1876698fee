from abc import ABC, abstractmethod
from typing import Any

JSON_ONLY_DIRECTIVE = "Return ONLY valid JSON. No markdown. No commentary."


class LLMClient(ABC):
    @abstractmethod
    def generate_json(self, instructions: str, input: str) -> Any:
        """
        Sendet Instruktionen + Input an ein LLM und gibt das geparste JSON zurück.

        Raises:
            UpstreamError: Dienst antwortet nicht erfolgreich
            ParseError: Antworttext ist kein gültiges JSON
        """
        raise NotImplementedError
