from abc import ABC, abstractmethod
from typing import Optional


class IdentityVerifierPort(ABC):
    @abstractmethod
    def verify(self, authorization: Optional[str]) -> str:
        """
        Resolves the caller identity from an Authorization header value.

        Returns:
            The caller's user id.

        Raises:
            MissingCredentials: If no bearer credential was supplied.
            InvalidCredentials: If the credential does not validate.
        """
        pass
