from typing import Any, Dict, Optional

"""Error taxonomy shared by the routers and services.

Each class carries the HTTP status it maps to at the request boundary.
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidInput(ServiceError):
    status_code = 400


class MissingFile(InvalidInput):
    pass


class InvalidResourceUrl(ServiceError):
    status_code = 400


class NotFound(ServiceError):
    status_code = 404


class ProviderError(ServiceError):
    status_code = 500


class UploadFailed(ProviderError):
    pass


class ListFailed(ProviderError):
    pass


class DeleteFailed(ProviderError):
    pass


class FetchError(ServiceError):
    status_code = 500


class NetworkError(FetchError):
    pass


class ReadError(FetchError):
    pass
