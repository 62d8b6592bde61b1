from __future__ import annotations


class KeyCrmError(Exception):
    """Base for every failure raised by the KeyCRM integration layer."""


class ConfigurationError(KeyCrmError):
    pass


class UpstreamError(KeyCrmError):
    """
    KeyCRM answered with a non-2xx status (or could not be reached at all,
    in which case status_code is None).
    """

    def __init__(self, *, method: str, path: str, status_code: int | None, message: str):
        self.method = method
        self.path = path
        self.status_code = status_code
        self.message = message
        status = status_code if status_code is not None else "unreachable"
        super().__init__(f"KeyCRM {method} {path} -> {status}: {message}")


class CompanyNotFound(KeyCrmError):
    def __init__(self, company_id: str):
        self.company_id = company_id
        super().__init__(f"Company {company_id} not found")
