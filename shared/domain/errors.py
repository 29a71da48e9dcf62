"""
Domain Errors

Base class for user-visible domain errors. Each error carries a stable
reason ``code`` for API clients, a human-readable ``message`` and optional
``extra`` fields explaining the refusal.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    code: str = 'domain_error'
    default_message: str = 'Операция не может быть выполнена.'
    http_status: int = 400

    def __init__(self, message: Optional[str] = None, *, code: Optional[str] = None,
                 extra: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        if code:
            self.code = code
        self.extra = extra or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        payload = {'code': self.code, 'detail': self.message}
        payload.update(self.extra)
        return payload


class NotFound(DomainError):
    code = 'not_found'
    default_message = 'Объект не найден.'
    http_status = 404
