"""Domain layer for certdesk application."""

# Services are resolved lazily: the backend layer imports domain entities, and
# eager imports here would make it import itself through the services.
_SERVICES = {
    "StudentService": "certdesk.domain.student",
    "CertificateService": "certdesk.domain.certificate",
    "BulkImportService": "certdesk.domain.bulk_import",
    "AnalyticsService": "certdesk.domain.analytics",
    "AuthSession": "certdesk.domain.auth",
    "SessionStore": "certdesk.domain.auth",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
