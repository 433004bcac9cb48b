from saferoads.models.report import Report

__all__ = ["Report"]
