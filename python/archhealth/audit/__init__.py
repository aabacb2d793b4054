"""Audit logging components."""

from .audit_logger import AuditLogger, LogType, AuditFormatter

__all__ = [
    "AuditLogger",
    "LogType",
    "AuditFormatter",
]
