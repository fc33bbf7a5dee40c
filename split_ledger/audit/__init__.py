"""Audit logging package."""

from split_ledger.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
