"""Audit result assembly."""

from .assembler import ReportAssembler

__all__ = ["ReportAssembler"]
