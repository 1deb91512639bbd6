"""Background workers for billing service"""
from .invoice_generation import InvoiceGenerationRunner

__all__ = ["InvoiceGenerationRunner"]
