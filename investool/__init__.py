"""Bond, company profile and cash flow data clients and a stock fundamentals checker."""

__version__ = "0.1.0"

__all__ = ["chinabond", "eastmoney", "cashflow", "checker"]