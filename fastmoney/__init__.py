"""FastMoney bills payable/receivable service"""

__version__ = "0.1.0"
