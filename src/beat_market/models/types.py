"""Column types shared across models."""

from sqlalchemy import Numeric

# Two-digit cent precision; values come back as decimal.Decimal.
Money = Numeric(12, 2, asdecimal=True)
