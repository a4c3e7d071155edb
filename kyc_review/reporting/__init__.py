"""Export sinks for the pending queue."""
from kyc_review.reporting.sinks import write_csv, write_excel

__all__ = ["write_csv", "write_excel"]
