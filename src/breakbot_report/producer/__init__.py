"""Client for the BreakBot analysis service."""

from breakbot_report.producer.client import build_report_url, fetch_report

__all__ = ["build_report_url", "fetch_report"]
