"""k6 endpoints - mine HTTP calls from Playwright specs into a k6 manifest."""

__version__ = "0.1.0"
