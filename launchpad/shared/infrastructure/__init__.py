"""Technical adapters: HTTP and session storage."""
