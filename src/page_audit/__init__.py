"""Single-page audit service: runtime diagnostics, SEO metadata and screenshots."""

__version__ = "0.1.0"
