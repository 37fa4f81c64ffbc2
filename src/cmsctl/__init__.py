"""cmsctl — schema-driven validation for headless CMS content."""

__version__ = "0.1.0"
