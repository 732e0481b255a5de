from __future__ import annotations


class FaviconError(Exception):
    """Base class for errors raised while generating favicon assets."""


class ConfigError(FaviconError):
    """The configuration or the source image cannot be used. Aborts generation."""


class FormatError(FaviconError):
    """A container could not be produced from the given images."""


class RewriteError(FaviconError):
    """An emitted asset could not be located in the finalized bundle."""
