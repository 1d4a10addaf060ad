"""
Exception hierarchy for HOG descriptor extraction
"""


class HOGError(Exception):
    """Base class for all errors raised by hogcache"""


class ConfigurationError(HOGError, ValueError):
    """Invalid extractor parameters (raised once, at construction)"""


class InputError(HOGError, ValueError):
    """Invalid image passed to process() or invalid window passed to retrieve()"""
