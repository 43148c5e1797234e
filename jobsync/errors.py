class SyncError(Exception):
    """Base class for sync failures"""


class ConfigError(SyncError):
    """Required setting is missing"""


class AuthenticationError(SyncError):
    """Token could not be obtained or was rejected after a refresh"""


class UnexpectedResponseError(SyncError):
    """Remote API answered with a body we cannot interpret"""


class ResumeRejectedError(SyncError):
    """Resume failed the size or file type checks"""
