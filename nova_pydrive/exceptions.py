class NovaDriveError(Exception):
    """Base exception for all Nova-PyDrive errors"""

    pass


class AuthenticationError(NovaDriveError):
    """Raised when no valid access token can be obtained"""

    pass


class TokenStorageError(NovaDriveError):
    """Raised when there are issues with token storage"""

    pass


class OperationError(NovaDriveError):
    """Base class for operation-related errors"""

    pass


class UploadError(OperationError):
    """Raised when a local file cannot be read for upload"""

    pass


class DownloadError(OperationError):
    """Raised when downloaded content cannot be written"""

    pass


class ExportFormatError(OperationError):
    """Raised when a native document type has no export format"""

    pass


class ConfigurationError(NovaDriveError):
    """Raised when there are configuration issues"""

    pass
