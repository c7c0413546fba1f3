from dataclasses import dataclass, field
from typing import List


@dataclass
class Config:
    """Global configuration settings for Nova-PyDrive"""

    # File operation settings
    CHUNK_SIZE: int = 4 * 1024 * 1024  # 4MB chunks for media transfers
    DOWNLOAD_DIR: str = "downloads/"
    # Keep an existing extension when naming exported documents
    DEDUPE_EXPORT_EXTENSION: bool = False

    # Authentication settings
    SERVICE_NAME: str = "nova-pydrive"
    CREDENTIALS_FILE: str = "credentials.json"
    TOKEN_URI: str = "https://oauth2.googleapis.com/token"
    SCOPES: List[str] = field(
        default_factory=lambda: ["https://www.googleapis.com/auth/drive"]
    )
    TOKEN_EXPIRY_MARGIN: int = 10 * 60  # grace period past nominal expiry
    REDIRECT_PATH_SESSION_KEY: str = "nova_pydrive.redirect_path_after_auth"

    # Progress bar settings
    PROGRESS_BAR_UNIT: str = "B"
    PROGRESS_BAR_UNIT_SCALE: bool = True

    def __post_init__(self):
        """Validate configuration after initialization"""
        if self.CHUNK_SIZE <= 0:
            raise ValueError("CHUNK_SIZE must be positive")
        if self.TOKEN_EXPIRY_MARGIN < 0:
            raise ValueError("TOKEN_EXPIRY_MARGIN must not be negative")
