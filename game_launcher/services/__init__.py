"""Service layer: remote clients, release discovery and self-update."""

from .config import ConfigurationService, ValidationResult
from .errors import (
    AppError,
    ConfigurationError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    FileSystemError,
    NetworkError,
    UpdateError,
    UserFriendlyError,
    ValidationError,
    get_error_service,
    handle_error,
)
from .filesystem import FileSystemService
from .http_client import HttpClientService
from .installer import SelfUpdateInstaller
from .jenkins_adapter import LegacyJenkinsRepositoryAdapter
from .remote_client import RemoteJsonClient
from .repository_manager import RepositoryManager
from .self_update import (
    GithubReleaseSource,
    LauncherDialogs,
    SelfUpdateResolver,
    UpdateCheckResult,
    UpdateOutcome,
    UpdateState,
)

__all__ = [
    "AppError",
    "ConfigurationError",
    "ConfigurationService",
    "ErrorCategory",
    "ErrorHandlingService",
    "ErrorSeverity",
    "FileSystemError",
    "FileSystemService",
    "GithubReleaseSource",
    "HttpClientService",
    "LauncherDialogs",
    "LegacyJenkinsRepositoryAdapter",
    "NetworkError",
    "RemoteJsonClient",
    "RepositoryManager",
    "SelfUpdateInstaller",
    "SelfUpdateResolver",
    "UpdateCheckResult",
    "UpdateError",
    "UpdateOutcome",
    "UpdateState",
    "UserFriendlyError",
    "ValidationError",
    "ValidationResult",
    "get_error_service",
    "handle_error",
]
