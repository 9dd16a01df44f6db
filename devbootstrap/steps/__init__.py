from .step_10_preferences import PreferencesStep
from .step_20_package_manager import PackageManagerStep
from .step_30_install_tools import InstallToolsStep
from .step_40_identity import IdentityStep
from .step_50_sync_repos import SyncReposStep
from .step_60_editor import EditorStep
from .step_70_cleanup import CleanupStep

__all__ = [
    "PreferencesStep",
    "PackageManagerStep",
    "InstallToolsStep",
    "IdentityStep",
    "SyncReposStep",
    "EditorStep",
    "CleanupStep",
]
