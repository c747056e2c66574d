"""Build context keys shared between targets."""

ARCHIVER = "Archiver"
PERMISSION_FIXER = "PermissionFixer"

BUILD_VERSION = "BuildVersion"
CONFIGURATION = "Configuration"
VERSION_BADGE = "VersionBadge"

CLI_SDK_ROOT = "CLISDKRoot"
SHARED_HOST_ROOT = "SharedHostPublishRoot"
HOST_FXR_ROOT = "HostFxrPublishRoot"
SHARED_FRAMEWORK_ROOT = "SharedFrameworkPublishRoot"
COMBINED_HOST_ROOT = "CombinedFrameworkSDKHostRoot"
COMBINED_ROOT = "CombinedFrameworkSDKRoot"
SDK_SYMBOLS_ROOT = "SdkSymbolsRoot"

COMBINED_HOST_ARCHIVE = "CombinedFrameworkSDKHostCompressedFile"
COMBINED_ARCHIVE = "CombinedFrameworkSDKCompressedFile"
SDK_SYMBOLS_ARCHIVE = "SdkSymbolsCompressedFile"
