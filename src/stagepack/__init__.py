"""stagepack - Packaging-stage build pipeline for staged build output."""

__version__ = "0.1.0"

from .archivers import Archiver as Archiver
from .archivers import TarGzArchiver as TarGzArchiver
from .archivers import ZipArchiver as ZipArchiver
from .context import BuildContext as BuildContext
from .errors import ExternalToolError as ExternalToolError
from .errors import MissingInputError as MissingInputError
from .errors import MissingKeyError as MissingKeyError
from .errors import PackagingError as PackagingError
from .errors import TargetOrderError as TargetOrderError
from .pipeline import Pipeline as Pipeline
from .projects import PackageProject as PackageProject
from .results import Failure as Failure
from .results import Success as Success
from .results import TargetResult as TargetResult
from .targets import Target as Target
from .targets import target as target
from .version import BuildVersion as BuildVersion
