"""Field Mapper: remap tabular files onto a canonical field list.

Heavy submodules are imported lazily, so ``import field_mapper`` stays cheap
for callers that only need ``__version__``.
"""

from importlib import import_module, metadata
from pathlib import Path
from typing import TYPE_CHECKING
import tomllib

if TYPE_CHECKING:
    from field_mapper.config import FieldConfig, FieldDefinition
    from field_mapper.engine import Engine
    from field_mapper.models import ProcessRequest, ProcessResult, ProcessStatus
    from field_mapper.render import OutputFormat
    from field_mapper.settings import Settings


def _read_version() -> str:
    # A source checkout (or editable install) reports the pyproject version.
    pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    try:
        version = tomllib.loads(pyproject.read_text(encoding="utf-8")).get("project", {}).get("version")
    except (OSError, tomllib.TOMLDecodeError):
        version = None
    if isinstance(version, str) and version:
        return version

    try:
        return metadata.version("field-mapper")
    except metadata.PackageNotFoundError:  # pragma: no cover
        return "unknown"


__version__ = _read_version()

_LAZY = {
    "Engine": "field_mapper.engine",
    "Settings": "field_mapper.settings",
    "FieldConfig": "field_mapper.config",
    "FieldDefinition": "field_mapper.config",
    "OutputFormat": "field_mapper.render",
    "ProcessRequest": "field_mapper.models",
    "ProcessResult": "field_mapper.models",
    "ProcessStatus": "field_mapper.models",
}


def __getattr__(name: str):
    module_name = _LAZY.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    value = getattr(import_module(module_name), name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted({*globals(), *_LAZY})


__all__ = [
    "Engine",
    "FieldConfig",
    "FieldDefinition",
    "OutputFormat",
    "ProcessRequest",
    "ProcessResult",
    "ProcessStatus",
    "Settings",
    "__version__",
]
