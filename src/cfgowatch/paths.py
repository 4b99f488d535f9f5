"""Mapping from a changed config file to generator input and output paths."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cfgowatch.config.schema import LayoutConfig
from cfgowatch.errors import OutputDirectoryError


@dataclass(frozen=True)
class GenerationPaths:
    """Paths for a single generator invocation."""

    input_file: Path
    output_dir: Path
    output_file: Path


def output_name(file_name: str, input_suffix: str = ".json", output_suffix: str = ".go") -> str:
    """Swap a trailing input suffix for the output suffix.

    Only the suffix at the end of the name is replaced, so ``a.json.b.json``
    becomes ``a.json.b.go``. A name without the suffix gets the output
    suffix appended.
    """
    if input_suffix and file_name.endswith(input_suffix):
        file_name = file_name[: -len(input_suffix)]
    return file_name + output_suffix


def resolve_paths(
    root: Path | str,
    changed_file: Path | str,
    layout: LayoutConfig | None = None,
    extension: str = ".go",
) -> GenerationPaths:
    """Compute input and output paths for a change under a module root.

    The input is always re-rooted at ``root/<config_dir>`` by file name, so
    the event's own directory is not trusted.
    """
    layout = layout or LayoutConfig()
    file_name = Path(changed_file).name
    config_dir = Path(root) / layout.config_dir
    output_dir = config_dir / layout.generated_dir
    return GenerationPaths(
        input_file=config_dir / file_name,
        output_dir=output_dir,
        output_file=output_dir / output_name(file_name, layout.input_suffix, extension),
    )


def ensure_output_dir(paths: GenerationPaths) -> Path:
    """Create the output directory (and parents) if missing.

    Raises:
        OutputDirectoryError: The directory could not be created.
    """
    try:
        paths.output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputDirectoryError(paths.output_dir, e.strerror or str(e)) from e
    return paths.output_dir
