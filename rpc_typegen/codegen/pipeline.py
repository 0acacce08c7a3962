"""
Compilation pass: syntax units in, manifest and generated code out.

Each unit is extracted on its own (optionally on a thread pool); the
partial manifests are then concatenated and sorted by name, which makes
the output independent of unit order and of the degree of parallelism.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from ..logging_config import get_logger
from ..utils import load_syntax_unit
from .core.config import GeneratorConfig
from .core.diagnostics import Diagnostic, EmptyManifestError, GeneratorError
from .core.generator import GenerationResult, generate_code
from .core.model import Manifest
from .frontend.extract import ExtractionResult, extract_unit
from .frontend.syntax import SyntaxUnit
from .languages.typescript import TypeScriptGenerator

logger = get_logger(__name__)


@dataclass
class CompilationResult:
    """Aggregated manifest of a pass plus all diagnostics."""

    manifest: Manifest
    diagnostics: List[Diagnostic] = field(default_factory=list)


def compile_units(units: Sequence[SyntaxUnit], jobs: int = 1) -> CompilationResult:
    """
    Extract and merge a set of syntax units.

    Args:
        units: Decoded syntax units
        jobs: Worker threads for extraction (1 runs inline)

    Returns:
        CompilationResult with a name-sorted manifest

    Raises:
        EmptyManifestError: If no units were given or nothing was discovered
    """
    if not units:
        raise EmptyManifestError("No input units were given")

    if jobs > 1 and len(units) > 1:
        logger.debug(f"Extracting {len(units)} units with {jobs} workers")
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            results: List[ExtractionResult] = list(executor.map(extract_unit, units))
    else:
        results = [extract_unit(unit) for unit in units]

    manifest = Manifest.merge(r.manifest for r in results)
    diagnostics = [d for r in results for d in r.diagnostics]

    if manifest.is_empty():
        raise EmptyManifestError(
            f"No procedures or serializable types found in {len(units)} unit(s)"
        )

    logger.info(
        f"Discovered {len(manifest.procedures)} procedures, "
        f"{len(manifest.records)} records and {len(manifest.sums)} enums"
    )
    return CompilationResult(manifest=manifest, diagnostics=diagnostics)


def load_units(paths: Iterable[Union[str, Path]]) -> List[SyntaxUnit]:
    """
    Read syntax-tree documents from disk.

    Any unreadable document fails the whole load, before aggregation.

    Raises:
        FrontendError: With the path of the first unit that fails
    """
    return [load_syntax_unit(path) for path in paths]


def compile_paths(
    paths: Iterable[Union[str, Path]], jobs: int = 1
) -> CompilationResult:
    """Load documents from disk and compile them."""
    return compile_units(load_units(paths), jobs=jobs)


def generate_manifest(
    manifest: Manifest, config: Optional[GeneratorConfig] = None
) -> GenerationResult:
    """
    Render a manifest with the TypeScript generator.

    Returns:
        GenerationResult; never raises for generation failures
    """
    try:
        generator = TypeScriptGenerator(config or GeneratorConfig())
    except Exception as e:
        logger.debug("Generator setup failed", exc_info=True)
        return GenerationResult.error(f"Failed to create generator: {e}", exception=e)
    return generate_code(generator, manifest)


def run_pipeline(
    paths: Iterable[Union[str, Path]],
    config: Optional[GeneratorConfig] = None,
    jobs: int = 1,
) -> GenerationResult:
    """
    Full pass from syntax-tree documents to generated code.

    Front-end and empty-input failures, which stop the pass before any
    text is produced, come back as a failed GenerationResult. Extraction
    diagnostics are added to the result's warnings.
    """
    try:
        compilation = compile_paths(paths, jobs=jobs)
    except GeneratorError as e:
        logger.debug("Compilation failed", exc_info=True)
        return GenerationResult.error(str(e), exception=e)

    result = generate_manifest(compilation.manifest, config)
    if result.success:
        result.warnings = [str(d) for d in compilation.diagnostics] + result.warnings
        result.metadata["diagnostic_count"] = len(compilation.diagnostics)
    return result
