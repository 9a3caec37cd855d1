import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from funcapp_gen.config import AnalyzerConfig
from funcapp_gen.constants import FUNCTION_JSON, HOST_JSON
from funcapp_gen.core.archive import extract_archive
from funcapp_gen.core.diagnostics import CollectingSink
from funcapp_gen.core.pipeline import analyze_document
from funcapp_gen.core.syntax import parse_file
from funcapp_gen.models import FunctionApp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    app: FunctionApp
    has_errors: bool
    written: list[Path] = field(default_factory=list)


def _write_json(path: Path, payload: dict[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return path


def write_function_app(app: FunctionApp, output_dir: str | Path, template: str | Path | None = None) -> list[Path]:
    """Write host.json and one function.json per function, on top of an optional runtime template."""
    output = Path(output_dir)
    output.mkdir(parents=True, exist_ok=True)
    if template is not None:
        extract_archive(template, output)

    written = [_write_json(output / HOST_JSON, app.host.host_json())]
    for function in app.functions:
        written.append(_write_json(output / function.name / FUNCTION_JSON, function.function_json()))
    logger.info("Wrote %d function(s) to %s", len(app.functions), output)
    return written


def build(
    source_path: str | Path,
    output_dir: str | Path,
    sink: CollectingSink,
    config: AnalyzerConfig | None = None,
    template: str | Path | None = None,
) -> BuildResult:
    """Analyze *source_path* and write the function app unless an error diagnostic was reported."""
    document = parse_file(source_path)
    app = analyze_document(document, sink, config)
    if sink.has_errors:
        logger.info("Not writing %s: analysis reported errors", output_dir)
        return BuildResult(app=app, has_errors=True)
    return BuildResult(app=app, has_errors=False, written=write_function_app(app, output_dir, template))
