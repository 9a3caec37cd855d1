"""Unit tests for writing function-app descriptors."""

import json
from pathlib import Path

import pytest

from funcapp_gen.config import AnalyzerConfig
from funcapp_gen.core.diagnostics import CollectingSink
from funcapp_gen.core.generator import build, write_function_app
from funcapp_gen.models import Binding, FunctionApp, FunctionDescriptor, HostSettings


def _read(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


class TestWriteFunctionApp:
    def test_writes_host_and_function_files(self, tmp_path: Path) -> None:
        app = FunctionApp(
            host=HostSettings(handler_executable="handler"),
            functions=[
                FunctionDescriptor(
                    name="Cleanup-run",
                    service="Cleanup",
                    handler="Cleanup.run",
                    bindings=[Binding(type="timerTrigger", direction="in", name="inMsg", schedule="0 0 * * * *")],
                )
            ],
        )

        written = write_function_app(app, tmp_path / "out")

        assert written == [tmp_path / "out" / "host.json", tmp_path / "out" / "Cleanup-run" / "function.json"]
        assert _read(written[0])["customHandler"]["description"]["defaultExecutablePath"] == "handler"
        assert _read(written[1]) == {
            "bindings": [{"type": "timerTrigger", "direction": "in", "name": "inMsg", "schedule": "0 0 * * * *"}]
        }
        assert written[1].read_text(encoding="utf-8").endswith("}\n")

    def test_descriptors_are_written_over_the_template(self, tmp_path: Path, template_zip: Path) -> None:
        app = FunctionApp(host=HostSettings(handler_executable="bin/handler"))
        output = tmp_path / "out"

        write_function_app(app, output, template=template_zip)

        assert (output / "bin" / "handler").exists()
        assert (output / "local.settings.json").exists()
        assert _read(output / "host.json")["version"] == "2.0"


class TestBuild:
    def test_builds_sample(self, sample_file: Path, tmp_path: Path, sink: CollectingSink) -> None:
        output = tmp_path / "app"

        result = build(sample_file, output, sink, AnalyzerConfig(handler_executable="server"))

        assert not result.has_errors
        assert len(result.written) == 5
        host = _read(output / "host.json")
        assert host["customHandler"]["description"]["defaultExecutablePath"] == "server"
        assert host["extensions"]["queues"] == {"batchSize": 16}
        create = _read(output / "create-order" / "function.json")
        assert [b["type"] for b in create["bindings"]] == ["httpTrigger", "http", "queue"]
        assert create["bindings"][0] == {
            "type": "httpTrigger",
            "direction": "in",
            "name": "httpPayload",
            "authLevel": "function",
            "methods": ["post"],
            "route": "api/orders",
        }

    def test_errors_prevent_writing(self, tmp_path: Path, sink: CollectingSink, config: AnalyzerConfig) -> None:
        source = tmp_path / "broken.py"
        source.write_text('@af.timer_service(schedule="never")\nclass T:\n    pass\n')
        output = tmp_path / "app"

        result = build(source, output, sink, config)

        assert result.has_errors
        assert result.written == []
        assert not output.exists()
        assert [d.code.code for d in sink.diagnostics] == ["AZ0001"]

    def test_warnings_do_not_prevent_writing(
        self, tmp_path: Path, sink: CollectingSink, config: AnalyzerConfig
    ) -> None:
        source = tmp_path / "idle.py"
        source.write_text('@af.timer_service(schedule="0 0 * * * *")\nclass Idle:\n    pass\n')

        result = build(source, tmp_path / "app", sink, config)

        assert not result.has_errors
        assert result.written == [tmp_path / "app" / "host.json"]
        assert [d.code.code for d in sink.diagnostics] == ["AZ0007"]

    def test_missing_source(self, tmp_path: Path, sink: CollectingSink, config: AnalyzerConfig) -> None:
        with pytest.raises(FileNotFoundError):
            build(tmp_path / "missing.py", tmp_path / "app", sink, config)
