from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from funcapp_gen.constants import DEFAULT_EXTENSION_BUNDLE_VERSION, EXTENSION_BUNDLE_ID


class LinePosition(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int
    offset: int


class LineRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: LinePosition
    end: LinePosition


class SourceLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    line_range: LineRange
    start_byte: int
    end_byte: int

    def __str__(self) -> str:
        start = self.line_range.start
        return f"{self.path}:{start.line + 1}:{start.offset + 1}"


class Binding(BaseModel):
    """One entry of the ``bindings`` array in a function.json file."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    direction: str
    name: str
    auth_level: str | None = Field(default=None, alias="authLevel")
    methods: list[str] | None = None
    route: str | None = None
    queue_name: str | None = Field(default=None, alias="queueName")
    connection: str | None = None
    schedule: str | None = None
    path: str | None = None
    data_type: str | None = Field(default=None, alias="dataType")


class FunctionDescriptor(BaseModel):
    name: str
    service: str
    handler: str
    bindings: list[Binding]

    def function_json(self) -> dict[str, Any]:
        return {"bindings": [b.model_dump(by_alias=True, exclude_none=True) for b in self.bindings]}


class HostSettings(BaseModel):
    handler_executable: str
    extension_bundle_version: str = DEFAULT_EXTENSION_BUNDLE_VERSION
    queue_batch_size: int | None = None
    queue_max_dequeue_count: int | None = None

    def host_json(self) -> dict[str, Any]:
        extensions: dict[str, Any] = {"http": {"routePrefix": ""}}
        queues: dict[str, int] = {}
        if self.queue_batch_size is not None:
            queues["batchSize"] = self.queue_batch_size
        if self.queue_max_dequeue_count is not None:
            queues["maxDequeueCount"] = self.queue_max_dequeue_count
        if queues:
            extensions["queues"] = queues
        return {
            "version": "2.0",
            "extensionBundle": {"id": EXTENSION_BUNDLE_ID, "version": self.extension_bundle_version},
            "customHandler": {
                "description": {"defaultExecutablePath": self.handler_executable, "arguments": []},
                "enableForwardingHttpRequest": False,
            },
            "extensions": extensions,
        }


class FunctionApp(BaseModel):
    host: HostSettings
    functions: list[FunctionDescriptor] = []
