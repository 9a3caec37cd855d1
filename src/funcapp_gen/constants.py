"""Names and values shared by the analyzer and the generator."""

# Service annotations and the kind of service each one declares.
HTTP_SERVICE = "http_service"
QUEUE_SERVICE = "queue_service"
TIMER_SERVICE = "timer_service"

SERVICE_KINDS = {
    HTTP_SERVICE: "http",
    QUEUE_SERVICE: "queue",
    TIMER_SERVICE: "timer",
}

# Trigger annotations, keyed by the service kind that accepts them.
RESOURCE = "resource"
ON_MESSAGE = "on_message"
ON_TICK = "on_tick"

TRIGGER_FOR_SERVICE = {
    "http": RESOURCE,
    "queue": ON_MESSAGE,
    "timer": ON_TICK,
}

QUEUE_OUTPUT = "queue_output"
BLOB_OUTPUT = "blob_output"

ANNOTATION_FIELDS: dict[str, frozenset[str]] = {
    HTTP_SERVICE: frozenset({"base_path", "auth_level"}),
    QUEUE_SERVICE: frozenset({"queue_name", "connection", "batch_size", "max_dequeue_count"}),
    TIMER_SERVICE: frozenset({"schedule"}),
    RESOURCE: frozenset({"method", "path", "name"}),
    ON_MESSAGE: frozenset({"name"}),
    ON_TICK: frozenset({"name"}),
    QUEUE_OUTPUT: frozenset({"queue_name", "connection"}),
    BLOB_OUTPUT: frozenset({"path", "connection"}),
}

# Binding names used in function.json
HTTP_PAYLOAD = "httpPayload"
RESP = "resp"
IN_MSG = "inMsg"
OUT_MSG = "outMsg"

GET = "get"
POST = "post"
PUT = "put"
PATCH = "patch"
DELETE = "delete"
HEAD = "head"
OPTIONS = "options"
DEFAULT = "default"

HTTP_METHODS = frozenset({GET, POST, PUT, PATCH, DELETE, HEAD, OPTIONS, DEFAULT})

AUTH_LEVELS = frozenset({"anonymous", "function", "admin"})

# Built-in names a parameter may be annotated with.
PARAMETER_BUILTINS = frozenset({"str", "int", "float", "bool", "bytes", "dict", "list"})

BUILTIN_NAMES = PARAMETER_BUILTINS | frozenset(
    {"None", "object", "tuple", "set", "frozenset", "bytearray", "complex", "type"}
)

EXTENSION_BUNDLE_ID = "Microsoft.Azure.Functions.ExtensionBundle"
DEFAULT_EXTENSION_BUNDLE_VERSION = "[4.*, 5.0.0)"
DEFAULT_HANDLER_EXECUTABLE = "handler"

HOST_JSON = "host.json"
FUNCTION_JSON = "function.json"
