"""Structural diff engine for dereferenced OpenAPI documents.

Walks two fully resolved specs and classifies every difference as
``breaking``, ``non-breaking`` or ``unclassified``. Each difference is a plain
dict::

    {
        "type": "breaking",
        "action": "remove",
        "code": "path.remove",
        "entity": "path",
        "source": "contract-navigator",
        "sourceSpecEntityDetails": [{"location": "paths./users", "value": {...}}],
        "destinationSpecEntityDetails": [],
    }

Components are not compared on their own. Once references are resolved a
component change shows up at every place that uses it.
"""

from dataclasses import dataclass
from typing import Any, Literal

from contract_navigator.core.exceptions import DiffEngineError

SOURCE_TAG = "contract-navigator"

BREAKING = "breaking"
NON_BREAKING = "non-breaking"
UNCLASSIFIED = "unclassified"

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

DOC_FIELDS = {
    "description",
    "summary",
    "title",
    "example",
    "examples",
    "externalDocs",
}

# Keys with dedicated comparison logic; everything else falls back to equality.
_TOP_LEVEL_HANDLED = {"paths", "components", "definitions", "info"}
_OPERATION_HANDLED = {"parameters", "requestBody", "responses"} | DOC_FIELDS
_SCHEMA_HANDLED = {
    "type",
    "properties",
    "required",
    "enum",
    "items",
    "allOf",
    "oneOf",
    "anyOf",
    "additionalProperties",
} | DOC_FIELDS
_SWAGGER_PARAM_SCHEMA_KEYS = ("type", "format", "items", "enum", "collectionFormat")

_ABSENT = object()

Direction = Literal["request", "response"]


@dataclass(frozen=True)
class SpecDocument:
    """A spec handed to the engine, tagged with where it came from."""

    content: Any
    location: str
    format: Literal["openapi3", "swagger2"] = "openapi3"


def detect_format(spec: Any) -> Literal["openapi3", "swagger2"]:
    if isinstance(spec, dict) and "swagger" in spec:
        return "swagger2"
    return "openapi3"


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _snapshot(value: Any, _stack: tuple[int, ...] = ()) -> Any:
    """Detached, JSON-safe copy of a value; cycles become ``"[Circular]"``."""
    if isinstance(value, (dict, list)):
        if id(value) in _stack:
            return "[Circular]"
        stack = _stack + (id(value),)
        if isinstance(value, dict):
            return {str(k): _snapshot(v, stack) for k, v in value.items()}
        return [_snapshot(v, stack) for v in value]
    return value


def _equal(old: Any, new: Any) -> bool:
    # Resolved specs may be cyclic; plain == would recurse forever.
    if old is new:
        return True
    return _snapshot(old) == _snapshot(new)


def _schema_type(schema: dict[str, Any]) -> str | None:
    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        return "|".join(sorted(str(t) for t in schema_type))
    if isinstance(schema_type, str):
        return schema_type
    return None


def _required_names(schema: dict[str, Any]) -> set[str]:
    required = schema.get("required")
    if not isinstance(required, list):
        return set()
    return {str(name) for name in required}


class _SpecComparison:
    """One diff run. Collects differences while walking both documents."""

    def __init__(self, source: SpecDocument, destination: SpecDocument) -> None:
        self.source = source
        self.destination = destination
        self.differences: list[dict[str, Any]] = []
        # Holds the compared pairs so their ids stay unique for the whole run.
        self._seen_schemas: dict[tuple[int, int, str], tuple[Any, Any]] = {}

    # ------------------------------------------------------------------ records

    def add(
        self,
        type_: str,
        action: str,
        entity: str,
        location: str,
        old: Any = _ABSENT,
        new: Any = _ABSENT,
    ) -> None:
        source_details = [] if old is _ABSENT else [{"location": location, "value": _snapshot(old)}]
        destination_details = (
            [] if new is _ABSENT else [{"location": location, "value": _snapshot(new)}]
        )
        self.differences.append(
            {
                "action": action,
                "code": f"{entity}.{action}",
                "destinationSpecEntityDetails": destination_details,
                "entity": entity,
                "source": SOURCE_TAG,
                "sourceSpecEntityDetails": source_details,
                "type": type_,
            }
        )

    def compare_values(
        self, entity: str, location: str, old: Any, new: Any, type_: str = UNCLASSIFIED
    ) -> None:
        """Equality check reporting add/remove/edit under a single entity."""
        if old is _ABSENT and new is _ABSENT:
            return
        if old is _ABSENT:
            self.add(type_, "add", entity, location, new=new)
        elif new is _ABSENT:
            self.add(type_, "remove", entity, location, old=old)
        elif not _equal(old, new):
            self.add(type_, "edit", entity, location, old=old, new=new)

    # ---------------------------------------------------------------- top level

    def run(self) -> None:
        old_spec = self.source.content
        new_spec = self.destination.content

        old_info = _mapping(old_spec.get("info"))
        new_info = _mapping(new_spec.get("info"))
        for field in sorted(set(old_info) | set(new_info)):
            self.compare_values(
                f"info.{field}",
                f"info.{field}",
                old_info.get(field, _ABSENT),
                new_info.get(field, _ABSENT),
            )

        for key in sorted((set(old_spec) | set(new_spec)) - _TOP_LEVEL_HANDLED):
            self.compare_values(key, key, old_spec.get(key, _ABSENT), new_spec.get(key, _ABSENT))

        self.compare_paths(_mapping(old_spec.get("paths")), _mapping(new_spec.get("paths")))

    def compare_paths(self, old_paths: dict[str, Any], new_paths: dict[str, Any]) -> None:
        for path in sorted(set(old_paths) - set(new_paths)):
            self.add(BREAKING, "remove", "path", f"paths.{path}", old=old_paths[path])
        for path in sorted(set(new_paths) - set(old_paths)):
            self.add(NON_BREAKING, "add", "path", f"paths.{path}", new=new_paths[path])
        for path in sorted(set(old_paths) & set(new_paths)):
            self.compare_path_item(path, _mapping(old_paths[path]), _mapping(new_paths[path]))

    def compare_path_item(self, path: str, old_item: dict[str, Any], new_item: dict[str, Any]) -> None:
        location = f"paths.{path}"
        old_methods = {m for m in HTTP_METHODS if isinstance(old_item.get(m), dict)}
        new_methods = {m for m in HTTP_METHODS if isinstance(new_item.get(m), dict)}

        for method in sorted(old_methods - new_methods):
            self.add(BREAKING, "remove", "method", f"{location}.{method}", old=old_item[method])
        for method in sorted(new_methods - old_methods):
            self.add(NON_BREAKING, "add", "method", f"{location}.{method}", new=new_item[method])
        for method in sorted(old_methods & new_methods):
            self.compare_operation(
                f"{location}.{method}",
                old_item[method],
                new_item[method],
                old_item.get("parameters"),
                new_item.get("parameters"),
            )

        skip = set(HTTP_METHODS) | {"parameters"} | DOC_FIELDS
        for key in sorted((set(old_item) | set(new_item)) - skip):
            self.compare_values(
                f"path.{key}",
                f"{location}.{key}",
                old_item.get(key, _ABSENT),
                new_item.get(key, _ABSENT),
            )

    # ---------------------------------------------------------------- operation

    def compare_operation(
        self,
        location: str,
        old_op: dict[str, Any],
        new_op: dict[str, Any],
        old_path_params: Any,
        new_path_params: Any,
    ) -> None:
        old_params = self.effective_parameters(old_path_params, old_op.get("parameters"))
        new_params = self.effective_parameters(new_path_params, new_op.get("parameters"))
        self.compare_parameters(location, old_params, new_params)

        self.compare_request_body(
            f"{location}.requestBody",
            self.request_body(old_op, old_params, self.source.format),
            self.request_body(new_op, new_params, self.destination.format),
        )
        self.compare_responses(
            f"{location}.responses",
            _mapping(old_op.get("responses")),
            _mapping(new_op.get("responses")),
        )

        for key in sorted((set(old_op) | set(new_op)) - _OPERATION_HANDLED):
            self.compare_values(
                f"method.{key}",
                f"{location}.{key}",
                old_op.get(key, _ABSENT),
                new_op.get(key, _ABSENT),
            )

    @staticmethod
    def effective_parameters(path_params: Any, op_params: Any) -> dict[tuple[str, str], dict[str, Any]]:
        """Path-level parameters overridden by operation-level ones, keyed by (in, name)."""
        params: dict[tuple[str, str], dict[str, Any]] = {}
        for group in (path_params, op_params):
            if not isinstance(group, list):
                continue
            for param in group:
                if isinstance(param, dict) and "name" in param and "in" in param:
                    params[(str(param["in"]), str(param["name"]))] = param
        return params

    @staticmethod
    def parameter_schema(param: dict[str, Any]) -> dict[str, Any]:
        if isinstance(param.get("schema"), dict):
            return param["schema"]
        return {k: param[k] for k in _SWAGGER_PARAM_SCHEMA_KEYS if k in param}

    def compare_parameters(
        self,
        location: str,
        old_params: dict[tuple[str, str], dict[str, Any]],
        new_params: dict[tuple[str, str], dict[str, Any]],
    ) -> None:
        old_keys = {k for k in old_params if k[0] != "body"}
        new_keys = {k for k in new_params if k[0] != "body"}

        for key in sorted(old_keys - new_keys):
            self.add(BREAKING, "remove", "parameter", f"{location}.parameters.{key[0]}.{key[1]}", old=old_params[key])
        for key in sorted(new_keys - old_keys):
            param = new_params[key]
            required = bool(param.get("required")) or key[0] == "path"
            self.add(
                BREAKING if required else NON_BREAKING,
                "add",
                "parameter",
                f"{location}.parameters.{key[0]}.{key[1]}",
                new=param,
            )
        for key in sorted(old_keys & new_keys):
            old_param, new_param = old_params[key], new_params[key]
            param_location = f"{location}.parameters.{key[0]}.{key[1]}"

            old_required = bool(old_param.get("required"))
            new_required = bool(new_param.get("required"))
            if new_required and not old_required:
                self.add(BREAKING, "add", "parameter.required", param_location, old=old_required, new=new_required)
            elif old_required and not new_required:
                self.add(NON_BREAKING, "remove", "parameter.required", param_location, old=old_required, new=new_required)

            self.compare_schema(
                f"{param_location}.schema",
                self.parameter_schema(old_param),
                self.parameter_schema(new_param),
                "request",
            )

    # ------------------------------------------------------------------- bodies

    @staticmethod
    def request_body(
        op: dict[str, Any],
        params: dict[tuple[str, str], dict[str, Any]],
        spec_format: str,
    ) -> dict[str, Any] | None:
        """Normalize a request body to ``{"required": bool, "content": {media: schema}}``."""
        if spec_format == "swagger2":
            body_params = [p for k, p in params.items() if k[0] == "body"]
            if not body_params:
                return None
            body = body_params[0]
            consumes = op.get("consumes") or ["*/*"]
            return {
                "required": bool(body.get("required")),
                "content": {str(media): body.get("schema") for media in consumes},
            }

        body = op.get("requestBody")
        if not isinstance(body, dict):
            return None
        return {
            "required": bool(body.get("required")),
            "content": {
                media: _mapping(media_spec).get("schema")
                for media, media_spec in _mapping(body.get("content")).items()
            },
        }

    def compare_request_body(
        self, location: str, old_body: dict[str, Any] | None, new_body: dict[str, Any] | None
    ) -> None:
        if old_body is None and new_body is None:
            return
        if old_body is None:
            self.add(
                BREAKING if new_body["required"] else NON_BREAKING,
                "add",
                "request.body",
                location,
                new=new_body["content"],
            )
            return
        if new_body is None:
            self.add(NON_BREAKING, "remove", "request.body", location, old=old_body["content"])
            return

        if new_body["required"] and not old_body["required"]:
            self.add(BREAKING, "add", "request.body.required", location, old=False, new=True)
        elif old_body["required"] and not new_body["required"]:
            self.add(NON_BREAKING, "remove", "request.body.required", location, old=True, new=False)

        self.compare_content(location, "request", old_body["content"], new_body["content"])

    def compare_content(
        self,
        location: str,
        direction: Direction,
        old_content: dict[str, Any],
        new_content: dict[str, Any],
    ) -> None:
        entity = f"{direction}.body.mediaType"
        for media in sorted(set(old_content) - set(new_content)):
            self.add(BREAKING, "remove", entity, f"{location}.content.{media}", old=old_content[media])
        for media in sorted(set(new_content) - set(old_content)):
            self.add(NON_BREAKING, "add", entity, f"{location}.content.{media}", new=new_content[media])
        for media in sorted(set(old_content) & set(new_content)):
            self.compare_schema(
                f"{location}.content.{media}.schema",
                old_content[media],
                new_content[media],
                direction,
            )

    def response_content(self, response: dict[str, Any], spec_format: str) -> dict[str, Any]:
        if spec_format == "swagger2":
            return {"*/*": response["schema"]} if "schema" in response else {}
        return {
            media: _mapping(media_spec).get("schema")
            for media, media_spec in _mapping(response.get("content")).items()
        }

    def compare_responses(
        self, location: str, old_responses: dict[str, Any], new_responses: dict[str, Any]
    ) -> None:
        for status in sorted(set(old_responses) - set(new_responses)):
            self.add(BREAKING, "remove", "response.status", f"{location}.{status}", old=old_responses[status])
        for status in sorted(set(new_responses) - set(old_responses)):
            self.add(NON_BREAKING, "add", "response.status", f"{location}.{status}", new=new_responses[status])
        for status in sorted(set(old_responses) & set(new_responses)):
            old_response = _mapping(old_responses[status])
            new_response = _mapping(new_responses[status])
            self.compare_content(
                f"{location}.{status}",
                "response",
                self.response_content(old_response, self.source.format),
                self.response_content(new_response, self.destination.format),
            )

    # ------------------------------------------------------------------ schemas

    def compare_schema(self, location: str, old: Any, new: Any, direction: Direction) -> None:
        if not isinstance(old, dict) or not isinstance(new, dict):
            if not _equal(old, new):
                self.add(UNCLASSIFIED, "edit", "schema", location, old=old, new=new)
            return

        pair = (id(old), id(new), direction)
        if pair in self._seen_schemas:
            return
        self._seen_schemas[pair] = (old, new)

        old_type, new_type = _schema_type(old), _schema_type(new)
        if old_type != new_type:
            if old_type is not None and new_type is not None:
                self.add(BREAKING, "edit", "schema.type", f"{location}.type", old=old_type, new=new_type)
                return
            self.compare_values(
                "schema.type",
                f"{location}.type",
                _ABSENT if old_type is None else old_type,
                _ABSENT if new_type is None else new_type,
            )

        self.compare_properties(location, old, new, direction)
        self.compare_enum(location, old.get("enum"), new.get("enum"), direction)

        old_items, new_items = old.get("items", _ABSENT), new.get("items", _ABSENT)
        if isinstance(old_items, dict) and isinstance(new_items, dict):
            self.compare_schema(f"{location}.items", old_items, new_items, direction)
        else:
            self.compare_values("schema.items", f"{location}.items", old_items, new_items)

        old_extra = old.get("additionalProperties", _ABSENT)
        new_extra = new.get("additionalProperties", _ABSENT)
        if isinstance(old_extra, dict) and isinstance(new_extra, dict):
            self.compare_schema(f"{location}.additionalProperties", old_extra, new_extra, direction)
        else:
            self.compare_values(
                "schema.additionalProperties", f"{location}.additionalProperties", old_extra, new_extra
            )

        for keyword in ("allOf", "oneOf", "anyOf"):
            old_parts, new_parts = old.get(keyword, _ABSENT), new.get(keyword, _ABSENT)
            if isinstance(old_parts, list) and isinstance(new_parts, list) and len(old_parts) == len(new_parts):
                for index, (old_part, new_part) in enumerate(zip(old_parts, new_parts)):
                    self.compare_schema(f"{location}.{keyword}.{index}", old_part, new_part, direction)
            else:
                self.compare_values(f"schema.{keyword}", f"{location}.{keyword}", old_parts, new_parts)

        for keyword in sorted((set(old) | set(new)) - _SCHEMA_HANDLED):
            self.compare_values(
                f"schema.{keyword}",
                f"{location}.{keyword}",
                old.get(keyword, _ABSENT),
                new.get(keyword, _ABSENT),
            )

    def compare_properties(
        self, location: str, old: dict[str, Any], new: dict[str, Any], direction: Direction
    ) -> None:
        old_props = _mapping(old.get("properties"))
        new_props = _mapping(new.get("properties"))
        old_required = _required_names(old)
        new_required = _required_names(new)

        for name in sorted(set(old_props) - set(new_props)):
            self.add(BREAKING, "remove", "schema.property", f"{location}.properties.{name}", old=old_props[name])
        for name in sorted(set(new_props) - set(old_props)):
            breaking = direction == "request" and name in new_required
            self.add(
                BREAKING if breaking else NON_BREAKING,
                "add",
                "schema.property",
                f"{location}.properties.{name}",
                new=new_props[name],
            )

        for name in sorted(set(old_props) & set(new_props)):
            prop_location = f"{location}.properties.{name}"
            if name in new_required and name not in old_required:
                # Requests must now send it; responses now always carry it.
                type_ = BREAKING if direction == "request" else NON_BREAKING
                self.add(type_, "add", "schema.required", prop_location, new=name)
            elif name in old_required and name not in new_required:
                type_ = NON_BREAKING if direction == "request" else BREAKING
                self.add(type_, "remove", "schema.required", prop_location, old=name)
            self.compare_schema(prop_location, old_props[name], new_props[name], direction)

    def compare_enum(self, location: str, old_enum: Any, new_enum: Any, direction: Direction) -> None:
        if not isinstance(old_enum, list) or not isinstance(new_enum, list):
            self.compare_values(
                "schema.enum",
                f"{location}.enum",
                _ABSENT if old_enum is None else old_enum,
                _ABSENT if new_enum is None else new_enum,
            )
            return

        removed = [value for value in old_enum if value not in new_enum]
        added = [value for value in new_enum if value not in old_enum]
        if removed:
            type_ = BREAKING if direction == "request" else NON_BREAKING
            self.add(type_, "remove", "schema.enum", f"{location}.enum", old=removed)
        if added:
            type_ = NON_BREAKING if direction == "request" else BREAKING
            self.add(type_, "add", "schema.enum", f"{location}.enum", new=added)

    # ------------------------------------------------------------------- result

    def result(self) -> dict[str, Any]:
        breaking = [d for d in self.differences if d["type"] == BREAKING]
        result: dict[str, Any] = {
            "breakingDifferencesFound": bool(breaking),
            "nonBreakingDifferences": [d for d in self.differences if d["type"] == NON_BREAKING],
            "unclassifiedDifferences": [d for d in self.differences if d["type"] == UNCLASSIFIED],
        }
        if breaking:
            result["breakingDifferences"] = breaking
        return result


class StructuralDiffEngine:
    """Compares two dereferenced specs and classifies the differences."""

    def diff_specs(self, source: SpecDocument, destination: SpecDocument) -> dict[str, Any]:
        """Diff ``source`` (base) against ``destination`` (candidate).

        Args:
            source: Base spec, fully dereferenced
            destination: Spec compared against the base, fully dereferenced

        Returns:
            Mapping with ``breakingDifferencesFound``, ``nonBreakingDifferences``,
            ``unclassifiedDifferences`` and, when any exist,
            ``breakingDifferences``

        Raises:
            DiffEngineError: If either document is not a JSON object
        """
        for document in (source, destination):
            if not isinstance(document.content, dict):
                raise DiffEngineError(
                    f"Spec at {document.location} must be a JSON object, "
                    f"got {type(document.content).__name__}"
                )

        comparison = _SpecComparison(source, destination)
        comparison.run()
        return comparison.result()
