"""JSON Schema helpers for tool input declaration and validation."""

from typing import Any

from jsonschema import Draft7Validator

from shared.errors import ValidationError

_TYPE_MAPPING = {
    "string": "string",
    "str": "string",
    "integer": "integer",
    "int": "integer",
    "number": "number",
    "float": "number",
    "boolean": "boolean",
    "bool": "boolean",
    "array": "array",
    "list": "array",
    "object": "object",
    "dict": "object",
}


def schema_errors(data: Any, schema: dict[str, Any]) -> list[str]:
    """
    Collect every violation of ``schema`` in ``data``.

    Args:
        data: The data to validate
        schema: JSON Schema to validate against

    Returns:
        List of error messages, empty when the data is valid
    """
    if not schema:
        return []

    validator = Draft7Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.path)))

    return [
        f"{'.'.join(str(p) for p in e.path)}: {e.message}" if e.path else e.message
        for e in errors
    ]


def validate_arguments(
    tool_name: str,
    arguments: Any,
    schema: dict[str, Any]
) -> dict[str, Any]:
    """
    Validate raw tool arguments and return them with defaults applied.

    Missing arguments are treated as an empty object.

    Raises:
        ValidationError: listing every offending field
    """
    if arguments is None:
        arguments = {}

    errors = schema_errors(arguments, schema)
    if errors:
        raise ValidationError(tool_name, errors)

    validated = dict(arguments)
    for name, prop in schema.get("properties", {}).items():
        if name not in validated and "default" in prop:
            validated[name] = prop["default"]
    return validated


def create_tool_schema(parameters: list[dict[str, Any]]) -> dict[str, Any]:
    """
    Create a JSON Schema from a list of parameter definitions.

    Each parameter is a dict with ``name``, ``type`` and ``description``,
    plus optional ``required``, ``enum``, ``default``, ``items``,
    ``properties`` (nested objects, same format), ``minimum`` and
    ``minItems``. Parameters are optional unless ``required`` is set.

    Args:
        parameters: List of parameter definitions

    Returns:
        JSON Schema dictionary
    """
    properties = {}

    for param in parameters:
        param_schema: dict[str, Any] = {
            "type": _TYPE_MAPPING.get(param.get("type", "string"), "string"),
            "description": param.get("description", ""),
        }

        for key in ("enum", "default", "minimum", "minItems"):
            if key in param:
                param_schema[key] = param[key]

        if param_schema["type"] == "array":
            item_type = param.get("items", "string")
            param_schema["items"] = {"type": _TYPE_MAPPING.get(item_type, item_type)}

        if param_schema["type"] == "object" and "properties" in param:
            param_schema.update(create_tool_schema(param["properties"]))

        properties[param["name"]] = param_schema

    schema: dict[str, Any] = {
        "type": "object",
        "properties": properties,
    }

    required = [p["name"] for p in parameters if p.get("required", False)]
    if required:
        schema["required"] = required

    return schema
