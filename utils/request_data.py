from flask import abort


def json_str(data: dict, key: str, default: str = "") -> str:
    """
    Stripped string field from a JSON body. Missing or null gives `default`;
    any other non-string aborts with 400.
    """
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        abort(400, description=f"{key} must be a string")
    return value.strip()
