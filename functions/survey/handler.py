"""
API gateway proxy handler for POST /api/survey
"""
import json
import logging

logger = logging.getLogger()
logger.setLevel(logging.INFO)

ALLOWED_FLAVORS = ("vanilla", "chocolate", "strawberry", "mint", "cookie-dough")


def cors_headers(origin):
    # the site and the API share the CloudFront origin, mirror it back when present
    return {
        "Access-Control-Allow-Origin": origin or "*",
        "Access-Control-Allow-Methods": "OPTIONS,POST",
        "Access-Control-Allow-Headers": "Content-Type",
    }


def response(status_code: int, payload: dict, origin) -> dict:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json", **cors_headers(origin)},
        "body": json.dumps(payload, ensure_ascii=False),
    }


def request_origin(event: dict):
    headers = event.get("headers") or {}
    return headers.get("origin") or headers.get("Origin")


def invalid_request(error: str, origin) -> dict:
    return response(400, {"error": error, "allowed": list(ALLOWED_FLAVORS)}, origin)


def handler(event, context):
    origin = None
    try:
        origin = request_origin(event)
        try:
            body = json.loads(event.get("body") or "")
        except json.JSONDecodeError:
            logger.exception("Unable to parse request body")
            return invalid_request("Invalid request body", origin)

        flavor = body.get("flavor") if isinstance(body, dict) else None
        if flavor not in ALLOWED_FLAVORS:
            return invalid_request("Invalid flavor", origin)

        return response(200, {"ok": True, "message": f"Yum! You picked {flavor} 🍨"}, origin)
    except Exception:
        logger.exception("Error handling request")
        return response(500, {"error": "Server error"}, origin)
