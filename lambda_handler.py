"""
AWS Lambda entry point for the commission dashboard.

API Gateway (REST or HTTP API) forwards dashboard and tranche-editing
requests here; each POST route maps onto one DashboardProcessor method.
main.py serves the same routes through Flask for local work.
"""

import base64
import json
import logging
import os

from commissions import DashboardProcessor

logger = logging.getLogger()
logger.setLevel(logging.INFO)

ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")

# Off: tranche outcomes leave credit out, raw transaction outcomes add it
PRORATE_CREDIT = os.environ.get("PRORATE_CREDIT", "false").lower() == "true"

# Module level so warm invocations reuse it
processor = DashboardProcessor(prorate_credit=PRORATE_CREDIT)

CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}

ROUTES = {
    "/dashboard": processor.process_from_dict,
    "/tranches/replace": processor.replace_tranches_from_dict,
    "/tranches/split": processor.split_from_dict,
}


def _response(status_code: int, payload) -> dict:
    return {"statusCode": status_code, "headers": CORS_HEADERS, "body": json.dumps(payload)}


def lambda_handler(event, context):
    """
    Dispatch one API Gateway event.

    GET /health and GET /api answer directly, POST routes listed in
    ROUTES run the engine, OPTIONS answers the CORS preflight, and
    anything else is a 404.
    """
    http_method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    if http_method == "OPTIONS":
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": ""}

    # REST API events carry "path", HTTP API events "rawPath"
    path = event.get("path") or event.get("rawPath", "")

    if path == "/health" and http_method == "GET":
        return handle_health()
    if path == "/api" and http_method == "GET":
        return handle_api_info()
    if path in ROUTES and http_method == "POST":
        return handle_post(event, path)
    return _response(404, {"error": "Not found", "path": path})


def handle_health():
    return _response(200, {"status": "healthy", "environment": ENVIRONMENT})


def handle_api_info():
    """Service description with the dashboard and tranche routes."""
    return _response(
        200,
        {
            "status": "ok",
            "message": "Commission Dashboard API",
            "version": "1.0",
            "environment": ENVIRONMENT,
            "runtime": "AWS Lambda",
            "endpoints": {
                "dashboard": "/dashboard [POST]",
                "replace_tranches": "/tranches/replace [POST]",
                "split_tranches": "/tranches/split [POST]",
                "health": "/health [GET]",
            },
        },
    )


def handle_post(event, path):
    """Decode the request body and hand it to the route's processor method."""
    try:
        body = event.get("body", "")
        if isinstance(body, str):
            if not body:
                return _response(400, {"error": "No dashboard or tranche data provided", "status": "failed"})
            if event.get("isBase64Encoded"):
                body = base64.b64decode(body).decode("utf-8")
            payload = json.loads(body)
        else:
            payload = body

        logger.info(f"Handling {path}")
        result = ROUTES[path](payload)
        logger.info(f"Handled {path}")

        return _response(200, result)

    except json.JSONDecodeError as e:
        logger.error(f"Request body for {path} is not JSON: {str(e)}")
        return _response(400, {"error": f"Invalid JSON: {str(e)}", "status": "failed"})

    except (ValueError, KeyError, TypeError) as e:
        # Bad records: unknown branch or status, month or probability out of range, missing field
        logger.error(f"Rejected {path} payload: {str(e)}")
        return _response(400, {"error": f"Validation error: {str(e)}", "status": "validation_failed"})

    except Exception as e:
        # Engine failure; the client only gets a generic message
        logger.error(f"Failed to compute {path}: {str(e)}", exc_info=True)
        return _response(500, {"error": "Dashboard computation failed", "status": "failed"})
