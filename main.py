from flask import Flask, request, jsonify
from flask_cors import CORS
from commissions import DashboardProcessor
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (the dashboard front end calls the API from another origin)
CORS(app)

ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")
PRORATE_CREDIT = os.environ.get("PRORATE_CREDIT", "false").lower() == "true"

# Initialize the dashboard processor
processor = DashboardProcessor(prorate_credit=PRORATE_CREDIT)


def _date_label(input_data):
    date_range = input_data.get('date_range', {})
    return f"{date_range.get('start_month', 1)}-{date_range.get('end_month', 12)}/{date_range.get('year', '?')}"


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Commission Dashboard API",
        "version": "1.0",
        "environment": ENVIRONMENT,
        "endpoints": {
            "dashboard": "/dashboard [POST]",
            "replace_tranches": "/tranches/replace [POST]",
            "split_tranches": "/tranches/split [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy", "environment": ENVIRONMENT}), 200


def _run(handler, label):
    try:
        input_data = request.get_json(force=True)

        if not input_data:
            return jsonify({
                "error": "No dashboard or tranche data provided",
                "status": "failed"
            }), 400

        logger.info(f"Processing {label(input_data)}")

        result = handler(input_data)

        logger.info(f"Processed successfully: {label(input_data)}")

        return jsonify(result), 200

    except (ValueError, KeyError, TypeError) as e:
        # Bad records: unknown branch or status, month or probability out of range
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400

    except Exception as e:
        # Unexpected errors
        logger.error(f"Processing error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "failed"
        }), 500


@app.route("/dashboard", methods=["POST"])
def dashboard():
    """
    Resolve tranches and build every dashboard view for a date window
    """
    return _run(processor.process_from_dict, lambda data: f"dashboard for {_date_label(data)}")


@app.route("/tranches/replace", methods=["POST"])
def replace_tranches():
    """Plan a full replace of one transaction's tranches"""
    return _run(
        processor.replace_tranches_from_dict,
        lambda data: f"tranche replace for transaction {data.get('transaction_id', 'Unknown')}",
    )


@app.route("/tranches/split", methods=["POST"])
def split_tranches():
    """Even split of a transaction's commission"""
    return _run(
        processor.split_from_dict,
        lambda data: f"tranche split for transaction {data.get('transaction', {}).get('id', 'Unknown')}",
    )


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
