from flask import Flask, request, jsonify
from flask_cors import CORS
from agreement_engine import AgreementProcessor, TerminationProcessor
import os
import logging

# Configure logging
logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (the back-office UI calls the API from the browser)
CORS(app)

# Initialize the processors
processor = AgreementProcessor()
termination_processor = TerminationProcessor()


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Agreement Pricing & Term Engine API",
        "version": "1.0",
        "endpoints": {
            "calculate_agreement": "/calculate_agreement [POST]",
            "validate_agreement": "/validate_agreement [POST]",
            "resolve_termination": "/resolve_termination [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


def _run(handler, describe):
    """Run a processor call on the JSON body and map errors to responses."""
    try:
        input_data = request.get_json(force=True, silent=True)

        if not input_data:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        logger.info(f"Processing {describe(input_data)}")

        result = handler(input_data)

        return jsonify(result), 200

    except (ValueError, KeyError, TypeError) as e:
        # Validation errors from engine (missing fields, invalid values)
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400

    except Exception as e:
        # Unexpected errors
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({
            "error": "An unexpected error occurred during processing",
            "status": "failed"
        }), 500


def _agreement_name(data):
    agreement = data.get("agreement") or {}
    return f"agreement: {agreement.get('doc_id') or agreement.get('id') or 'draft'}"


@app.route("/calculate_agreement", methods=["POST"])
def calculate_agreement():
    """Calculate derived figures for an agreement draft"""
    return _run(processor.process_from_dict, _agreement_name)


@app.route("/validate_agreement", methods=["POST"])
def validate_agreement():
    """Calculate derived figures, rejecting data that cannot be saved"""
    return _run(processor.validate_for_save, _agreement_name)


@app.route("/resolve_termination", methods=["POST"])
def resolve_termination():
    """Resolve the expected end date of a termination notice"""
    return _run(
        termination_processor.resolve_from_dict,
        lambda data: f"termination notice for company: {data.get('company_id', 'Unknown')}"
    )


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
