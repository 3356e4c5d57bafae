from flask import Flask, request, jsonify, Response

import json
import logging

from memkv.datastore import DataStore, parse_json
from memkv.exceptions import (
    MemKVException,
    MissingParameterError,
    InvalidPayloadError,
    KeyNotFoundError,
    SerializationError,
)

logger = logging.getLogger(__name__)

def _text(body: str, status: int = 200) -> Response:
    return Response(body + "\n", status=status, mimetype="text/plain")

def _encode_value(value) -> str:
    """
    Values posted as JSON objects/arrays/numbers are stored as their compact JSON text
    """
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise SerializationError("Failed to marshal JSON value") from e

def _require_key() -> str:
    key = request.args.get("key", "")
    if not key:
        raise MissingParameterError("Key not provided")
    return key

def create_app(store: DataStore) -> Flask:
    """
    Build the Flask app around an existing store; handlers only ever reach it
    through this closure.
    """
    app = Flask(__name__)

    @app.errorhandler(MemKVException)
    def handle_error(e: MemKVException):
        logger.warning(f"{request.method} {request.path} -> {e.status_code}: {e}")
        return _text(str(e), e.status_code)

    @app.route("/set", methods=["GET"])
    def set_from_query():
        key = request.args.get("key", "")
        value = request.args.get("value", "")
        if not key or not value:
            raise MissingParameterError()
        store.set(key, value)
        logger.info(f"Set key '{key}' from query parameters")
        return _text(f"Key {key} set to value {value}")

    @app.route("/set", methods=["POST"])
    def set_from_json():
        payload = request.get_json(force=True, silent=True)
        if not isinstance(payload, dict):
            raise InvalidPayloadError()

        key = payload.get("key")
        value = payload.get("value")
        if not isinstance(key, str) or not key or value is None:
            raise MissingParameterError()
        value = _encode_value(value)
        if not value:
            raise MissingParameterError()

        store.set(key, value)
        logger.info(f"Set key '{key}' from JSON body")
        return _text("ok")

    @app.route("/get", methods=["GET"])
    def get():
        key = _require_key()
        record, found = store.get(key)
        if not found:
            raise KeyNotFoundError(key)

        # JSON values are returned as JSON, anything else as a plain string
        parsed, ok = parse_json(record.value)
        body = record.to_dict()
        if ok:
            body["value"] = parsed
        try:
            return jsonify(body)
        except RecursionError:
            # decodable but too deep to re-encode: fall back to the raw string
            body["value"] = record.value
            return jsonify(body)

    @app.route("/delete", methods=["DELETE"])
    def delete():
        key = _require_key()
        if not store.delete(key):
            raise KeyNotFoundError(key)
        logger.info(f"Deleted key '{key}'")
        return jsonify({"key": key})

    return app
