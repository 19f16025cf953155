# app.py
# Local stand-in for the deployed stack: serves www/ the way static website
# hosting does, a generated config.json, and the same /api routes as function_app.py
from flask import Flask, Response, request, jsonify, send_from_directory
from werkzeug.exceptions import NotFound
import logging
import os

from timeapi import cors_headers, now_millis

SITE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "www")
INDEX_DOCUMENT = "index.html"
ERROR_DOCUMENT = "error.html"

app = Flask(__name__, static_folder=None)


@app.route("/api/data", methods=["GET", "OPTIONS"])
def data():
    logging.info('Data function called.')
    headers = cors_headers()

    if request.method == "OPTIONS":
        # Preflight carries the CORS headers only
        response = Response(status=204, headers=headers)
        response.headers.pop("Content-Type", None)
        return response

    return jsonify({"now": now_millis()}), 200, headers


@app.route("/api/healthcheck", methods=["GET"])
def healthcheck():
    return "OK", 200


@app.route("/config.json", methods=["GET"])
def site_config():
    # Same shape the provisioning run writes next to the deployed site
    return jsonify({"api": f"{request.host_url.rstrip('/')}/api"})


@app.route("/", defaults={"path": INDEX_DOCUMENT})
@app.route("/<path:path>")
def site(path):
    try:
        return send_from_directory(SITE_DIR, path)
    except NotFound:
        logging.info(f"No site file for '{path}', serving {ERROR_DOCUMENT}")
        response = send_from_directory(SITE_DIR, ERROR_DOCUMENT)
        response.status_code = 404
        return response


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
