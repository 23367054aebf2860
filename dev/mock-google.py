#!/usr/bin/env python3
"""Mock Google OAuth2 endpoints for local development.

Point the service at it with:
  GOOGLE_AUTH_URL=http://localhost:18490/o/oauth2/v2/auth
  GOOGLE_TOKEN_URL=http://localhost:18490/token
  GOOGLE_TOKENINFO_URL=http://localhost:18490/tokeninfo
"""

import sys
from urllib.parse import urlencode

from flask import Flask, jsonify, redirect, request

app = Flask(__name__)

MOCK_EMAIL = "dev.user@example.com"
MOCK_NAME = "Dev User"


@app.route("/o/oauth2/v2/auth", methods=["GET"])
def authorize():
    """Skip consent and bounce straight back with a code."""
    redirect_uri = request.args.get("redirect_uri", "")
    if not redirect_uri:
        return jsonify({"error": "invalid_request"}), 400
    return redirect(f"{redirect_uri}?{urlencode({'code': 'mock-code'})}")


@app.route("/token", methods=["POST"])
def token():
    """Exchange any non-empty code for a fixed ID token."""
    if request.form.get("grant_type") != "authorization_code" or not request.form.get("code"):
        return jsonify({"error": "invalid_grant"}), 400
    return jsonify({"access_token": "mock-access", "id_token": "mock-id-token", "token_type": "Bearer"})


@app.route("/tokeninfo", methods=["GET"])
def tokeninfo():
    """Return claims for the fixed ID token."""
    if request.args.get("id_token") != "mock-id-token":
        return jsonify({"error": "invalid_token"}), 400
    return jsonify({"email": MOCK_EMAIL, "email_verified": "true", "name": MOCK_NAME})


@app.route("/healthz")
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


if __name__ == "__main__":
    print("Mock Google OAuth starting on http://0.0.0.0:18490", file=sys.stderr)
    app.run(host="0.0.0.0", port=18490, debug=False)
