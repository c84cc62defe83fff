"""Health check endpoint."""

from http.server import BaseHTTPRequestHandler
import json

from idrhub.utils.config import AppConfig


def health_payload() -> dict:
    """Service status; ``supabase_configured`` is false until URL and anon key are set."""
    return {
        "status": "ok",
        "service": "idrhub-client",
        "supabase_configured": bool(AppConfig.SUPABASE_URL and AppConfig.SUPABASE_ANON_KEY),
    }


class handler(BaseHTTPRequestHandler):
    """Health check handler for Vercel serverless function."""

    def _write_json(self, status: int, payload: dict) -> None:
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        self.wfile.write(json.dumps(payload).encode('utf-8'))

    def do_GET(self):
        self._write_json(200, health_payload())

    def do_POST(self):
        self.do_GET()
