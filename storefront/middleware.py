import time

from flask import g, request


def init_request_logging(app):
    """Log method, path, status and latency of every request on app.logger."""

    @app.before_request
    def _start_timer():
        g.request_started_at = time.perf_counter()

    @app.after_request
    def _log_request(response):
        started = g.pop("request_started_at", None)
        elapsed_ms = (time.perf_counter() - started) * 1000 if started is not None else 0.0
        app.logger.info("%s %s %s %.1fms", request.method, request.path, response.status_code, elapsed_ms)
        return response
