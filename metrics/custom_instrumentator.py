from prometheus_fastapi_instrumentator import Instrumentator

METRICS_PATH = "/metrics"

instrumentator = Instrumentator(
    should_ignore_untemplated=True,      # /sellers/<uuid> -> /sellers/{seller_public_id}
    excluded_handlers=[METRICS_PATH, "/api/v1/health"],
    should_instrument_requests_inprogress=True,
    should_group_status_codes=False,
)


def mount_metrics(app):
    instrumentator.instrument(app).expose(app, endpoint=METRICS_PATH, include_in_schema=False)
    return app
