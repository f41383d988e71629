"""
Prometheus metrics definitions for the upload API.
All metrics are registered here and can be imported by other modules.
"""
from prometheus_client import Counter, Histogram

# HTTP request metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'path', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'path'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Error metrics
errors_total = Counter(
    'errors_total',
    'Total errors',
    ['error_type']
)

# Upload metrics
uploads_total = Counter(
    'uploads_total',
    'Total uploads sent to object storage',
    ['status']
)

upload_rejections_total = Counter(
    'upload_rejections_total',
    'Uploads rejected by validation before any network call',
    ['reason']
)

upload_bytes_total = Counter(
    'upload_bytes_total',
    'Total bytes written to object storage'
)

upload_duration_seconds = Histogram(
    'upload_duration_seconds',
    'Object storage upload duration in seconds',
    ['status'],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0]
)

# Deletion metrics
deletions_total = Counter(
    'deletions_total',
    'Total delete requests sent to object storage',
    ['mode', 'status']
)
