"""Prometheus exporter helpers."""

from __future__ import annotations

from prometheus_client import Counter


generation_requests_total = Counter(
    "generation_requests_total",
    "Total number of generative-model requests by operation.",
    ["operation"],
)

provider_errors_total = Counter(
    "provider_errors_total",
    "Generative-model failures by HTTP status returned to the client.",
    ["status"],
)

vectorizer_requests_total = Counter(
    "vectorizer_requests_total",
    "Total number of vectorizer API calls by endpoint.",
    ["endpoint"],
)

preprocess_images_total = Counter(
    "preprocess_images_total",
    "Images passed through local background removal.",
    ["mode"],
)
