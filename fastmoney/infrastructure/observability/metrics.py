"""Prometheus metrics for bill submissions and store health"""

from prometheus_client import Counter, Histogram

# Submission metrics
submission_counter = Counter(
    "fastmoney_bill_submissions_total",
    "Bill form submissions",
    ["mode", "outcome"],  # create | update | installments, success | invalid | failed
)

installments_created_counter = Counter(
    "fastmoney_installments_created_total",
    "Bills created from installment plans",
)

installment_count_histogram = Histogram(
    "fastmoney_installment_plan_size",
    "Number of installments per submitted plan",
    buckets=[1, 2, 3, 6, 12, 24, 36, 48],
)

compensating_delete_counter = Counter(
    "fastmoney_compensating_deletes_total",
    "Installments deleted after a partially failed batch",
)

# Store metrics
store_failures_counter = Counter(
    "fastmoney_store_failures_total",
    "Failed calls to the backing store",
    ["operation"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_submission(mode: str, outcome: str, bill_count: int = 0, compensated: int = 0) -> None:
    """Record submission outcome and, for installment plans, plan size"""
    submission_counter.labels(mode=mode, outcome=outcome).inc()

    if mode == "installments" and outcome == "success":
        installments_created_counter.inc(bill_count)
        installment_count_histogram.observe(bill_count)

    if compensated:
        compensating_delete_counter.inc(compensated)
