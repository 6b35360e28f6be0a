"""Prometheus metrics for loan applications, referral codes and HTTP latency"""

from decimal import Decimal
from prometheus_client import Counter, Histogram
from lending_gateway.domain.rate_tiers import tier_label

# Loan metrics
loan_application_counter = Counter(
    "lending_loan_applications_total",
    "Loan applications received",
    ["outcome"],  # accepted | amount | term | purpose | auth | store
)

loan_rate_tier_counter = Counter(
    "lending_loan_rate_tier_total",
    "Accepted loan applications by interest rate tier",
    ["tier"],  # 7.5% | 6.5% | 5.5%
)

# Referral metrics
referral_code_counter = Counter(
    "lending_referral_code_requests_total",
    "Referral code requests",
    ["outcome"],  # issued | exhausted | unavailable | auth
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_loan_application(outcome: str, principal: Decimal | None = None) -> None:
    """Count an application; accepted ones are also bucketed by rate tier"""
    loan_application_counter.labels(outcome=outcome).inc()
    if principal is not None:
        loan_rate_tier_counter.labels(tier=tier_label(principal)).inc()


def record_referral_request(outcome: str) -> None:
    referral_code_counter.labels(outcome=outcome).inc()
