from prometheus_client import Counter, Histogram


class BookingMetrics:
    """Session booking metrics, exposed at /metrics"""

    def __init__(self):
        self.booking_requests = Counter(
            'session_booking_requests_total',
            'Total booking requests by outcome',
            ['category', 'result'],  # result: booked or a BookingErrorKind value
        )

        self.booking_attempts = Histogram(
            'session_booking_attempts',
            'Load-book-save attempts per booking request',
            ['category'],
            buckets=[1, 2, 3, 5, 10],
        )

        self.booking_duration = Histogram(
            'session_booking_duration_seconds',
            'Booking request processing time',
            ['category'],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0],
        )

        self.concurrent_modifications = Counter(
            'session_booking_concurrent_modifications_total',
            'Saves rejected because the session version moved',
            ['category'],
        )

    def record_booking(self, *, category: str, result: str, attempts: int, duration: float):
        self.booking_requests.labels(category=category, result=result).inc()
        self.booking_attempts.labels(category=category).observe(attempts)
        self.booking_duration.labels(category=category).observe(duration)

    def record_concurrent_modification(self, *, category: str):
        self.concurrent_modifications.labels(category=category).inc()


# Global metrics instance
metrics = BookingMetrics()
