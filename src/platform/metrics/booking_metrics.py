from prometheus_client import Counter, Histogram


class BookingMetrics:
    """
    Mailer Booking Core Metrics Collector

    Tracks booking lifecycle volume and the health of the expiration reaper
    """

    def __init__(self):
        # ========== Booking Lifecycle Metrics ==========
        self.bookings_created = Counter(
            'mailer_bookings_created_total',
            'Total bookings created',
            ['price_source'],
        )

        self.bookings_paid = Counter(
            'mailer_bookings_paid_total',
            'Total bookings that completed payment',
        )

        self.slot_conflicts = Counter(
            'mailer_slot_conflicts_total',
            'Payments or bookings refused because the slot was already purchased',
            ['stage'],  # stage: create/pay
        )

        self.bookings_cancelled = Counter(
            'mailer_bookings_cancelled_total',
            'Total bookings cancelled',
            ['reason'],  # reason: customer/admin/expired
        )

        # ========== Reaper Metrics ==========
        self.bookings_expired = Counter(
            'mailer_reaper_bookings_expired_total',
            'Pending bookings cancelled by the expiration reaper',
        )

        self.reaper_failures = Counter(
            'mailer_reaper_failures_total',
            'Reaper errors, per booking or per tick',
            ['stage'],  # stage: tick/booking/file_cleanup
        )

        self.reaper_tick_duration = Histogram(
            'mailer_reaper_tick_duration_seconds',
            'Duration of one reaper tick',
            buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
        )

    # ========== Helper Methods ==========

    def record_booking_created(self, *, price_source: str):
        self.bookings_created.labels(price_source=price_source).inc()

    def record_booking_paid(self):
        self.bookings_paid.inc()

    def record_slot_conflict(self, *, stage: str):
        self.slot_conflicts.labels(stage=stage).inc()

    def record_booking_cancelled(self, *, reason: str):
        self.bookings_cancelled.labels(reason=reason).inc()

    def record_reaper_tick(self, *, expired: int, duration: float):
        self.bookings_expired.inc(expired)
        self.reaper_tick_duration.observe(duration)

    def record_reaper_failure(self, *, stage: str):
        self.reaper_failures.labels(stage=stage).inc()


# Global metrics instance
metrics = BookingMetrics()
