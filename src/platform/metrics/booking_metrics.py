from prometheus_client import Counter, Gauge, Histogram


class BookingMetrics:
    """
    Cinema booking engine metrics

    Counts hold outcomes, payment attempts, promo redemptions and issued
    tickets; exposed by the `/metrics` endpoint.
    """

    def __init__(self) -> None:
        # ========== Seat Inventory ==========
        self.seat_hold_requests = Counter(
            'seat_hold_requests_total',
            'Total seat hold requests',
            ['screening_id', 'result'],  # result: success/conflict/expired
        )

        self.seat_hold_duration = Histogram(
            'seat_hold_duration_seconds',
            'Seat hold processing time',
            ['screening_id'],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
        )

        self.holds_expired = Counter(
            'seat_holds_expired_total',
            'Holds released because their deadline passed',
            ['screening_id'],
        )

        self.active_holds = Gauge(
            'seat_holds_active',
            'Holds currently outstanding',
            ['screening_id'],
        )

        # ========== Payment ==========
        self.payment_attempts = Counter(
            'payment_attempts_total',
            'Payment attempts by outcome',
            ['method', 'result'],  # result: success/failure/refunded
        )

        # ========== Promo Codes ==========
        self.promo_redemptions = Counter(
            'promo_code_redemptions_total',
            'Promo code redemption outcomes',
            ['result'],  # result: redeemed/exhausted/rolled_back
        )

        # ========== Tickets ==========
        self.tickets_issued = Counter(
            'tickets_issued_total',
            'Tickets minted',
            ['screening_id'],
        )

        self.ticket_code_collisions = Counter(
            'ticket_code_collisions_total',
            'Ticket code candidates rejected as duplicates',
        )

    # ========== Helper Methods ==========

    def record_seat_hold(self, *, screening_id: str, result: str, duration: float) -> None:
        self.seat_hold_requests.labels(screening_id=screening_id, result=result).inc()
        self.seat_hold_duration.labels(screening_id=screening_id).observe(duration)
        if result == 'success':
            self.active_holds.labels(screening_id=screening_id).inc()

    def record_hold_closed(self, *, screening_id: str, expired: bool = False) -> None:
        self.active_holds.labels(screening_id=screening_id).dec()
        if expired:
            self.holds_expired.labels(screening_id=screening_id).inc()

    def record_payment(self, *, method: str, result: str) -> None:
        self.payment_attempts.labels(method=method, result=result).inc()

    def record_promo_redemption(self, *, result: str) -> None:
        self.promo_redemptions.labels(result=result).inc()

    def record_tickets_issued(self, *, screening_id: str, count: int) -> None:
        self.tickets_issued.labels(screening_id=screening_id).inc(count)


# Global metrics instance
metrics = BookingMetrics()
