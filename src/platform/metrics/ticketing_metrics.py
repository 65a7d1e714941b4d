from prometheus_client import Counter, Gauge, Histogram


class TicketingMetrics:
    """
    Ticket purchase metrics

    `result` labels follow the purchase outcome: success, invalid_request,
    forbidden, not_found, insufficient, busy, store_failure.
    """

    def __init__(self):
        # ========== Purchase Business Metrics ==========
        self.purchase_requests = Counter(
            'ticket_purchase_requests_total',
            'Total ticket purchase requests by outcome',
            ['result'],
        )

        self.purchase_duration = Histogram(
            'ticket_purchase_duration_seconds',
            'Purchase processing time including the retry',
            ['result'],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0, 10.0],
        )

        self.tickets_sold = Counter(
            'tickets_sold_total',
            'Tickets issued by committed purchases',
        )

        self.purchase_retries = Counter(
            'ticket_purchase_retries_total',
            'Purchases retried after a transient store error',
            ['kind'],  # busy/connection_lost
        )

        self.concurrent_purchases = Gauge(
            'ticket_purchase_in_flight',
            'Purchases currently holding or waiting for an event row lock',
        )

        # ========== Event Edit Metrics ==========
        self.event_edits = Counter(
            'event_edits_total',
            'Organizer event edits by operation and outcome',
            ['operation', 'result'],  # operation: create/update/delete
        )

    # ========== Helper Methods ==========

    def record_purchase(self, *, result: str, duration: float, ticket_count: int = 0):
        self.purchase_requests.labels(result=result).inc()
        self.purchase_duration.labels(result=result).observe(duration)
        if ticket_count:
            self.tickets_sold.inc(ticket_count)

    def record_purchase_retry(self, *, kind: str):
        self.purchase_retries.labels(kind=kind).inc()

    def record_event_edit(self, *, operation: str, result: str):
        self.event_edits.labels(operation=operation, result=result).inc()


# Global metrics instance
metrics = TicketingMetrics()
