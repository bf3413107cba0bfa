# interfaces/consumer.py
# Abstract consumer of per-tick monitor snapshots (display, logging)


class StatusConsumer:
    """Receives every MonitorStatus produced by the runner."""

    def publish(self, status) -> None:
        """Handle one snapshot. Must not block the polling loop."""
        raise NotImplementedError

    def close(self) -> None:
        """Clean up resources."""
        pass
