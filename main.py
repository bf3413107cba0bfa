# main.py
# Monitor runner: warm-up, paced polling loop and publishing of tick snapshots

"""Run the DravyaVraksh gas monitor against simulated hardware."""

from __future__ import annotations

import argparse
import sys
from typing import Iterable, List, Optional, Sequence

import logging_lib
from config.settings import MonitorSettings, load_settings
from core import SimulatedAnalogReader, SimulatedClimateSensor, SystemClock
from interfaces import Clock, StatusConsumer
from logging_lib import get_logger, logger_context
from monitor import AirQualityMonitor, MonitorStatus, format_status_line, status_to_dict
from services.error_handler import ConfigError, ErrorHandler, MonitorError


class LogReporter(StatusConsumer):
    """Emits one structured record per tick."""

    def __init__(self):
        self._logger = get_logger("monitor.tick")

    def publish(self, status: MonitorStatus) -> None:
        self._logger.info("tick", status=status_to_dict(status))


class ConsoleReporter(StatusConsumer):
    """Prints the serial-style status line."""

    def __init__(self, stream=None):
        self._stream = stream

    def publish(self, status: MonitorStatus) -> None:
        print(format_status_line(status), file=self._stream or sys.stdout)


class MonitorRunner:
    """Drives AirQualityMonitor ticks at a fixed interval on the injected clock."""

    def __init__(
        self,
        monitor: AirQualityMonitor,
        clock: Clock,
        consumers: Iterable[StatusConsumer] = (),
        tick_interval_ms: int = 2000,
        warmup_ms: int = 30000,
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.monitor = monitor
        self.clock = clock
        self.consumers: List[StatusConsumer] = list(consumers)
        self.tick_interval_ms = tick_interval_ms
        self.warmup_ms = warmup_ms
        self.error_handler = error_handler or ErrorHandler()
        self.logger = get_logger("MonitorRunner")

        self.running = False
        self.cycle_count = 0
        self.failed_ticks = 0

    def warm_up(self) -> None:
        """MQ135 heater needs time before readings settle."""
        if self.warmup_ms <= 0:
            return
        self.logger.info("Warming up sensors", warmup_ms=self.warmup_ms)
        self.clock.sleep_ms(self.warmup_ms)

    def run(self, max_ticks: Optional[int] = None, warm_up: bool = False) -> int:
        """
        Main loop. Returns the number of ticks that produced a snapshot.

        A failing tick is logged and the loop carries on; Ctrl-C stops it.
        With ``warm_up`` the heater delay runs first, inside the same
        shutdown guard, so an interrupted warm-up still releases hardware.
        """
        self.running = True
        completed = 0
        self.logger.info("Starting monitor loop", tick_interval_ms=self.tick_interval_ms, max_ticks=max_ticks)

        try:
            if warm_up:
                self.warm_up()

            while self.running and (max_ticks is None or self.cycle_count < max_ticks):
                cycle_start = self.clock.now_ms()

                with logger_context(cycle=self.cycle_count + 1):
                    if self._tick():
                        completed += 1

                self.cycle_count += 1
                logging_lib.flush()

                if max_ticks is not None and self.cycle_count >= max_ticks:
                    break

                cycle_time = self.clock.elapsed_ms(cycle_start)
                remaining_ms = max(0, self.tick_interval_ms - cycle_time)
                if remaining_ms > 0:
                    self.clock.sleep_ms(remaining_ms)
                elif self.tick_interval_ms > 0:
                    self.logger.warning("Cycle time overrun", cycle_time_ms=cycle_time, target_ms=self.tick_interval_ms)

        except KeyboardInterrupt:
            self.logger.info("Shutdown requested by user")
        finally:
            self.shutdown()

        return completed

    def stop(self) -> None:
        self.running = False

    def shutdown(self) -> None:
        self.running = False
        self.logger.info(
            "Monitor stopped",
            ticks=self.cycle_count,
            failed_ticks=self.failed_ticks,
            errors=self.error_handler.get_error_stats()["total_errors"],
        )
        for consumer in self.consumers:
            consumer.close()
        self.monitor.close()
        logging_lib.flush()

    # ---------- helpers ----------

    def _tick(self) -> bool:
        try:
            status = self.monitor.step()
        except MonitorError as exc:
            self.failed_ticks += 1
            self.error_handler.handle_error(exc)
            return False

        for consumer in self.consumers:
            try:
                consumer.publish(status)
            except Exception as exc:
                # Consumer failures never stop sampling
                self.logger.warning("Status consumer failed", consumer=type(consumer).__name__, error=str(exc))
        return True


def build_runner(settings: MonitorSettings, seed: Optional[int] = None, quiet: bool = False) -> MonitorRunner:
    """Wire the monitor to simulated hardware and the default consumers."""

    clock = SystemClock()
    reader = SimulatedAnalogReader(max_adc=settings.calibration.max_adc, seed=seed)
    climate = SimulatedClimateSensor(seed=seed)
    monitor = AirQualityMonitor(reader, clock, settings, climate_sensor=climate)

    consumers: List[StatusConsumer] = [LogReporter()]
    if not quiet:
        consumers.append(ConsoleReporter())

    return MonitorRunner(
        monitor,
        clock,
        consumers,
        tick_interval_ms=settings.tick_interval_ms,
        warmup_ms=settings.warmup_ms,
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", type=str, default=None, help="JSON settings file (env MONITOR_* overrides it)")
    parser.add_argument("--ticks", type=int, default=None, help="Stop after N ticks (default: run until Ctrl-C)")
    parser.add_argument("--interval-ms", type=int, default=None, help="Override the inter-tick delay")
    parser.add_argument("--warmup-ms", type=int, default=None, help="Override the sensor warm-up period")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the simulated sensors")
    parser.add_argument("--log-level", type=str, default=None, help="Minimum structured log level")
    parser.add_argument("--quiet", action="store_true", help="Do not print the console status line")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    overrides = {"level": args.log_level.upper()} if args.log_level else {}
    logging_lib.configure(**overrides)
    logger = get_logger("main")

    try:
        settings = load_settings(args.config)
        if args.interval_ms is not None:
            settings = settings.with_overrides(tick_interval_ms=args.interval_ms)
        if args.warmup_ms is not None:
            settings = settings.with_overrides(warmup_ms=args.warmup_ms)
        settings.validate()
    except ConfigError as exc:
        logger.error("Invalid configuration", error_code=exc.error_code, errors=exc.errors or [exc.message])
        logging_lib.flush()
        return 2

    runner = build_runner(settings, seed=args.seed, quiet=args.quiet)
    runner.run(max_ticks=args.ticks, warm_up=True)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
