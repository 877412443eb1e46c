"""
Transmission scheduler for ambient IoT devices.

This module arranges timed eligibility checks for every device on a simpy
event loop. Non-carrier devices start staggered so they do not all fire at
once; carrier sources are checked on their own cadence. A bistatic device's
carrier is consulted inside its own check, never scheduled separately for it.
"""

from dataclasses import dataclass

import simpy

from ambient_iot.core.AmbientDevice import DeviceRole
from ambient_iot.config.simulation_config import SimConfig
from ambient_iot.utils.simulation_logger import NullObserver


@dataclass(frozen=True)
class TransmissionEvent:
    """A pending eligibility check."""
    device_id: int
    scheduled_time: float


@dataclass(frozen=True)
class TransmissionDecision:
    """Outcome of one eligibility check."""
    device_id: int
    role: DeviceRole
    time: float
    eligible: bool


def build_transmission_schedule(registry, start_offset=None, stagger_period=None, carrier_check_time=None):
    """
    First eligibility check of every device.

    Policy:
    1) Carrier sources are checked at ``carrier_check_time``.
    2) Device ``i`` (registry index) is checked at ``start_offset + (i % stagger_period)``.

    Unset arguments fall back to SimConfig when the schedule is built.

    Returns:
        list[TransmissionEvent]: One record per device, in registry order.
    """
    if start_offset is None:
        start_offset = SimConfig.START_OFFSET_S
    if stagger_period is None:
        stagger_period = SimConfig.STAGGER_PERIOD
    if carrier_check_time is None:
        carrier_check_time = SimConfig.CARRIER_CHECK_TIME_S
    if stagger_period < 1:
        raise ValueError(f"Stagger period must be at least 1, got {stagger_period}")
    events = []
    for device in registry:
        if device.role is DeviceRole.CARRIER_SOURCE:
            start_time = carrier_check_time
        else:
            # 错开启动时间
            start_time = start_offset + (device.device_id % stagger_period)
        events.append(TransmissionEvent(device.device_id, float(start_time)))
    return events


# 未显式给出时在运行时读取 SimConfig；None 表示只检查一次
FROM_CONFIG = object()


class TransmissionScheduler:
    def __init__(self, env, registry, observer=None,
                 report_interval=FROM_CONFIG, carrier_interval=FROM_CONFIG):
        """
        Args:
            env (simpy.Environment): Simulation clock and event loop.
            registry (DeviceRegistry): Devices to check.
            observer (SimulationObserver, optional): Receives every decision.
            report_interval (float | None): Re-check period for non-carrier devices; None checks once.
            carrier_interval (float | None): Re-check period for carrier sources; None checks once.
        """
        if report_interval is FROM_CONFIG:
            report_interval = SimConfig.REPORT_INTERVAL_S
        if carrier_interval is FROM_CONFIG:
            carrier_interval = SimConfig.CARRIER_INTERVAL_S
        for interval in (report_interval, carrier_interval):
            if interval is not None and interval <= 0:
                raise ValueError(f"Check intervals must be positive, got {interval}")
        self.env = env
        self.registry = registry
        self.observer = observer if observer is not None else NullObserver()
        self.report_interval = report_interval
        self.carrier_interval = carrier_interval
        self.decisions = []

    def arm(self, event):
        """Schedules one eligibility check."""
        if event.scheduled_time < self.env.now:
            raise ValueError(f"Cannot schedule device {event.device_id} in the past "
                             f"({event.scheduled_time} < {self.env.now})")
        return self.env.process(self._fire(event))

    def arm_all(self, events):
        # 按插入顺序调度，同一时刻的事件先入先出
        for event in events:
            self.arm(event)

    def _interval_for(self, device):
        if device.role is DeviceRole.CARRIER_SOURCE:
            return self.carrier_interval
        return self.report_interval

    def _fire(self, event):
        yield self.env.timeout(event.scheduled_time - self.env.now)
        decision = self.dispatch(event.device_id)

        interval = self._interval_for(self.registry.get(event.device_id))
        if interval is not None:
            self.arm(TransmissionEvent(event.device_id, decision.time + interval))

    def dispatch(self, device_id):
        """
        Runs one eligibility check now and reports it.

        Returns:
            TransmissionDecision: The recorded outcome.
        """
        now = self.env.now
        device = self.registry.get(device_id)
        eligible = self.registry.check_and_consume(device_id, now)
        decision = TransmissionDecision(device_id, device.role, now, eligible)
        self.decisions.append(decision)
        self.observer.on_eligibility(device, now, eligible)
        return decision

    def run(self, until):
        """Advances the clock to ``until`` seconds, firing every check due before it."""
        self.env.run(until=until)
        return self.decisions


def create_scheduler(registry, observer=None, env=None,
                     start_offset=None, stagger_period=None, carrier_check_time=None, **kwargs):
    """
    Builds a scheduler with the staggered schedule armed.

    The timing arguments go to build_transmission_schedule; the rest
    (report_interval, carrier_interval) go to TransmissionScheduler.
    A fresh simpy Environment is used unless ``env`` is given.
    """
    env = env if env is not None else simpy.Environment()
    scheduler = TransmissionScheduler(env, registry, observer=observer, **kwargs)
    scheduler.arm_all(build_transmission_schedule(registry,
                                                  start_offset=start_offset,
                                                  stagger_period=stagger_period,
                                                  carrier_check_time=carrier_check_time))
    return scheduler
