"""
Main simulation loop for the Ambient IoT energy-eligibility model.
- 构建拓扑：读取器、载波源与三类环境物联网设备
- 为每个设备安排传输资格检查，在 simpy 事件循环中运行
- 输出日志到 logs/log_YYYYMMDD_HHMMSS.md，结果到 results/
"""
import os

import numpy as np
import simpy

from ambient_iot.network.AmbientNetwork import AmbientNetwork
from ambient_iot.scheduling.scheduler import FROM_CONFIG, create_scheduler
from ambient_iot.sim.results import save_results
from ambient_iot.utils.simulation_logger import SimulationLogger, NullObserver
from ambient_iot.config.simulation_config import SimConfig


def _progress(env, scheduler, until):
    while True:
        yield env.timeout(SimConfig.PROGRESS_INTERVAL_S)
        done = sum(1 for d in scheduler.decisions if d.eligible)
        print(f"... {env.now:.0f}/{until:.0f}s simulated, {done} transmissions so far.")


def run_simulation(network=None, until=None, report_interval=FROM_CONFIG,
                   carrier_interval=FROM_CONFIG, enable_logging=None):
    """
    Initializes and runs the simulation.

    Args:
        network (AmbientNetwork, optional): Prebuilt topology; the default scenario is built if None.
        until (float, optional): Simulated seconds, defaults to SimConfig.SIMULATION_TIME_S.
        report_interval (float | None, optional): Re-check period for devices, defaults to
            SimConfig.REPORT_INTERVAL_S; None checks each device once.
        carrier_interval (float | None, optional): Re-check period for carrier sources,
            defaults to SimConfig.CARRIER_INTERVAL_S.
        enable_logging (bool, optional): Write the Markdown log, defaults to SimConfig.ENABLE_LOGGING.

    Returns:
        tuple: (decisions, network)
    """
    until = SimConfig.SIMULATION_TIME_S if until is None else until
    enable_logging = SimConfig.ENABLE_LOGGING if enable_logging is None else enable_logging

    # 1. Initialize the logger and topology
    logger = SimulationLogger(SimConfig.LOG_DIR) if enable_logging else None
    observer = logger if logger is not None else NullObserver()
    if network is None:
        network = AmbientNetwork.from_config(rng=np.random.default_rng(SimConfig.RANDOM_SEED), observer=observer)
    else:
        for device in network.registry:
            observer.on_device_created(device)

    # 2. Arm the eligibility checks
    env = simpy.Environment()
    scheduler = create_scheduler(network.registry, observer=observer, env=env,
                                 report_interval=report_interval,
                                 carrier_interval=carrier_interval)
    env.process(_progress(env, scheduler, until))

    print("\nStarting simulation...")
    decisions = scheduler.run(until)
    print("Simulation finished.")

    summary = save_results(decisions, network.registry, SimConfig.RESULTS_DIR)
    if logger is not None:
        logger.log_summary(summary)
        logger.close()
    return decisions, network


def main():
    """Runs the default scenario, prints and plots the results, then releases the devices."""
    decisions, network = run_simulation()

    # Print final energy status
    print("\n--- Final Energy Status ---")
    for device in network.registry:
        if device.harvesting_enabled:
            print(f"Device {device.name}: {device.current_energy:.4f} J, "
                  f"{device.transmissions}/{device.attempts} transmissions")

    if SimConfig.ENABLE_PLOT_RESULTS:
        from ambient_iot.viz.plot_results import plot_transmission_history, plot_energy_history
        plot_transmission_history(decisions, os.path.join(SimConfig.RESULTS_DIR, "transmission_history.png"))
        plot_energy_history(network.registry, os.path.join(SimConfig.RESULTS_DIR, "energy_history.png"))

    if SimConfig.ENABLE_SCENE_VIZ:
        from ambient_iot.viz.scene_viz import plot_topology_map
        plot_topology_map(network, os.path.join(SimConfig.RESULTS_DIR, "topology_map.html"))

    # 仿真结束，释放全部设备
    network.registry.clear()
    return decisions, network


if __name__ == "__main__":
    main()
