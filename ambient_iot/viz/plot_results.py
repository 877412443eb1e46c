"""
Visualization script for plotting simulation results.
"""

import os
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from ambient_iot.core.AmbientDevice import DeviceRole
from ambient_iot.sim.results import decisions_to_frame

ROLE_STYLES = {
    DeviceRole.ACTIVE_TRANSMITTER.value: dict(color='#d62728', lw=2.5),
    DeviceRole.MONOSTATIC_BACKSCATTER.value: dict(color='#1f77b4', lw=2.0),
    DeviceRole.BISTATIC_BACKSCATTER.value: dict(color='#2ca02c', lw=2.0),
    DeviceRole.CARRIER_SOURCE.value: dict(color='gray', lw=1.0, linestyle='--'),
}


def plot_transmission_history(decisions, output_path="results/transmission_history.png"):
    """
    Plots the cumulative number of successful transmissions per role over time.

    Args:
        decisions (list[TransmissionDecision]): Scheduler decisions.
        output_path (str): Where to save the PNG.

    Returns:
        str: The saved path.
    """
    df = decisions_to_frame(decisions)
    fig, ax = plt.subplots(figsize=(12, 7))

    for role, group in df.groupby('role'):
        group = group.sort_values('time')
        cumulative = group['eligible'].astype(int).cumsum()
        ax.step(group['time'] / 60, cumulative, where='post', label=role, **ROLE_STYLES.get(role, {}))

    ax.set_xlabel("Time (minutes)", fontsize=14)
    ax.set_ylabel("Cumulative transmissions", fontsize=14)
    ax.set_title("Successful Transmissions per Device Role", fontsize=16)
    ax.legend(loc='upper left')
    ax.grid(True)
    plt.tight_layout()

    _save(fig, output_path)
    return output_path


def plot_energy_history(registry, output_path="results/energy_history.png"):
    """
    Plots the stored energy of each harvesting device after every check.

    Args:
        registry (DeviceRegistry): Devices with their energy_history.
        output_path (str): Where to save the PNG.

    Returns:
        str: The saved path.
    """
    fig, ax = plt.subplots(figsize=(14, 8))

    for device in registry:
        if not device.energy_history:
            continue
        times = [t / 60 for t, _ in device.energy_history]
        energy = [e for _, e in device.energy_history]
        style = ROLE_STYLES.get(device.role.value, {})
        ax.plot(times, energy, marker='.', lw=0.8, alpha=0.6, color=style.get('color'))

    # 每种角色只加一个图例项
    for role in (DeviceRole.ACTIVE_TRANSMITTER, DeviceRole.MONOSTATIC_BACKSCATTER, DeviceRole.BISTATIC_BACKSCATTER):
        ax.plot([], [], color=ROLE_STYLES[role.value]['color'], label=role.value)

    ax.set_xlabel("Time (minutes)", fontsize=14)
    ax.set_ylabel("Stored energy (Joules)", fontsize=14)
    ax.set_title("Device Energy After Each Check", fontsize=16)
    ax.legend(loc='upper left')
    ax.grid(True)
    plt.tight_layout()

    _save(fig, output_path)
    return output_path


def _save(fig, output_path):
    out_dir = os.path.dirname(output_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    fig.savefig(output_path, dpi=200)
    print(f"\n结果图已保存: {output_path}")
    plt.close(fig)
