import os
from datetime import datetime
from typing import Protocol


class SimulationObserver(Protocol):
    """Sink for the structured events the topology and scheduler emit."""

    def on_device_created(self, device) -> None:
        ...

    def on_eligibility(self, device, now: float, eligible: bool) -> None:
        ...


class NullObserver:
    """Observer that discards every event."""

    def on_device_created(self, device):
        pass

    def on_eligibility(self, device, now, eligible):
        pass


class SimulationLogger:
    def __init__(self, log_dir="logs"):
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)

        # Generate filename with timestamp
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"log_{timestamp}.md"
        self.log_file_path = os.path.join(log_dir, filename)

        # In-memory buffer to store log strings
        self.log_buffer = []
        self._table_open = None

        self._write_header()

    def _write_header(self):
        self.log_buffer.append("# Ambient IoT Simulation Log\n")
        self.log_buffer.append("This log details device creation (role, position, harvest rate) "
                               "and every transmission eligibility decision.\n")

    def _open_table(self, kind, header):
        if self._table_open != kind:
            self.log_buffer.append(header)
            self._table_open = kind

    def on_device_created(self, device):
        self._open_table(
            "devices",
            "\n## Topology\n\n"
            "| Device | Role | Position (m) | Reader | Carrier | Harvest Rate (J/s) |\n"
            "|:---:|:---:|:---:|:---:|:---:|:---:|"
        )
        x, y, z = device.position
        reader = f"`{device.reader_id}`" if device.reader_id is not None else "-"
        carrier = f"`{device.carrier_id}`" if device.carrier_id is not None else "-"
        rate = f"{device.harvest_rate:.6e}" if device.harvesting_enabled else "-"
        self.log_buffer.append(
            f"| `{device.name}` | {device.role.value} | ({x:.1f}, {y:.1f}, {z:.1f}) "
            f"| {reader} | {carrier} | {rate} |"
        )

    def on_eligibility(self, device, now, eligible):
        self._open_table(
            "decisions",
            "\n## Eligibility Decisions\n\n"
            "| Time (s) | Device | Role | Transmits | Stored Energy (J) |\n"
            "|:---:|:---:|:---:|:---:|:---:|"
        )
        self.log_buffer.append(
            f"| {now:.2f} | `{device.name}` | {device.role.value} "
            f"| {'yes' if eligible else 'no'} | {device.current_energy:.6f} |"
        )

    def log_summary(self, summary):
        """
        Appends the per-role summary table.

        :param summary: DataFrame from summarize_decisions, indexed by role.
        """
        self._table_open = None
        log_str = "\n## Summary\n\n"
        log_str += "| Role | Attempts | Transmissions | Success Ratio |\n"
        log_str += "|:---:|:---:|:---:|:---:|\n"
        for role, row in summary.iterrows():
            log_str += (f"| {role} | {int(row['attempts'])} | {int(row['transmissions'])} "
                        f"| {row['success_ratio']:.3f} |\n")
        self.log_buffer.append(log_str)

    def close(self):
        """Writes the entire log buffer to the file at once."""
        self.log_buffer.append("\n---\n\n**Simulation Finished.**")
        try:
            with open(self.log_file_path, "w", encoding="utf-8") as f:
                f.write("\n".join(self.log_buffer))
            print(f"Simulation log saved to {self.log_file_path}")
        except IOError as e:
            print(f"Error writing log file: {e}")
