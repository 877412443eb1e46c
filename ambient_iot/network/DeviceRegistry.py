"""
Central registry owning every ambient device; devices refer to each other by index.
"""

from ambient_iot.core.AmbientDevice import AmbientDevice, DeviceRole


class DeviceRegistry:
    def __init__(self):
        self.devices = []

    def create(self, role, position, **kwargs):
        """
        Creates a device whose ID is its index in the registry.

        Args:
            role (DeviceRole): Role of the new device.
            position (array-like): 3D coordinates of the device.
            **kwargs: Forwarded to AmbientDevice.

        Returns:
            AmbientDevice: The new device.
        """
        device = AmbientDevice(device_id=len(self.devices), role=role, position=position, **kwargs)
        self.devices.append(device)
        return device

    def get(self, device_id):
        return self.devices[device_id]

    def by_role(self, role):
        """Devices of one role, in creation order."""
        return [d for d in self.devices if d.role is role]

    def carrier_of(self, device):
        """The carrier source bound to a bistatic device, or None."""
        if device.carrier_id is None:
            return None
        return self.devices[device.carrier_id]

    def check_and_consume(self, device_id, now):
        """
        Runs the eligibility check of one device, resolving its carrier binding.

        Args:
            device_id (int): Index of the device.
            now (float): Current simulation time in seconds.

        Returns:
            bool: True if the device transmits.
        """
        device = self.devices[device_id]
        carrier = self.carrier_of(device) if device.role is DeviceRole.BISTATIC_BACKSCATTER else None
        return device.check_and_consume(now, carrier=carrier)

    def clear(self):
        """Releases all devices at teardown."""
        self.devices = []

    def __len__(self):
        return len(self.devices)

    def __iter__(self):
        return iter(self.devices)

    def __repr__(self):
        counts = {role.value: len(self.by_role(role)) for role in DeviceRole}
        return f"DeviceRegistry(Devices={len(self.devices)}, {counts})"
