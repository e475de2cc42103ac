"""SpaceNavigator access via hidapi (direct HID, no SDL/DirectInput needed)

3Dconnexion devices send small input reports:
  report 1: translation x, y, z as little-endian int16
            (13-byte variant also carries rx, ry, rz in bytes 7-12)
  report 2: rotation rx, ry, rz as little-endian int16
  report 3: button bitmask (bit 0 = left, bit 1 = right)

Counts are divided by AXIS_FULL_SCALE so full travel lands roughly in [-1, 1].
"""
import logging
import struct

try:
    import hid
except Exception:
    hid = None

from core.errors import DeviceDisconnected, DeviceNotFound
from core.reader import DeviceBackend, RawDevice

LOG = logging.getLogger("spacenav.hid")

LOGITECH_VID = 0x046d
THREEDCONNEXION_VID = 0x256f

# Logitech-era 3Dconnexion product ids; every 0x256f product is accepted
LOGITECH_3DX_PIDS = {
    0xc603,  # SpaceMouse Plus
    0xc605,  # CADman
    0xc606,  # SpaceMouse Classic
    0xc621,  # SpaceBall 5000
    0xc623,  # SpaceTraveler
    0xc625,  # SpacePilot
    0xc626,  # SpaceNavigator
    0xc627,  # SpaceExplorer
    0xc628,  # SpaceNavigator for Notebooks
    0xc629,  # SpacePilot Pro
    0xc62b,  # SpaceMouse Pro
}

AXIS_FULL_SCALE = 350.0
COMPONENTS = ("x", "y", "z", "rx", "ry", "rz", "0", "1")
MAX_REPORTS_PER_POLL = 64


def is_3dconnexion(vendor_id, product_id):
    if vendor_id == THREEDCONNEXION_VID:
        return True
    return vendor_id == LOGITECH_VID and product_id in LOGITECH_3DX_PIDS


def _axes(data, offset):
    x, y, z = struct.unpack_from("<hhh", bytes(data), offset)
    return x / AXIS_FULL_SCALE, y / AXIS_FULL_SCALE, z / AXIS_FULL_SCALE


def decode_report(data, values):
    """Update `values` (component name -> float) in place from one raw report.

    Returns False for short or unknown reports, which are ignored.
    """
    if not data:
        return False
    report_id = data[0]
    if report_id == 1 and len(data) >= 7:
        values["x"], values["y"], values["z"] = _axes(data, 1)
        if len(data) >= 13:
            values["rx"], values["ry"], values["rz"] = _axes(data, 7)
        return True
    if report_id == 2 and len(data) >= 7:
        values["rx"], values["ry"], values["rz"] = _axes(data, 1)
        return True
    if report_id == 3 and len(data) >= 2:
        mask = data[1]
        values["0"] = float(mask & 0x01)
        values["1"] = float((mask >> 1) & 0x01)
        return True
    LOG.debug("Skipping unknown/short report: %s", " ".join(f"{b:02X}" for b in data))
    return False


class HidSpaceNavigator(RawDevice):
    """One enumerated HID device. Opened on first poll."""

    def __init__(self, info):
        self._info = info
        self._name = info.get("product_string") or ""
        self._device = None
        self._values = dict.fromkeys(COMPONENTS, 0.0)

    @property
    def name(self):
        return self._name

    def components(self):
        if not is_3dconnexion(self._info.get("vendor_id"), self._info.get("product_id")):
            return {}
        return {c: c for c in COMPONENTS}

    def _open(self):
        device = hid.device()
        device.open_path(self._info["path"])
        device.set_nonblocking(True)
        LOG.info(f"Opened {self._name} via hidapi (VID:{self._info['vendor_id']:04x} PID:{self._info['product_id']:04x})")
        return device

    def poll(self):
        try:
            if self._device is None:
                self._device = self._open()
            for _ in range(MAX_REPORTS_PER_POLL):
                data = self._device.read(64)
                if not data:
                    break
                decode_report(data, self._values)
        except (OSError, ValueError) as e:
            self.close()
            raise DeviceDisconnected(self._name, cause=e) from e

    def read(self, component):
        return self._values[component]

    def close(self):
        if self._device:
            try:
                self._device.close()
            except Exception:
                LOG.debug("error closing %s", self._name, exc_info=True)
            self._device = None


class HidBackend(DeviceBackend):
    def devices(self):
        if hid is None:
            raise DeviceNotFound(None, reason="hidapi not available")
        found = [HidSpaceNavigator(info) for info in hid.enumerate()]
        LOG.debug("hidapi enumerated %d device(s)", len(found))
        return found
