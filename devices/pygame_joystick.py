"""SpaceNavigator access via pygame.joystick (SDL / DirectInput)

SDL reports a SpaceNavigator as a joystick with six axes (x, y, z, rx, ry, rz
in that order) and two buttons. Components are exposed as:
  'x', 'y', 'z', 'rx', 'ry', 'rz'  -> axes 0..5
  '0', '1', ...                    -> buttons
"""
import logging

try:
    import pygame
except Exception:
    pygame = None

from core.errors import DeviceDisconnected, DeviceNotFound
from core.reader import DeviceBackend, RawDevice
from core.state import AXES

LOG = logging.getLogger("spacenav.pygame")


class PygameJoystickDevice(RawDevice):
    def __init__(self, joystick):
        self._js = joystick
        self._name = joystick.get_name() or ""
        self._instance_id = joystick.get_instance_id()

    @property
    def name(self):
        return self._name

    def components(self):
        comps = {AXES[i]: ("axis", i) for i in range(min(len(AXES), self._js.get_numaxes()))}
        for i in range(self._js.get_numbuttons()):
            comps[str(i)] = ("button", i)
        return comps

    def poll(self):
        # an unplugged joystick keeps reading 0 on its stale handle; the only
        # signal is a JOYDEVICEREMOVED event carrying its instance id
        try:
            pygame.event.pump()
            removed = pygame.event.get(pygame.JOYDEVICEREMOVED)
        except pygame.error as e:
            raise DeviceDisconnected(self._name, cause=e) from e
        for event in removed:
            if getattr(event, "instance_id", None) == self._instance_id:
                raise DeviceDisconnected(self._name, cause="joystick removed")

    def read(self, component):
        kind, idx = component
        try:
            if kind == "axis":
                return self._js.get_axis(idx)
            return float(self._js.get_button(idx))
        except pygame.error as e:
            raise DeviceDisconnected(self._name, cause=e) from e

    def close(self):
        try:
            self._js.quit()
        except Exception:
            LOG.debug("joystick %s already closed", self._name)


class PygameBackend(DeviceBackend):
    def devices(self):
        if pygame is None:
            raise DeviceNotFound(None, reason="pygame not available")
        pygame.init()
        pygame.joystick.init()
        found = []
        for i in range(pygame.joystick.get_count()):
            js = pygame.joystick.Joystick(i)
            js.init()
            LOG.debug(f"joystick {i}: {js.get_name()} (axes={js.get_numaxes()}, buttons={js.get_numbuttons()})")
            found.append(PygameJoystickDevice(js))
        if not found:
            LOG.warning("No joysticks found via pygame")
        return found
