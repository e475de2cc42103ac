"""Raw device abstraction

A backend enumerates attached controllers. Each controller exposes named
components and a two-step "poll, then read cached values" interface.
"""
import abc


class RawDevice(abc.ABC):
    @property
    @abc.abstractmethod
    def name(self) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    def components(self) -> dict:
        """Map component name (e.g. 'x', 'rz', '0') to an opaque handle for `read`."""
        raise NotImplementedError

    @abc.abstractmethod
    def poll(self):
        raise NotImplementedError

    @abc.abstractmethod
    def read(self, component) -> float:
        raise NotImplementedError

    def close(self):
        pass

    def __str__(self):
        return self.name


class DeviceBackend(abc.ABC):
    @abc.abstractmethod
    def devices(self) -> list:
        raise NotImplementedError
