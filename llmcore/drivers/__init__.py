from .base import AbstractDriver
from .errors import DriverError, TransportError
from .factory import create_driver
from .fake import FakeDriver, FakeDriverModels
from .openai_driver import OpenAICompatibleDriver, OpenAIDriver

__all__ = [
    "AbstractDriver",
    "DriverError",
    "TransportError",
    "create_driver",
    "FakeDriver",
    "FakeDriverModels",
    "OpenAICompatibleDriver",
    "OpenAIDriver",
]
