# config.py

from typing import Generic, TypeVar

import numpy as np

T = TypeVar('T')

class ConfigEntry(Generic[T]):
    def __init__(self, default_val: T, name=None, mutable=True):
        self._mutable = True  # Allow it to be mutable at the start
        if name == None:
            name = f"UnnamedConfigEntry_{id(self)}"
        self.name = name
        self.val = default_val
        self._mutable = mutable  # Then decide whether to remain mutable

    @property
    def val(self) -> T:
        return self._val

    @val.setter
    def val(self, new_val: T):
        if not self._mutable:
            raise AttributeError(f"{self.name} is immutable")
        self._val = new_val

    @property
    def mutable(self) -> bool:
        return self._mutable

class Config:
    def __init__(self):
        # === Storage settings ===
        # Fixed for the lifetime of the process. Buffers created before a
        # change would silently disagree with buffers created after.
        self.color_dtype = ConfigEntry(np.float32, name="color_dtype", mutable=False)

        # === Sampling settings ===
        # One of "nearest", "bilinear", "trilinear". Used when an ImageTexture
        # is constructed without an explicit sampler.
        self.default_sampler = ConfigEntry("bilinear", name="default_sampler")

        # === Diagnostics ===
        self.log_mipmap_generation = ConfigEntry(False, name="log_mipmap_generation")  # INFO instead of DEBUG
        self.profiling_enabled = ConfigEntry(True, name="profiling_enabled")

    def reset_defaults(self):
        """Resets all configs to their default values."""
        self.__init__()  # Simple way to restore defaults


# Global instance
global_config = Config()
