from .backend import InferenceBackend, Model, load_model
from .cpu_backend import CpuYoloConfig, UltralyticsCpuBackend, yolo_factory

__all__ = [
    "InferenceBackend",
    "Model",
    "load_model",
    "CpuYoloConfig",
    "UltralyticsCpuBackend",
    "yolo_factory",
]
