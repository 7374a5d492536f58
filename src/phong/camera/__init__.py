"""Camera models.

Components:
    pinhole: CameraConfig, the immutable Camera and its validating factory
    device: Device copy of the camera for Taichi kernels (import after ti.init)
"""

from .pinhole import DEFAULT_UP, Camera, CameraConfig, build_camera

__all__ = ["DEFAULT_UP", "Camera", "CameraConfig", "build_camera"]
