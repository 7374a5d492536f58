"""Phong ray caster with a Taichi data-parallel backend.

This package renders scenes of analytic shapes lit by ambient, directional,
point and spot lights using the local Phong illumination model. Every pixel
is resolved by casting one primary ray, finding the closest hit and shading
it; there is no global illumination.

Two interchangeable backends share the same semantics:
- a host reference path (plain Python objects, exact epsilon-tolerant
  geometry, one pixel at a time)
- a Taichi device path (one kernel thread per pixel, float64 arithmetic)

Subpackages:
    core: Primitives, rays, reference tracer, device integrator, renderer
    geometry: Shape variants, composite aggregate and intersection records
    lighting: Light sources and attenuation
    materials: Phong material coefficients
    camera: View-plane camera and ray construction
    scene: Scene container, configuration and device scene store
    preview: Pixel sink, PNG export and Matplotlib preview
"""

__version__ = "0.1.0"
