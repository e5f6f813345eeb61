"""Taichi-based Whitted-style sphere tracer.

This package renders scenes of spheres lit by point lights, with one primary
ray per pixel, Lambertian shading with hard shadows and mirror reflection up
to a fixed depth. Frames are written into a flat RGBA8 buffer.

Subpackages:
    core: Vector algebra, the reflection tracer and the frame renderer
    geometry: Sphere primitive and ray-sphere intersection
    materials: Surface material storage and local shading
    scene: Sphere and light storage, scene manager and the planets scene
    camera: Pinhole camera with primary ray generation
    preview: Image export, Matplotlib preview and GGUI animation window
"""

__version__ = "0.1.0"
