"""Taichi-based offline ray caster with direct lighting and hard shadows.

Given a static scene (camera, point lights, spheres and quads with
diffuse materials) the renderer casts one ray per pixel, resolves the
nearest surface, and sums the Lambertian contribution of every light
that a shadow ray can reach.

Subpackages:
    core: Ray type, shading integrator, renderer
    geometry: Shape primitives and intersection routines
    materials: Lambertian material storage and evaluation
    scene: Scene description, storage and visibility queries
    camera: Pinhole camera and primary ray generation
    output: Pixel buffer conversion and PNG export
"""

__version__ = "0.1.0"
