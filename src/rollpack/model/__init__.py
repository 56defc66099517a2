"""
The MODEL layer contains pure data structures and the pack generation logic.
It has NO knowledge of the plotter (lights, camera, materials) or the command line.
It deals with Configuration, Layout and Roll Geometry.
"""
