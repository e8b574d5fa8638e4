"""Polygon measurement on web maps.

Computes the geodesic (ellipsoidal) area and edge lengths of polygons
drawn on a Web Mercator map, and imports polygons from GeoJSON files
whose coordinate reference system is detected automatically.
"""

__version__ = "0.1.0"
