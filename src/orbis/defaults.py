"""
Default Reference Frames and Orbits
===================================

Equatorial reference frames for Solar System bodies, and some predefined
orbits about Earth.

Examples
--------
>>> from orbis import EARTH, OrbitalElements
>>> orbit = OrbitalElements(7000, 0.01, 0.9, 0, 0, 0, EARTH)
>>> from orbis.defaults import MOLNIYA_ORBIT
>>> MOLNIYA_ORBIT.orbital_period() / 3600
"""
import numpy as np
from .frame import ReferenceFrame
from .orbital_elements import OrbitalElements

"""
Predefined Solar System body frames
Values taken from Vallado, Fundamentals of Astrdynamics, Fifth Edition, 2022, Appendix D
Units referenced to km (i.e. mu = km^3/s^2)
Each frame uses the identity basis: i towards the reference meridian on the
equator, k towards the north pole
"""
MERCURY = ReferenceFrame.standard(mu=2.2032e4, name='Mercury')
VENUS = ReferenceFrame.standard(mu=3.257e5, name='Venus')
EARTH = ReferenceFrame.standard(mu=3.986004415e5, name='Earth')
MOON = ReferenceFrame.standard(mu=4.902799e3, name='Moon')
MARS = ReferenceFrame.standard(mu=4.305e4, name='Mars')
JUPITER = ReferenceFrame.standard(mu=1.268e8, name='Jupiter')
SATURN = ReferenceFrame.standard(mu=3.794e7, name='Saturn')
URANUS = ReferenceFrame.standard(mu=5.794e6, name='Uranus')
NEPTUNE = ReferenceFrame.standard(mu=6.809e6, name='Neptune')
SUN = ReferenceFrame.standard(mu=1.32712428e11, name='Sun')

# Equatorial radii [km], same source
EARTH_RADIUS = 6378.1363

"""
Predefined orbits for convenience
"""
ISS_ORBIT = OrbitalElements(
    a=6778.0, e=0.0001, inc=np.radians(51.6),
    lan=0, ap=0, m0=0, frame=EARTH
)

GEO_ORBIT = OrbitalElements(
    a=42164.0, e=0.0, inc=0.0,
    lan=0, ap=0, m0=0, frame=EARTH
)

LEO_ORBIT = OrbitalElements(
    a=EARTH_RADIUS+550, e=0.0, inc=0.0,
    lan=0, ap=0, m0=0, frame=EARTH
)

SSO_ORBIT = OrbitalElements(
    a=EARTH_RADIUS+500, e=0.001, inc=np.radians(97.4016),
    lan=np.radians(140), ap=0, m0=0, frame=EARTH
)

MOLNIYA_ORBIT = OrbitalElements(
    a=26554, e=0.737, inc=np.radians(63.4),
    lan=np.radians(100), ap=np.radians(270), m0=0, frame=EARTH
)
