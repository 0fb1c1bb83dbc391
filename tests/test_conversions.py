"""
Tests for conversions between Keplerian elements and Cartesian states.

Covers known analytic states, degenerate orbits (circular, equatorial,
retrograde equatorial), randomized round trips in rotated frames, and
rejection of unbound or rectilinear states.
"""

import pytest
import numpy as np
from orbis import (OrbitalElements, StateVector, ReferenceFrame,
                   UnsupportedOrbitError)
from orbis.conversions import (perifocal_rotation, keplerian_to_cartesian,
                               cartesian_to_keplerian, is_circular,
                               is_equatorial, is_prograde_equatorial)
from orbis.utils import angle_difference


MU_EARTH = 3.986004415e5  # km³/s²

ANGLE_ATOL = 1e-7


def random_rotation(rng):
    """Random proper rotation matrix (det = +1)."""
    Q, _ = np.linalg.qr(rng.normal(size=(3, 3)))
    if np.linalg.det(Q) < 0:
        Q[:, 0] = -Q[:, 0]
    return Q


def random_elements(rng, frame):
    """Non-degenerate elliptic orbit with LEO-to-HEO size."""
    return OrbitalElements(
        a=rng.uniform(6600, 50000),
        e=rng.uniform(0.01, 0.95),
        inc=rng.uniform(0.05, np.pi - 0.05),
        lan=rng.uniform(0, 2*np.pi),
        ap=rng.uniform(0, 2*np.pi),
        m0=rng.uniform(-np.pi, np.pi),
        frame=frame
    )


def assert_angle_close(actual, expected, atol=ANGLE_ATOL):
    assert abs(angle_difference(actual, expected)) < atol, \
        f"{actual} != {expected} (mod 2pi)"


def assert_elements_close(actual, expected):
    assert actual.a == pytest.approx(expected.a, rel=1e-9)
    assert actual.e == pytest.approx(expected.e, abs=1e-9)
    assert_angle_close(actual.inc, expected.inc)
    assert_angle_close(actual.lan, expected.lan)
    assert_angle_close(actual.ap, expected.ap)
    assert_angle_close(actual.m0, expected.m0)


@pytest.fixture
def earth():
    return ReferenceFrame.standard(MU_EARTH, name='Earth')


@pytest.fixture
def tilted_frame():
    """Frame whose basis is a fixed random rotation of x, y, z."""
    Q = random_rotation(np.random.default_rng(2024))
    return ReferenceFrame(MU_EARTH, Q[:, 0], Q[:, 1], Q[:, 2], name='tilted')


class TestDegeneracyTests:
    """Threshold helpers used by both conversion directions."""

    def test_is_circular(self):
        assert is_circular(0.0)
        assert is_circular(1e-12)
        assert not is_circular(1e-6)

    def test_is_equatorial(self):
        assert is_equatorial(0.0)
        assert is_equatorial(np.pi)
        assert is_equatorial(np.pi - 1e-12)
        assert not is_equatorial(0.1)

    def test_is_prograde_equatorial(self):
        assert is_prograde_equatorial(1e-12)
        assert not is_prograde_equatorial(np.pi)


class TestPerifocalRotation:
    """Rotation built from lan, inc and ap."""

    def test_proper_rotation(self, tilted_frame):
        rot = perifocal_rotation(0.3, 1.1, 2.0, 0.4, tilted_frame)
        assert np.allclose(rot @ rot.T, np.eye(3), atol=1e-14)
        assert np.linalg.det(rot) == pytest.approx(1.0)

    def test_read_only(self, earth):
        rot = perifocal_rotation(0.3, 1.1, 2.0, 0.4, earth)
        with pytest.raises(ValueError):
            rot[0, 0] = 2.0

    def test_identity_for_circular_equatorial(self, earth):
        """All angle rotations are skipped, whatever values are given."""
        rot = perifocal_rotation(0.0, 0.0, 1.3, 0.9, earth)
        assert np.allclose(rot, np.eye(3))

    def test_lan_skipped_for_equatorial(self, earth):
        a = perifocal_rotation(0.2, 0.0, 0.0, 0.5, earth)
        b = perifocal_rotation(0.2, 0.0, 2.5, 0.5, earth)
        assert np.allclose(a, b)

    def test_ap_skipped_for_circular(self, earth):
        a = perifocal_rotation(0.0, 0.7, 1.0, 0.0, earth)
        b = perifocal_rotation(0.0, 0.7, 1.0, 2.0, earth)
        assert np.allclose(a, b)

    def test_retrograde_equatorial_keeps_flip(self, earth):
        """inc = pi still reverses the orbit normal."""
        rot = perifocal_rotation(0.2, np.pi, 0.0, 0.0, earth)
        assert np.allclose(rot @ earth.k, -earth.k)


class TestKnownStates:
    """States that can be written down by hand."""

    def test_periapsis_of_equatorial_ellipse(self, earth):
        a, e = 10000.0, 0.5
        rot = perifocal_rotation(e, 0.0, 0.0, 0.0, earth)
        r, v = keplerian_to_cartesian(a, e, 0.0, rot, earth)

        v_peri = np.sqrt(MU_EARTH*(1 + e)/(a*(1 - e)))
        assert np.allclose(r, [5000.0, 0.0, 0.0])
        assert np.allclose(v, [0.0, v_peri, 0.0])

    def test_apoapsis_of_equatorial_ellipse(self, earth):
        a, e = 10000.0, 0.5
        rot = perifocal_rotation(e, 0.0, 0.0, 0.0, earth)
        r, v = keplerian_to_cartesian(a, e, np.pi, rot, earth)

        v_apo = np.sqrt(MU_EARTH*(1 - e)/(a*(1 + e)))
        assert np.allclose(r, [-15000.0, 0.0, 0.0])
        assert np.allclose(v, [0.0, -v_apo, 0.0])

    def test_polar_circular_over_pole(self, earth):
        """Quarter revolution past the node of a polar orbit is over the pole."""
        a = 7000.0
        vc = np.sqrt(MU_EARTH/a)
        oe = OrbitalElements(a, 0.0, np.pi/2, 0.0, 0.0, np.pi/2, earth)
        sv = oe.to_state_vector()
        assert np.allclose(sv.r, [0.0, 0.0, a], atol=1e-9)
        assert np.allclose(sv.v, [-vc, 0.0, 0.0], atol=1e-12)

    def test_frame_axes_used(self, tilted_frame):
        """Equatorial periapsis lies along the frame's own i axis."""
        oe = OrbitalElements(8000.0, 0.2, 0.0, 0.0, 0.0, 0.0, tilted_frame)
        sv = oe.to_state_vector()
        assert np.allclose(sv.r, 8000.0*0.8*tilted_frame.i)
        assert np.dot(sv.v, tilted_frame.j) > 0
        assert abs(np.dot(sv.v, tilted_frame.i)) < 1e-12

    def test_vis_viva(self, earth):
        oe = OrbitalElements(12000.0, 0.4, 0.9, 1.0, 2.0, 0.7, earth)
        sv = oe.to_state_vector()
        r = np.linalg.norm(sv.r)
        v2 = np.dot(sv.v, sv.v)
        assert v2 == pytest.approx(MU_EARTH*(2/r - 1/oe.a), rel=1e-12)

    def test_angular_momentum_direction(self, earth):
        """Orbit normal follows lan and inc."""
        inc, lan = 0.8, 1.9
        oe = OrbitalElements(9000.0, 0.1, inc, lan, 0.3, 0.2, earth)
        sv = oe.to_state_vector()
        h = np.cross(sv.r, sv.v)
        expected = [np.sin(inc)*np.sin(lan), -np.sin(inc)*np.cos(lan), np.cos(inc)]
        assert np.allclose(h/np.linalg.norm(h), expected)


class TestCircularEquatorial:
    """Circular equatorial: lan = ap = 0, m0 is the true longitude."""

    def test_zero_longitude(self, earth):
        a = 7000.0
        vc = np.sqrt(MU_EARTH/a)
        sv = StateVector([a, 0, 0], [0, vc, 0], earth)
        oe = sv.to_orbital_elements()

        assert oe.a == pytest.approx(a, rel=1e-12)
        assert oe.e == 0.0
        assert oe.inc == 0.0
        assert oe.lan == 0.0
        assert oe.ap == 0.0
        assert_angle_close(oe.m0, 0.0, atol=1e-12)

    @pytest.mark.parametrize("longitude", [0.5, 2.0, 3.5, 5.5])
    def test_true_longitude(self, earth, longitude):
        oe = OrbitalElements(7000.0, 0.0, 0.0, 0.0, 0.0, longitude, earth)
        back = oe.to_state_vector().to_orbital_elements()
        assert back.e == 0.0
        assert back.inc == 0.0
        assert_angle_close(back.m0, longitude)

    def test_position_from_longitude(self, earth):
        a = 7000.0
        oe = OrbitalElements(a, 0.0, 0.0, 0.0, 0.0, 1.0, earth)
        sv = oe.to_state_vector()
        assert np.allclose(sv.r, a*np.array([np.cos(1.0), np.sin(1.0), 0.0]))


class TestCircularInclined:
    """Circular inclined: ap = 0, m0 is the argument of latitude."""

    def test_polar_roundtrip(self, earth):
        oe = OrbitalElements(7000.0, 0.0, np.pi/2, 0.5, 0.0, 1.0, earth)
        back = oe.to_state_vector().to_orbital_elements()

        assert back.e == 0.0
        assert back.ap == 0.0
        assert_angle_close(back.inc, np.pi/2)
        assert_angle_close(back.lan, 0.5)
        assert_angle_close(back.m0, 1.0)

    @pytest.mark.parametrize("u", [0.0, 1.0, 3.0, 4.5])
    def test_argument_of_latitude(self, tilted_frame, u):
        oe = OrbitalElements(20000.0, 0.0, 1.2, 4.0, 0.0, u, tilted_frame)
        back = oe.to_state_vector().to_orbital_elements()
        assert_angle_close(back.m0, u)
        assert_angle_close(back.lan, 4.0)

    def test_node_position(self, earth):
        """Zero argument of latitude sits on the ascending node."""
        lan = 0.9
        oe = OrbitalElements(7000.0, 0.0, 1.0, lan, 0.0, 0.0, earth)
        r = oe.to_state_vector().r
        assert np.allclose(r/np.linalg.norm(r), [np.cos(lan), np.sin(lan), 0.0])


class TestEccentricEquatorial:
    """Eccentric equatorial: lan = 0, ap is the longitude of periapsis."""

    def test_roundtrip(self, earth):
        oe = OrbitalElements(8000.0, 0.3, 0.0, 0.0, 0.7, 2.0, earth)
        back = oe.to_state_vector().to_orbital_elements()

        assert back.e == pytest.approx(0.3, abs=1e-12)
        assert back.inc == 0.0
        assert back.lan == 0.0
        assert_angle_close(back.ap, 0.7)
        assert_angle_close(back.m0, 2.0)

    def test_longitude_of_periapsis_quadrants(self, earth):
        for ap in [0.3, 2.0, 3.5, 5.9]:
            oe = OrbitalElements(8000.0, 0.3, 0.0, 0.0, ap, 0.5, earth)
            back = oe.to_state_vector().to_orbital_elements()
            assert_angle_close(back.ap, ap)

    def test_tiny_inclination_snaps(self, earth):
        """Inclination below the threshold is treated as equatorial."""
        oe = OrbitalElements(8000.0, 0.3, 1e-12, 0.0, 0.7, 2.0, earth)
        back = oe.to_state_vector().to_orbital_elements()
        assert back.inc == 0.0
        assert back.lan == 0.0
        assert_angle_close(back.ap, 0.7)


class TestRetrogradeEquatorial:
    """inc = pi keeps its orientation; the reference axis replaces the node."""

    def test_eccentric_roundtrip(self, earth):
        oe = OrbitalElements(8000.0, 0.2, np.pi, 0.0, 0.7, 1.0, earth)
        sv = oe.to_state_vector()
        assert np.cross(sv.r, sv.v)[2] < 0

        back = sv.to_orbital_elements()
        assert back.inc == np.pi
        assert back.lan == 0.0
        assert_angle_close(back.ap, 0.7)
        assert_angle_close(back.m0, 1.0)

    def test_circular_roundtrip(self, earth):
        oe = OrbitalElements(8000.0, 0.0, np.pi, 0.0, 0.0, 1.0, earth)
        back = oe.to_state_vector().to_orbital_elements()
        assert back.e == 0.0
        assert back.inc == np.pi
        assert_angle_close(back.m0, 1.0)


class TestRandomRoundTrips:
    """Randomized orbits in randomly rotated frames."""

    def test_elements_to_state_to_elements(self):
        rng = np.random.default_rng(42)
        for _ in range(50):
            Q = random_rotation(rng)
            frame = ReferenceFrame(MU_EARTH, Q[:, 0], Q[:, 1], Q[:, 2])
            oe = random_elements(rng, frame)
            back = oe.to_state_vector().to_orbital_elements()
            assert_elements_close(back, oe)

    def test_state_to_elements_to_state(self):
        rng = np.random.default_rng(1234)
        for _ in range(50):
            Q = random_rotation(rng)
            frame = ReferenceFrame(MU_EARTH, Q[:, 0], Q[:, 1], Q[:, 2])
            sv = random_elements(rng, frame).to_state_vector()
            back = sv.to_orbital_elements().to_state_vector()

            assert np.allclose(back.r, sv.r, rtol=1e-9, atol=1e-6)
            assert np.allclose(back.v, sv.v, rtol=1e-9, atol=1e-9)
            assert back.frame is frame

    def test_plain_function_roundtrip(self, tilted_frame):
        """Module functions agree with the class methods."""
        oe = OrbitalElements(15000.0, 0.45, 2.2, 5.0, 1.3, -2.5, tilted_frame)
        r, v = keplerian_to_cartesian(oe.a, oe.e, oe.m0, oe.rot, tilted_frame)
        sv = oe.to_state_vector()
        assert np.allclose(r, sv.r)
        assert np.allclose(v, sv.v)

        a, e, inc, lan, ap, m0 = cartesian_to_keplerian(r, v, tilted_frame)
        assert a == pytest.approx(oe.a, rel=1e-10)
        assert_angle_close(m0, oe.m0)


class TestIgnoredAngles:
    """Undefined angles are accepted with a warning and not applied."""

    def test_lan_on_equatorial_warns(self, earth):
        with pytest.warns(UserWarning, match="lan"):
            oe = OrbitalElements(8000.0, 0.2, 0.0, 1.5, 0.4, 0.0, earth)
        reference = OrbitalElements(8000.0, 0.2, 0.0, 0.0, 0.4, 0.0, earth)
        assert np.allclose(oe.to_state_vector().r, reference.to_state_vector().r)

    def test_ap_on_circular_warns(self, earth):
        with pytest.warns(UserWarning, match="ap"):
            oe = OrbitalElements(8000.0, 0.0, 0.5, 1.0, 2.0, 0.3, earth)
        reference = OrbitalElements(8000.0, 0.0, 0.5, 1.0, 0.0, 0.3, earth)
        assert np.allclose(oe.to_state_vector().r, reference.to_state_vector().r)

    def test_stored_value_kept(self, earth):
        with pytest.warns(UserWarning):
            oe = OrbitalElements(8000.0, 0.0, 0.5, 1.0, 2.0, 0.3, earth)
        assert oe.ap == 2.0


class TestUnsupportedStates:
    """Parabolic, hyperbolic and rectilinear states are rejected."""

    def test_hyperbolic(self, earth):
        sv = StateVector([7000, 0, 0], [0, 15.0, 0], earth)
        with pytest.raises(UnsupportedOrbitError):
            sv.to_orbital_elements()

    def test_parabolic(self, earth):
        r = 7000.0
        v_escape = np.sqrt(2*MU_EARTH/r)
        sv = StateVector([r, 0, 0], [0, v_escape, 0], earth)
        with pytest.raises(UnsupportedOrbitError):
            sv.to_orbital_elements()

    def test_radial(self, earth):
        sv = StateVector([7000, 0, 0], [3.0, 0, 0], earth)
        with pytest.raises(UnsupportedOrbitError, match="rectilinear"):
            sv.to_orbital_elements()

    def test_zero_position(self, earth):
        with pytest.raises(UnsupportedOrbitError):
            cartesian_to_keplerian(np.zeros(3), np.array([0, 7.0, 0]), earth)

    def test_unsupported_is_value_error(self, earth):
        sv = StateVector([7000, 0, 0], [0, 15.0, 0], earth)
        with pytest.raises(ValueError):
            sv.to_orbital_elements()
