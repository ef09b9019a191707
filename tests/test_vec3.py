"""Tests for Vec3 class."""

import pytest
import math
import numpy as np

from rayforge.vec3 import Vec3, Point3, Color, dot, cross, unit_vector, reflect, refract


class TestVec3Creation:
    """Test Vec3 construction."""

    def test_default_constructor(self):
        v = Vec3()
        assert v.x == 0.0
        assert v.y == 0.0
        assert v.z == 0.0

    def test_value_constructor(self):
        v = Vec3(1.0, 2.0, 3.0)
        assert v.x == 1.0
        assert v.y == 2.0
        assert v.z == 3.0

    def test_from_array(self):
        arr = np.array([1.0, 2.0, 3.0])
        v = Vec3.from_array(arr)
        assert v.x == 1.0
        assert v.y == 2.0
        assert v.z == 3.0

    def test_color_aliases(self):
        c = Color(0.5, 0.6, 0.7)
        assert c.r == 0.5
        assert c.g == 0.6
        assert c.b == 0.7

    def test_aliases_are_same_type(self):
        assert Point3 is Vec3
        assert Color is Vec3


class TestVec3Arithmetic:
    """Test Vec3 arithmetic operations."""

    def test_negation(self):
        neg = -Vec3(1, 2, 3)
        assert (neg.x, neg.y, neg.z) == (-1, -2, -3)

    def test_addition(self):
        result = Vec3(1, 2, 3) + Vec3(4, 5, 6)
        assert (result.x, result.y, result.z) == (5, 7, 9)

    def test_addition_scalar(self):
        result = Vec3(1, 2, 3) + 10
        assert (result.x, result.y, result.z) == (11, 12, 13)

    def test_subtraction(self):
        result = Vec3(4, 5, 6) - Vec3(1, 2, 3)
        assert (result.x, result.y, result.z) == (3, 3, 3)

    def test_multiplication(self):
        result = Vec3(1, 2, 3) * 2
        assert (result.x, result.y, result.z) == (2, 4, 6)

    def test_reverse_multiplication(self):
        result = 2 * Vec3(1, 2, 3)
        assert (result.x, result.y, result.z) == (2, 4, 6)

    def test_multiplication_vector(self):
        result = Vec3(1, 2, 3) * Vec3(2, 3, 4)
        assert (result.x, result.y, result.z) == (2, 6, 12)

    def test_division(self):
        result = Vec3(2, 4, 6) / 2
        assert (result.x, result.y, result.z) == (1, 2, 3)

    def test_operations_do_not_mutate(self):
        v = Vec3(1, 2, 3)
        _ = v + Vec3(1, 1, 1)
        _ = v * 5
        _ = -v
        assert v == Vec3(1, 2, 3)

    def test_no_component_setters(self):
        v = Vec3(1, 2, 3)
        with pytest.raises(AttributeError):
            v.x = 5
        with pytest.raises(TypeError):
            v[0] = 5


class TestVec3VectorOps:
    """Test Vec3 vector operations."""

    def test_length(self):
        assert Vec3(3, 4, 0).length() == 5.0

    def test_length_squared(self):
        assert Vec3(3, 4, 0).length_squared() == 25.0

    @pytest.mark.parametrize("v", [
        Vec3(3, 4, 0), Vec3(-1, 2, -7), Vec3(1e-3, 0, 0), Vec3(1e6, 1e6, -1e6)
    ])
    def test_unit_has_length_one(self, v):
        assert abs(v.unit().length() - 1.0) < 1e-12
        assert abs(unit_vector(v).length() - 1.0) < 1e-12

    def test_unit_of_zero_vector_is_nan(self):
        u = Vec3(0, 0, 0).unit()
        assert all(math.isnan(c) for c in u)

    def test_dot_product(self):
        assert Vec3(1, 0, 0).dot(Vec3(0, 1, 0)) == 0.0
        assert Vec3(1, 2, 3).dot(Vec3(4, 5, 6)) == 32.0  # 1*4 + 2*5 + 3*6

    def test_dot_bilinear(self):
        a, b, c = Vec3(1, -2, 3), Vec3(0.5, 4, -1), Vec3(-3, 1, 2)
        assert dot(a * 2 + c, b) == pytest.approx(2 * dot(a, b) + dot(c, b))
        assert dot(a, b) == pytest.approx(dot(b, a))

    def test_cross_product(self):
        result = Vec3(1, 0, 0).cross(Vec3(0, 1, 0))
        assert (result.x, result.y, result.z) == (0, 0, 1)

    def test_cross_anticommutative(self):
        a, b = Vec3(1, -2, 3), Vec3(0.5, 4, -1)
        assert cross(a, b) == -cross(b, a)

    def test_cross_bilinear(self):
        a, b, c = Vec3(1, -2, 3), Vec3(0.5, 4, -1), Vec3(-3, 1, 2)
        assert cross(a * 3 + c, b) == cross(a, b) * 3 + cross(c, b)

    def test_cross_is_orthogonal(self):
        a, b = Vec3(1, -2, 3), Vec3(0.5, 4, -1)
        c = cross(a, b)
        assert abs(dot(c, a)) < 1e-12
        assert abs(dot(c, b)) < 1e-12

    def test_reflect(self):
        # Ray coming in at 45 degrees
        incoming = Vec3(1, -1, 0).unit()
        normal = Vec3(0, 1, 0)
        reflected = incoming.reflect(normal)
        assert reflected == Vec3(1, 1, 0).unit()
        assert reflect(incoming, normal) == reflected

    def test_near_zero(self):
        assert Vec3(1e-10, 1e-10, 1e-10).near_zero()
        assert not Vec3(1, 0, 0).near_zero()

    def test_to_array_is_copy(self):
        v = Vec3(1, 2, 3)
        arr = v.to_array()
        arr[0] = 99
        assert v.x == 1


class TestVec3Refract:
    """Test Vec3 refraction."""

    def test_refract_normal_incidence_is_straight(self):
        incoming = Vec3(0, -1, 0)
        normal = Vec3(0, 1, 0)
        refracted = refract(incoming, normal, 1.0 / 1.5)
        assert refracted == Vec3(0, -1, 0)

    def test_refract_matching_indices_keeps_direction(self):
        incoming = Vec3(1, -2, 0.5).unit()
        normal = Vec3(0, 1, 0)
        refracted = incoming.refract(normal, 1.0)
        assert refracted == incoming

    def test_refract_air_to_glass_bends_toward_normal(self):
        incoming = Vec3(1, -1, 0).unit()
        normal = Vec3(0, 1, 0)
        refracted = incoming.refract(normal, 1.0 / 1.5)
        # Snell: sin(out) = sin(in) / 1.5
        sin_in = math.sqrt(0.5)
        assert refracted.x == pytest.approx(sin_in / 1.5)
        assert refracted.y < 0
        assert refracted.length() == pytest.approx(1.0)


class TestVec3Random:
    """Test Vec3 random generation."""

    def test_random(self):
        rng = np.random.default_rng(1)
        for _ in range(100):
            v = Vec3.random(0.5, 1.0, rng=rng)
            assert all(0.5 <= c < 1.0 for c in v)

    def test_random_in_unit_sphere(self):
        rng = np.random.default_rng(2)
        for _ in range(100):
            assert Vec3.random_in_unit_sphere(rng).length_squared() < 1

    def test_random_unit_vector(self):
        rng = np.random.default_rng(3)
        for _ in range(100):
            assert abs(Vec3.random_unit_vector(rng).length() - 1.0) < 1e-10

    def test_random_in_unit_disk(self):
        rng = np.random.default_rng(4)
        for _ in range(100):
            v = Vec3.random_in_unit_disk(rng)
            assert v.z == 0
            assert v.length_squared() < 1

    def test_same_seed_same_vectors(self):
        a = [Vec3.random_unit_vector(np.random.default_rng(7)) for _ in range(3)]
        b = [Vec3.random_unit_vector(np.random.default_rng(7)) for _ in range(3)]
        assert a == b


class TestVec3Comparison:
    """Test Vec3 comparison operations."""

    def test_equality(self):
        assert Vec3(1, 2, 3) == Vec3(1, 2, 3)

    def test_inequality(self):
        assert Vec3(1, 2, 3) != Vec3(1, 2, 4)

    def test_approximate_equality(self):
        assert Vec3(1 + 1e-12, 2, 3) == Vec3(1, 2, 3)

    def test_unhashable(self):
        # Equal vectors within tolerance could not share a hash
        assert Vec3(0, 0, 0) == Vec3(1e-12, 0, 0)
        with pytest.raises(TypeError):
            hash(Vec3(0, 0, 0))


class TestVec3Indexing:
    """Test Vec3 indexing."""

    def test_getitem(self):
        v = Vec3(1, 2, 3)
        assert (v[0], v[1], v[2]) == (1, 2, 3)

    @pytest.mark.parametrize("index", [3, -1, 10])
    def test_out_of_range_raises(self, index):
        with pytest.raises(IndexError):
            Vec3(1, 2, 3)[index]

    def test_iteration(self):
        assert list(Vec3(1, 2, 3)) == [1.0, 2.0, 3.0]
